"""Loaders and converters that feed documents through `normalize`.

Each helper normalizes its input exactly once and leaves I/O failures to the
caller: transport errors from `requests` propagate unchanged, non-success
statuses raise `SvgFetchError`. The DOM round-trip is the one best-effort
path and returns the original element if the normalized text does not parse.
"""

from __future__ import annotations

import logging
import uuid
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Final, Optional
from urllib.parse import quote

import requests
from lxml import etree

from svg_ns_normalizer.normalize.namespace import normalize

SVG_CONTENT_TYPE: Final[str] = "image/svg+xml"
OBJECT_URL_PREFIX: Final[str] = "blob:svg-ns-normalizer/"

# encodeURIComponent leaves these unescaped; `'` is escaped on purpose.
_DATA_URL_SAFE: Final[str] = "-_.!~*()"

_log = logging.getLogger("svg_ns_normalizer.loaders")

LoadCallback = Callable[[Optional[BaseException], Optional[str]], Any]


class SvgFetchError(RuntimeError):
    """Raised when an SVG request completes with a non-success status."""

    def __init__(self, message: str, *, status_code: int, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


def fetch_and_normalize(
    url: str,
    *,
    session: requests.Session | None = None,
    timeout: float | None = None,
    **request_kwargs: Any,
) -> str:
    """GET `url` and return the normalized SVG text."""
    get = session.get if session is not None else requests.get
    response = get(url, timeout=timeout, **request_kwargs)
    if not 200 <= response.status_code < 300:
        raise SvgFetchError(
            f"Failed to fetch SVG: {response.status_code}",
            status_code=response.status_code,
            url=url,
        )
    return normalize(response.text)


_executor_lock = Lock()
_executor: ThreadPoolExecutor | None = None


def _default_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="svg_ns_load")
        return _executor


def load_and_normalize(
    url: str,
    callback: LoadCallback,
    *,
    executor: ThreadPoolExecutor | None = None,
    **fetch_kwargs: Any,
) -> Future:
    """Fetch and normalize on a worker thread, then call `callback(error, text)`.

    Exactly one of `error` and `text` is None. A non-success status arrives as
    `SvgFetchError`, transport errors as the original `requests` exception, and
    anything raised while normalizing as itself. An exception raised by
    `callback` is not caught; it is left on the returned future.
    """

    def _run() -> None:
        try:
            text = fetch_and_normalize(url, **fetch_kwargs)
        except Exception as e:
            _log.warning("load_failed url=%s error=%s", url, e)
            callback(e, None)
            return
        callback(None, text)

    return (executor or _default_executor()).submit(_run)


def encode_data_url(svg_text: str) -> str:
    """Percent-encode already normalized text into a `data:image/svg+xml,` URL."""
    return f"data:{SVG_CONTENT_TYPE}," + quote(svg_text, safe=_DATA_URL_SAFE)


def to_data_url(svg_text: str) -> str:
    """Normalize and percent-encode into a `data:image/svg+xml,` URL."""
    return encode_data_url(normalize(svg_text))


@dataclass(frozen=True)
class Blob:
    data: bytes
    content_type: str = SVG_CONTENT_TYPE

    def text(self, encoding: str = "utf-8") -> str:
        return self.data.decode(encoding)


class ObjectUrlRegistry:
    """In-memory store that hands out `blob:` URLs for normalized documents."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._blobs: dict[str, Blob] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._blobs)

    def create_object_url(self, blob: Blob) -> str:
        url = f"{OBJECT_URL_PREFIX}{uuid.uuid4()}"
        with self._lock:
            self._blobs[url] = blob
        return url

    def resolve(self, url: str) -> Blob | None:
        with self._lock:
            return self._blobs.get(url)

    def revoke_object_url(self, url: str) -> None:
        with self._lock:
            self._blobs.pop(url, None)


default_registry = ObjectUrlRegistry()


def to_blob_url(svg_text: str, *, registry: ObjectUrlRegistry | None = None) -> str:
    """Normalize, store as an `image/svg+xml` blob and return its object URL."""
    normalized = normalize(svg_text)
    blob = Blob(data=normalized.encode("utf-8"))
    return (registry or default_registry).create_object_url(blob)


def resolve_object_url(url: str, *, registry: ObjectUrlRegistry | None = None) -> Blob | None:
    return (registry or default_registry).resolve(url)


def revoke_object_url(url: str, *, registry: ObjectUrlRegistry | None = None) -> None:
    (registry or default_registry).revoke_object_url(url)


def _svg_parser() -> etree.XMLParser:
    # huge_tree: embedded base64 rasters easily exceed libxml2's default text node limit.
    return etree.XMLParser(remove_blank_text=False, resolve_entities=False, huge_tree=True)


def normalize_element(element: Any) -> Any:
    """Serialize an lxml element, normalize it and parse it back.

    Returns a new element, or the original one if the normalized markup fails
    to parse.
    """
    if element is None:
        return element

    svg_text = etree.tostring(element, encoding="unicode", with_tail=False)
    normalized = normalize(svg_text)
    try:
        return etree.fromstring(normalized, parser=_svg_parser())
    except etree.XMLSyntaxError as e:
        _log.error("svg_parse_error error=%s", e)
        return element

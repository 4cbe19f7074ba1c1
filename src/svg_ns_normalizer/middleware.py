"""Opt-in interceptors that normalize SVG at I/O call sites.

Nothing here patches global functions. A caller attaches the response hook to
the `requests.Session` it owns, or wraps the callables it wants sanitized.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar

import requests

from svg_ns_normalizer.loaders import encode_data_url, fetch_and_normalize
from svg_ns_normalizer.normalize.namespace import has_issue, normalize
from svg_ns_normalizer.normalize.svg_detect import is_svg_resource

_log = logging.getLogger("svg_ns_normalizer.middleware")

R = TypeVar("R")


def normalize_svg_response(response: requests.Response, *args: Any, **kwargs: Any) -> requests.Response:
    """`requests` response hook: swap SVG bodies for their normalized text.

    Streamed responses are left alone, since reading the body here would
    consume the stream before the caller sees it.
    """
    if kwargs.get("stream"):
        return response
    if not is_svg_resource(response.url, response.headers.get("content-type")):
        return response

    svg_text = response.text
    if not has_issue(svg_text):
        return response

    normalized = normalize(svg_text)
    encoding = response.encoding or "utf-8"
    body = normalized.encode(encoding, errors="xmlcharrefreplace")
    response._content = body
    response.encoding = encoding
    if "content-length" in response.headers:
        response.headers["Content-Length"] = str(len(body))
    _log.info("response_normalized url=%s chars=%d", response.url, len(normalized))
    return response


def install_response_hook(session: requests.Session) -> requests.Session:
    """Attach `normalize_svg_response` to a session. Repeated calls are no-ops."""
    hooks = session.hooks.setdefault("response", [])
    if normalize_svg_response not in hooks:
        hooks.append(normalize_svg_response)
    return session


def uninstall_response_hook(session: requests.Session) -> requests.Session:
    hooks = session.hooks.get("response", [])
    while normalize_svg_response in hooks:
        hooks.remove(normalize_svg_response)
    return session


class NormalizingSession(requests.Session):
    """`requests.Session` with the SVG response hook preinstalled."""

    def __init__(self) -> None:
        super().__init__()
        install_response_hook(self)


def normalizing(fetch_text: Callable[..., str]) -> Callable[..., str]:
    """Decorate a text-returning fetch function so its result is normalized."""

    @functools.wraps(fetch_text)
    def wrapper(*args: Any, **kwargs: Any) -> str:
        return normalize(fetch_text(*args, **kwargs))

    return wrapper


def wrap_add_svg(
    add_svg: Callable[..., R],
    *,
    fetch: Callable[[str], str] = fetch_and_normalize,
) -> Callable[..., R]:
    """Wrap a host `add_svg(url, ...)` so it receives a normalized data URL.

    When fetching or normalizing fails, the original URL is passed through
    unchanged and a warning is logged.
    """

    @functools.wraps(add_svg)
    def add_normalized_svg(svg_url: str, *args: Any, **kwargs: Any) -> R:
        try:
            data_url = encode_data_url(fetch(svg_url))
        except Exception as e:
            _log.warning("add_svg_normalize_failed url=%s error=%s", svg_url, e)
            return add_svg(svg_url, *args, **kwargs)
        return add_svg(data_url, *args, **kwargs)

    return add_normalized_svg

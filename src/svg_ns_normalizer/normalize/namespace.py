"""Namespace-prefix repair for SVG markup.

Some SVG editors serialize the XLink namespace under a numbered prefix
(`xmlns:ns1="http://www.w3.org/1999/xlink"` plus `ns1:href="..."`). Loaders that
expect `xlink:href` then fail to parse the document. `normalize` renames those
prefixes to `xlink:` with textual rewrites; it is a best-effort transform over
recognized shapes, not an XML processor.
"""

from __future__ import annotations

import re
from typing import Any, Final

from svg_ns_normalizer.normalize.protect import protect

XLINK_NS: Final[str] = "http://www.w3.org/1999/xlink"
SVG_NS: Final[str] = "http://www.w3.org/2000/svg"

_XLINK_URI_PATTERN: Final[str] = r"""["']http://www\.w3\.org/1999/xlink["']"""

XLINK_PREFIX_DECL_RE = re.compile(rf"xmlns:ns(\d+)\s*=\s*{_XLINK_URI_PATTERN}", flags=re.IGNORECASE)
NUMBERED_PREFIX_RE = re.compile(r"ns\d+:", flags=re.IGNORECASE)

_SVG_START_TAG_RE = re.compile(r"(<svg\b)([^>]*?)(/?)>", flags=re.IGNORECASE)
_START_TAG_RE = re.compile(r"<[A-Za-z][^<>]*>")
_XLINK_DECL_ATTR_RE = re.compile(r"""\s+xmlns:xlink\s*=\s*(?:"[^"]*"|'[^']*')""")

_FOREIGN_DECL_RE = re.compile(r"""\s*xmlns:ns\d+\s*=\s*["'][^"']*["']""", flags=re.IGNORECASE)
_PREFIXED_TAG_RE = re.compile(r"<(/?)\s*ns\d+:", flags=re.IGNORECASE)
_PREFIXED_ATTR_RE = re.compile(r"\s+ns\d+:([a-zA-Z][a-zA-Z0-9-]*)\s*=", flags=re.IGNORECASE)
_DEFAULT_SVG_DECLS: Final[tuple[str, str]] = (f'xmlns="{SVG_NS}"', f"xmlns='{SVG_NS}'")


def has_issue(text: Any) -> bool:
    """Return True if a numbered prefix is bound to the XLink namespace."""
    if not text or not isinstance(text, str):
        return False
    return XLINK_PREFIX_DECL_RE.search(text) is not None


def has_numbered_prefixes(text: Any) -> bool:
    """Broader check: any `nsN:` token at all, regardless of what it is bound to."""
    if not text or not isinstance(text, str):
        return False
    return NUMBERED_PREFIX_RE.search(text) is not None


def find_xlink_prefixes(text: str) -> list[str]:
    """Digit groups of every `xmlns:nsN` declaration bound to XLink, in order."""
    return [m.group(1) for m in XLINK_PREFIX_DECL_RE.finditer(text)]


def rename_xlink_attributes(text: str, prefixes: list[str]) -> str:
    for num in prefixes:
        pattern = re.compile(rf"\s+ns{num}:([a-zA-Z][a-zA-Z0-9-]*)\s*=", flags=re.IGNORECASE)
        text = pattern.sub(r" xlink:\1=", text)
    return text


def rename_xlink_declarations(text: str, prefixes: list[str]) -> str:
    for num in prefixes:
        pattern = re.compile(rf"xmlns:ns{num}(\s*=\s*{_XLINK_URI_PATTERN})", flags=re.IGNORECASE)
        text = pattern.sub(r"xmlns:xlink\1", text)
    return dedupe_xlink_declarations(text)


def dedupe_xlink_declarations(text: str) -> str:
    """Keep only the first `xmlns:xlink` declaration inside each start tag."""

    def _fix_tag(m: re.Match[str]) -> str:
        tag = m.group(0)
        decls = list(_XLINK_DECL_ATTR_RE.finditer(tag))
        if len(decls) < 2:
            return tag
        for extra in reversed(decls[1:]):
            tag = tag[: extra.start()] + tag[extra.end() :]
        return tag

    return _START_TAG_RE.sub(_fix_tag, text)


def _add_svg_attribute(text: str, attribute: str) -> str:
    return _SVG_START_TAG_RE.sub(
        lambda m: f"{m.group(1)}{m.group(2)} {attribute}{m.group(3)}>",
        text,
        count=1,
    )


def ensure_xlink_declaration(text: str) -> str:
    """Declare XLink on the first `<svg>` tag when `xlink:href` is used without it."""
    if "xlink:href" in text and "xmlns:xlink" not in text:
        return _add_svg_attribute(text, f'xmlns:xlink="{XLINK_NS}"')
    return text


def strip_numbered_prefixes(text: str) -> str:
    """Drop every remaining numbered prefix and its declaration.

    Element tags (`<ns1:path>`) and attributes (`ns1:d=`) lose the prefix, and
    the SVG default namespace is declared if nothing else declares it.
    """
    text = _FOREIGN_DECL_RE.sub("", text)
    text = _PREFIXED_TAG_RE.sub(r"<\1", text)
    text = _PREFIXED_ATTR_RE.sub(r" \1=", text)
    if not any(decl in text for decl in _DEFAULT_SVG_DECLS):
        text = _add_svg_attribute(text, f'xmlns="{SVG_NS}"')
    return text


def normalize(text: Any, *, strip_foreign_prefixes: bool = False) -> Any:
    """Rewrite XLink-bound numbered prefixes to the standard `xlink:` prefix.

    Base64 image payloads and `#fragment` references are shielded for the whole
    rewrite and come back byte-for-byte. Documents without an XLink-bound
    numbered prefix are returned unchanged.

    With `strip_foreign_prefixes`, numbered prefixes bound to any other
    namespace are removed as well.
    """
    if not text or not isinstance(text, str):
        return text

    protected = protect(text)
    result = protected.text

    prefixes = find_xlink_prefixes(result)
    foreign = strip_foreign_prefixes and NUMBERED_PREFIX_RE.search(result) is not None
    if not prefixes and not foreign:
        return protected.restore(result)

    result = rename_xlink_attributes(result, prefixes)
    result = rename_xlink_declarations(result, prefixes)
    if strip_foreign_prefixes:
        result = strip_numbered_prefixes(result)
    result = ensure_xlink_declaration(result)

    return protected.restore(result)

"""SVG text and SVG resource heuristics."""

from __future__ import annotations

import re
from urllib.parse import urlsplit

_SVG_OPEN_RE = re.compile(r"<svg\b", flags=re.IGNORECASE)
_SVG_CLOSE_RE = re.compile(r"</svg\s*>", flags=re.IGNORECASE)


def looks_like_svg_text(text: str) -> bool:
    """Heuristic check for SVG markup in an arbitrary string (e.g. clipboard text)."""
    if not text:
        return False
    if _SVG_OPEN_RE.search(text) is None:
        return False
    # Close tag is optional in some snippets, but requiring it reduces false positives.
    if _SVG_CLOSE_RE.search(text) is None:
        return False
    return True


def svg_markup_span(text: str) -> tuple[int, int] | None:
    """`(start, end)` of the first `<svg` through the last `</svg>`, or None."""
    if not looks_like_svg_text(text):
        return None

    open_m = _SVG_OPEN_RE.search(text)
    close_m = None
    for m in _SVG_CLOSE_RE.finditer(text):
        close_m = m
    if open_m is None or close_m is None or close_m.end() <= open_m.start():
        return None
    return open_m.start(), close_m.end()


def extract_svg_markup(text: str) -> str | None:
    """Return the substring from the first `<svg` to the last `</svg>`.

    None if the input does not contain a plausible SVG document.
    """
    span = svg_markup_span(text)
    if span is None:
        return None
    start, end = span
    return text[start:end]


def is_svg_resource(url: str | None, content_type: str | None = None) -> bool:
    """True if a fetched resource should be treated as SVG.

    Matches on the URL path suffix (query and fragment ignored) or on an
    `image/svg...` content type.
    """
    if url:
        path = urlsplit(str(url)).path
        if path.lower().endswith(".svg"):
            return True
    if content_type and "image/svg" in content_type.lower():
        return True
    return False

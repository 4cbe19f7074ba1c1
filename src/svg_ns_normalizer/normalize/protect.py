"""Placeholder protection for regions the namespace rewrite must not touch.

Two kinds of spans are shielded before any prefix rewriting happens:
- quoted base64 image data URLs (payloads may span lines),
- quoted internal fragment references (`url(#id)` and `href="#id"` values).

Each span is swapped for a placeholder token and swapped back afterwards with
plain `str.replace`, so the restored content is never reinterpreted as a regex
replacement template.
"""

from __future__ import annotations

import re
import secrets
from dataclasses import dataclass, field
from typing import Final

# Private-use code point: legal in XML text, never produced by SVG editors.
_MARKER_CHAR: Final[str] = "\ue000"
_TOKEN_END: Final[str] = "\ue001"

BASE64_DOUBLE_QUOTED_RE = re.compile(r'"data:image/[^;]+;base64,[\s\S]*?"')
BASE64_SINGLE_QUOTED_RE = re.compile(r"'data:image/[^;]+;base64,[\s\S]*?'")

CSS_URL_FRAGMENT_RE = re.compile(r"""url\(\s*["']?#[^)"']*["']?\s*\)""", flags=re.IGNORECASE)
# Only the quoted value is captured; the attribute name stays visible so an
# XLink-bound `nsN:href` can still be renamed.
HREF_FRAGMENT_RE = re.compile(
    r"""(?P<name>xlink:href|ns\d+:href|href)(?P<eq>\s*=\s*)(?P<value>["']#[^"']*["'])""",
    flags=re.IGNORECASE,
)


def _new_marker(text: str) -> str:
    while True:
        marker = f"{_MARKER_CHAR}{secrets.token_hex(4)}"
        if marker not in text:
            return marker


@dataclass
class PlaceholderPool:
    """Ordered list of protected substrings addressed by sequential tokens."""

    marker: str
    kind: str
    originals: list[str] = field(default_factory=list)

    def token(self, index: int) -> str:
        return f"{self.marker}{self.kind}{index}{_TOKEN_END}"

    def allocate(self, original: str) -> str:
        index = len(self.originals)
        self.originals.append(original)
        return self.token(index)

    def restore(self, text: str) -> str:
        for index, original in enumerate(self.originals):
            text = text.replace(self.token(index), original)
        return text

    def __len__(self) -> int:
        return len(self.originals)


@dataclass
class ProtectedText:
    """Document text with its protected spans swapped out."""

    text: str
    base64: PlaceholderPool
    fragments: PlaceholderPool

    def restore(self, text: str | None = None) -> str:
        out = self.text if text is None else text
        out = self.fragments.restore(out)
        return self.base64.restore(out)


def protect_base64(text: str, pool: PlaceholderPool) -> str:
    """Replace double- then single-quoted base64 image data URLs with placeholders."""
    text = BASE64_DOUBLE_QUOTED_RE.sub(lambda m: pool.allocate(m.group(0)), text)
    return BASE64_SINGLE_QUOTED_RE.sub(lambda m: pool.allocate(m.group(0)), text)


def protect_fragments(text: str, pool: PlaceholderPool) -> str:
    """Replace `url(#...)` functions and `#...` href values with placeholders."""
    text = CSS_URL_FRAGMENT_RE.sub(lambda m: pool.allocate(m.group(0)), text)
    return HREF_FRAGMENT_RE.sub(
        lambda m: m.group("name") + m.group("eq") + pool.allocate(m.group("value")),
        text,
    )


def protect(text: str) -> ProtectedText:
    """Run both protection passes. Base64 goes first since a payload may look like a fragment."""
    marker = _new_marker(text)
    base64 = PlaceholderPool(marker=marker, kind="B")
    fragments = PlaceholderPool(marker=marker, kind="F")
    out = protect_base64(text, base64)
    out = protect_fragments(out, fragments)
    return ProtectedText(text=out, base64=base64, fragments=fragments)

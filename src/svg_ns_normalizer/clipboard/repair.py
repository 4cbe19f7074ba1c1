"""Repair SVG markup embedded in copied text.

Copied text is often more than the `<svg>` element: an XML prolog, a DOCTYPE,
or a snippet pasted out of a larger file. Only the markup is normalized; the
rest of the copied text is kept as it was.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from svg_ns_normalizer.normalize.namespace import has_numbered_prefixes
from svg_ns_normalizer.normalize.normalizer import NormalizationResult
from svg_ns_normalizer.normalize.svg_detect import svg_markup_span


@dataclass(frozen=True)
class ClipboardRepair:
    source: str
    text: str
    markup: NormalizationResult

    @property
    def changed(self) -> bool:
        return self.text != self.source


def repair_clipboard_text(
    text: str,
    normalize_markup: Callable[[str], NormalizationResult],
    *,
    max_chars: int,
) -> ClipboardRepair | None:
    """Normalize the SVG markup inside `text` and splice it back in place.

    None when the text is over `max_chars`, holds no SVG markup, or the markup
    has no numbered namespace prefix.
    """
    if not text or len(text) > int(max_chars):
        return None
    span = svg_markup_span(text)
    if span is None:
        return None

    start, end = span
    if not has_numbered_prefixes(text[start:end]):
        return None

    result = normalize_markup(text[start:end])
    return ClipboardRepair(source=text, text=text[:start] + result.text + text[end:], markup=result)

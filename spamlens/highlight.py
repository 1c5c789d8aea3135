"""
Highlight Renderer

Wraps flagged character spans in a single inline marker for display.

Spans from different rules may overlap (a URL inside a phone-like
token, "free" inside "free gift"). They are merged first and every
merged region is wrapped exactly once, so the output never nests
markers. The text itself is not escaped: removing the marker gives
back the input unchanged.
"""

from __future__ import annotations

import re
from typing import Iterable

HIGHLIGHT_OPEN = '<span class="spam-highlight">'
HIGHLIGHT_CLOSE = "</span>"

_MARKER = re.compile(re.escape(HIGHLIGHT_OPEN) + "|" + re.escape(HIGHLIGHT_CLOSE))


def merge_spans(spans: Iterable[tuple[int, int]]) -> list[tuple[int, int]]:
    """Sort spans and merge the ones that overlap. Empty spans are dropped."""
    merged: list[list[int]] = []
    for start, end in sorted(s for s in spans if s[1] > s[0]):
        if merged and start < merged[-1][1]:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])
    return [(s, e) for s, e in merged]


def render_highlights(text: str, spans: Iterable[tuple[int, int]]) -> str:
    """Return text with each merged span wrapped in the highlight marker."""
    parts = []
    cursor = 0
    for start, end in merge_spans(spans):
        parts.append(text[cursor:start])
        parts.append(f"{HIGHLIGHT_OPEN}{text[start:end]}{HIGHLIGHT_CLOSE}")
        cursor = end
    parts.append(text[cursor:])
    return "".join(parts)


def strip_highlights(markup: str) -> str:
    """Remove highlight markers, recovering the plain text."""
    return _MARKER.sub("", markup)

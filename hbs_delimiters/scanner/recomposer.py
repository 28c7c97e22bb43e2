"""Two-tier segment recomposition and native assembly.

Provides:
  - ``recompose()``: merge a safe-tag pass and an escaped-tag pass into one
    ordered segment list.
  - ``assemble()``:  render a segment list into native pybars template text.

SCAN ORDER (recompose):
  1. Safe pair over the whole text → Literal / Tag(SAFE).
  2. Escaped pair over the Literal segments ONLY → Literal / Tag(ESCAPED).

Safe markers usually wrap the escaped markers' characters (``<<% %>>`` around
``<% %>``). Scanning the escaped pair first would stop at the inner boundary
of a safe tag and split it; tag segments from pass 1 are therefore opaque to
pass 2.
"""

from __future__ import annotations

import re
from typing import Iterable

from hbs_delimiters.models.segment import LiteralSegment, Segment, TagSegment, TagVariant
from hbs_delimiters.scanner.engine import scan
from hbs_delimiters.scanner.guard import SentinelGuard


def recompose(
    text: str,
    safe_matcher: re.Pattern[str],
    escaped_matcher: re.Pattern[str],
) -> list[Segment]:
    """Scan ``text`` for safe tags, then for escaped tags in what remains."""
    segments: list[Segment] = []
    for segment in scan(text, safe_matcher, TagVariant.SAFE):
        if isinstance(segment, TagSegment):
            segments.append(segment)
        else:
            segments.extend(scan(segment.text, escaped_matcher, TagVariant.ESCAPED))
    return segments


def assemble(segments: Iterable[Segment], guard: SentinelGuard) -> str:
    """Join ``segments`` into native template text.

    Literal text is protected by ``guard``; tags are wrapped in their native
    syntax only here.
    """
    parts: list[str] = []
    for segment in segments:
        if isinstance(segment, LiteralSegment):
            parts.append(guard.protect(segment.text))
        else:
            parts.append(segment.to_native())
    return "".join(parts)

"""Tag scanner.

Provides:
  - ``scan()``:    split template text into literal and tag segments.
  - ``replace()``: one scan-and-rewrite pass into native ``{{...}}`` syntax.
  - ``escape()``:  neutralize existing native tags as ``\\{{...}}``.

INVARIANTS:
  - Synchronous, bounded by input length, no I/O.
  - Matches are found left to right and never overlap; the inner capture is
    non-greedy so a tag ends at the NEAREST close marker.
  - The captured inner text (group 1) is kept verbatim, whitespace included.
  - An open marker with no later close marker never matches and stays in
    literal text. This is not an error.
"""

from __future__ import annotations

import re
from typing import Optional

from hbs_delimiters.constants import NATIVE_ESCAPE_PREFIX, NATIVE_SOURCE
from hbs_delimiters.models.segment import LiteralSegment, Segment, TagSegment, TagVariant
from hbs_delimiters.scanner.cache import MatcherCache, get_matcher


def scan(
    text: str,
    matcher: re.Pattern[str],
    variant: TagVariant = TagVariant.ESCAPED,
) -> list[Segment]:
    """Decompose ``text`` into an ordered list of segments.

    Args:
        text:    Template source (or one literal piece of it).
        matcher: Compiled matcher whose group 1 is the tag's inner text.
        variant: Output family assigned to every tag found by this matcher.

    Returns:
        Segments in source order. Empty literals are never emitted between or
        around tags; when nothing matches the result is ``[LiteralSegment(text)]``.
    """
    segments: list[Segment] = []
    last_end = 0
    for m in matcher.finditer(text):
        if m.start() > last_end:
            segments.append(LiteralSegment(text[last_end:m.start()]))
        segments.append(TagSegment(m.group(1), variant))
        last_end = m.end()

    if not segments:
        return [LiteralSegment(text)]
    if last_end < len(text):
        segments.append(LiteralSegment(text[last_end:]))
    return segments


def replace(
    text: str,
    source: str,
    escape: bool = False,
    cache: Optional[MatcherCache] = None,
) -> str:
    """Rewrite every tag matched by ``source`` into native ``{{inner}}`` syntax.

    Literal text is copied unchanged: no guard is applied here.

    Args:
        text:   Template text.
        source: Matcher source, e.g. from ``build_source()``.
        escape: If True, each rewritten tag is prefixed with a backslash so the
                engine treats it as literal text.
        cache:  Matcher cache to use (default: process-wide).

    Example:
        >>> replace("Hi <%= name %>", build_source(LiteralToken("<%="), LiteralToken("%>")))
        'Hi {{ name }}'
    """
    prefix = NATIVE_ESCAPE_PREFIX if escape else ""
    parts: list[str] = []
    for segment in scan(text, get_matcher(source, cache)):
        if isinstance(segment, TagSegment):
            parts.append(prefix + segment.to_native())
        else:
            parts.append(segment.text)
    return "".join(parts)


def escape(text: str, cache: Optional[MatcherCache] = None) -> str:
    """Backslash-escape every native ``{{...}}`` tag already present in ``text``."""
    return replace(text, NATIVE_SOURCE, escape=True, cache=cache)

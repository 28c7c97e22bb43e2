"""Delimiter normalizer.

Turns each configured marker into a fragment that can be embedded in a larger
regular expression, and builds the matcher source for an open/close pair.

Provides:
  - ``NormalizedDelimiter``: fragment + ``is_pattern`` flag.
  - ``escape_literal()``:    backslash-escape regex metacharacters only.
  - ``pattern_fragment()``:  strip position anchors from a pattern source.
  - ``normalize()`` / ``normalize_open()``: token → ``NormalizedDelimiter``.
  - ``build_source()``:      ``<open>([\\s\\S]+?)<close>``: the cache key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from hbs_delimiters.constants import OPEN_DISAMBIGUATION, TAG_CONTENT
from hbs_delimiters.models.delimiter import DelimiterToken, LiteralToken, PatternToken

# Exactly the characters that are special in a regular expression.
# re.escape() is not used: it also escapes characters like "&", "#" and
# whitespace, and literal markers must otherwise be kept verbatim.
_METACHARACTERS_RE = re.compile(r"[.*+?^${}()|\[\]\\]")


@dataclass(frozen=True)
class NormalizedDelimiter:
    """A marker ready for embedding in a matcher source."""

    fragment: str
    is_pattern: bool


def escape_literal(text: str) -> str:
    """Prefix every regex metacharacter in ``text`` with a backslash."""
    return _METACHARACTERS_RE.sub(r"\\\g<0>", text)


def pattern_fragment(source: str) -> str:
    """Strip a leading ``^`` and a trailing unescaped ``$`` from a pattern source.

    Anchors are meaningless once the pattern is a sub-fragment of a matcher.
    """
    if source.startswith("^"):
        source = source[1:]
    if source.endswith("$"):
        body = source[:-1]
        # An odd run of backslashes escapes the "$" itself.
        if (len(body) - len(body.rstrip("\\"))) % 2 == 0:
            source = body
    return source


def normalize(token: DelimiterToken) -> NormalizedDelimiter:
    if isinstance(token, PatternToken):
        return NormalizedDelimiter(pattern_fragment(token.source), is_pattern=True)
    return NormalizedDelimiter(escape_literal(token.text), is_pattern=False)


def normalize_open(token: DelimiterToken) -> NormalizedDelimiter:
    """Normalize an open marker, adding the ``=`` disambiguation lookahead.

    A literal open marker that does not already end in ``=`` must not match
    when the next character is ``=``, so ``<%`` leaves ``<%=`` tags alone.
    Pattern markers are trusted to encode their own disambiguation, and
    should use non-capturing groups: tag content is always group 1.
    """
    normalized = normalize(token)
    if isinstance(token, LiteralToken) and not normalized.fragment.endswith("="):
        return NormalizedDelimiter(normalized.fragment + OPEN_DISAMBIGUATION, is_pattern=False)
    return normalized


def build_source(open_token: DelimiterToken, close_token: DelimiterToken) -> str:
    """Return the matcher source for one open/close pair."""
    return normalize_open(open_token).fragment + TAG_CONTENT + normalize(close_token).fragment

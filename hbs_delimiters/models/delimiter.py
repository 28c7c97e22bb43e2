"""Delimiter configuration types.

Provides:
  - ``LiteralToken`` / ``PatternToken``: the two kinds of delimiter marker.
  - ``to_token()``: turn a user-supplied ``str`` / ``re.Pattern`` into a token.
  - ``DelimiterSet``: one single-tier (``open, close``) or two-tier
    (``open, close, open_safe, close_safe``) configuration.
  - ``DelimiterConfigError``: the only exception this package raises itself.

A ``DelimiterSet`` is created once per configuration and lives as long as
that configuration; it holds no resources.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Union

from hbs_delimiters.constants import (
    NATIVE_CLOSE,
    NATIVE_OPEN,
    NATIVE_SAFE_CLOSE,
    NATIVE_SAFE_OPEN,
)


# ─── Exceptions ───────────────────────────────────────────────────────────────


class DelimiterConfigError(ValueError):
    """Raised when a delimiter configuration is malformed or ambiguous.

    Errors raised by pybars while compiling or rendering a rewritten template
    are NOT wrapped in this exception: they propagate unchanged.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ─── Tokens ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class LiteralToken:
    """A marker given as plain text, e.g. ``"<%"``. Regex metacharacters are escaped."""

    text: str


@dataclass(frozen=True)
class PatternToken:
    """A marker given as a regular expression, e.g. ``re.compile(r"<%-?")``.

    Fields:
        source: Pattern source text. Embedded as-is (not re-escaped).
        flags:  Flags of the original compiled pattern. Recorded for reference
                only: they are dropped when the fragment is embedded.
    """

    source: str
    flags: int = 0


DelimiterToken = Union[LiteralToken, PatternToken]


def to_token(value: Any) -> DelimiterToken:
    """Convert a user-supplied delimiter into a ``DelimiterToken``.

    Raises:
        DelimiterConfigError: if ``value`` is neither a string, a compiled
            pattern nor an existing token, or is an empty string.
    """
    if isinstance(value, (LiteralToken, PatternToken)):
        return value
    if isinstance(value, str):
        if not value:
            raise DelimiterConfigError("Delimiter markers must not be empty strings")
        return LiteralToken(value)
    if isinstance(value, re.Pattern):
        if not isinstance(value.pattern, str):
            raise DelimiterConfigError(
                f"Delimiter patterns must be text patterns, got bytes: {value.pattern!r}"
            )
        return PatternToken(value.pattern, value.flags)
    raise DelimiterConfigError(
        f"Delimiter must be a string or compiled pattern, got {type(value).__name__}"
    )


def _is_literal(token: Optional[DelimiterToken], text: str) -> bool:
    return isinstance(token, LiteralToken) and token.text == text


# ─── DelimiterSet ─────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class DelimiterSet:
    """Custom tag markers for one configuration.

    Single-tier sets only define ``open`` / ``close``; every tag they match is
    rewritten to an escaped native tag. Two-tier sets add ``open_safe`` /
    ``close_safe`` for tags rewritten to the unescaped triple-stash form.

    INVARIANT: ``open != close`` is required for correct matching but is not
    enforced. For two-tier sets the safe pair must not share an open or a close
    marker with the escaped pair (checked in ``__post_init__``).
    """

    open: DelimiterToken
    close: DelimiterToken
    open_safe: Optional[DelimiterToken] = None
    close_safe: Optional[DelimiterToken] = None

    def __post_init__(self) -> None:
        if (self.open_safe is None) != (self.close_safe is None):
            raise DelimiterConfigError(
                "open_safe and close_safe must be configured together"
            )
        if self.is_two_tier:
            # Both tiers would claim the same span; which one wins is undefined.
            if self.open_safe == self.open:
                raise DelimiterConfigError(
                    f"Safe open marker {self.open_safe!r} is identical to the escaped open marker"
                )
            if self.close_safe == self.close:
                raise DelimiterConfigError(
                    f"Safe close marker {self.close_safe!r} is identical to the escaped close marker"
                )

    @classmethod
    def from_list(cls, values: Sequence[Any]) -> "DelimiterSet":
        """Build a set from ``[open, close]`` or ``[open, close, open_safe, close_safe]``.

        Each element is a string or a compiled pattern.

        Raises:
            DelimiterConfigError: on any other length or element type.
        """
        if isinstance(values, (str, bytes)) or len(values) not in (2, 4):
            raise DelimiterConfigError(
                "Delimiters must be a list of 2 (open, close) or "
                "4 (open, close, open_safe, close_safe) markers"
            )
        tokens = [to_token(v) for v in values]
        return cls(*tokens)

    @classmethod
    def coerce(cls, value: Union["DelimiterSet", Sequence[Any]]) -> "DelimiterSet":
        """Return ``value`` unchanged if it is already a set, else ``from_list(value)``."""
        if isinstance(value, cls):
            return value
        return cls.from_list(value)

    @property
    def is_two_tier(self) -> bool:
        return self.open_safe is not None

    @property
    def is_native(self) -> bool:
        """True when the markers are pybars' own; remapping is then a no-op."""
        if not (_is_literal(self.open, NATIVE_OPEN) and _is_literal(self.close, NATIVE_CLOSE)):
            return False
        if not self.is_two_tier:
            return True
        return (
            _is_literal(self.open_safe, NATIVE_SAFE_OPEN)
            and _is_literal(self.close_safe, NATIVE_SAFE_CLOSE)
        )

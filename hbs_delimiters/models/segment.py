"""Segment types produced by the tag scanner.

An ordered list of segments is a complete decomposition of one template:
concatenating each segment's native form reproduces a template pybars can
compile. Segment lists are created per compile and hold no resources.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from hbs_delimiters.constants import (
    NATIVE_CLOSE,
    NATIVE_OPEN,
    NATIVE_SAFE_CLOSE,
    NATIVE_SAFE_OPEN,
)


class TagVariant(str, Enum):
    """Output family of a tag."""

    ESCAPED = "escaped"   # {{inner}}: pybars HTML-escapes the value
    SAFE = "safe"         # {{{inner}}}: emitted unescaped


@dataclass(frozen=True)
class LiteralSegment:
    """Template text outside any custom tag."""

    text: str


@dataclass(frozen=True)
class TagSegment:
    """A custom tag: its opaque inner expression and output family.

    The native wrapper is only chosen when ``to_native()`` is called at
    assembly time.
    """

    inner: str
    variant: TagVariant = TagVariant.ESCAPED

    def to_native(self) -> str:
        if self.variant is TagVariant.SAFE:
            return NATIVE_SAFE_OPEN + self.inner + NATIVE_SAFE_CLOSE
        return NATIVE_OPEN + self.inner + NATIVE_CLOSE


Segment = Union[LiteralSegment, TagSegment]

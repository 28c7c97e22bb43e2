"""Native-syntax guard.

Braces and backslashes that appear in literal template text (outside any
custom tag) would otherwise be read by pybars as native syntax once the
rewritten tags sit next to them, e.g. ``{<<name>>}`` → ``{{{name}}}``.

Strategy: every guarded character in a literal segment is swapped for a
long sentinel before the native tags are written, and the sentinels are
swapped back after pybars has rendered.

ORDER INVARIANTS:
  - ``protect()`` runs on literal segments only, BEFORE native tags are
    emitted, so generated tag syntax is never touched.
  - ``restore()`` runs on the final rendered string only, AFTER the full
    compile-then-render cycle, so pybars output other than the sentinels is
    never altered.
"""

from __future__ import annotations

import re
from typing import Mapping

from hbs_delimiters.constants import GUARDED_CHARACTERS


class SentinelGuard:
    """Swap native marker characters for sentinels and back.

    Sentinels are restored to their original character by ``restore()``;
    ``strip()`` removes them instead, for views where the protected characters
    must not appear at all.
    """

    def __init__(self, sentinels: Mapping[str, str] = GUARDED_CHARACTERS) -> None:
        self._sentinels = dict(sentinels)
        self._protect_table = str.maketrans(self._sentinels)
        self._originals = {sentinel: char for char, sentinel in self._sentinels.items()}
        self._sentinel_re = re.compile(
            "|".join(re.escape(s) for s in sorted(self._originals, key=len, reverse=True))
        )

    def protect(self, text: str) -> str:
        return text.translate(self._protect_table)

    def restore(self, text: str) -> str:
        return self._sentinel_re.sub(lambda m: self._originals[m.group(0)], text)

    def strip(self, text: str) -> str:
        return self._sentinel_re.sub("", text)


default_guard = SentinelGuard()

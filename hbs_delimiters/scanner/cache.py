"""Matcher cache: compiled matchers memoized by source string.

Keyed by the matcher *source*, never by configuration identity, so two
independently built but textually identical delimiter sets share one
compiled pattern. There is no eviction: the cache grows with the number of
distinct delimiter configurations, not with template count or size.

Thread-safety:
    ``get()`` holds a ``threading.Lock`` around the lookup-then-insert so a
    source is compiled at most once even when first requested concurrently.
"""

from __future__ import annotations

import re
import threading
from typing import Optional

from hbs_delimiters.utils.logger import get_logger

logger = get_logger(__name__)


class MatcherCache:
    """Process-lifetime store of compiled matchers.

    Usage:
        cache = MatcherCache()
        matcher = cache.get(build_source(open_token, close_token))

    ``re.error`` from an invalid source propagates to the caller and nothing
    is stored.
    """

    def __init__(self) -> None:
        self._matchers: dict[str, re.Pattern[str]] = {}
        self._lock = threading.Lock()

    def get(self, source: str) -> re.Pattern[str]:
        """Return the compiled matcher for ``source``, compiling it on first use."""
        with self._lock:
            matcher = self._matchers.get(source)
            if matcher is None:
                matcher = re.compile(source)
                self._matchers[source] = matcher
                logger.debug("Matcher compiled", source=source, cache_size=len(self._matchers))
            return matcher

    def clear(self) -> None:
        with self._lock:
            self._matchers.clear()

    def __contains__(self, source: object) -> bool:
        with self._lock:
            return source in self._matchers

    def __len__(self) -> int:
        with self._lock:
            return len(self._matchers)


# ─── Process-wide default ─────────────────────────────────────────────────────

default_cache = MatcherCache()


def get_matcher(source: str, cache: Optional[MatcherCache] = None) -> re.Pattern[str]:
    """Return the compiled matcher for ``source`` from ``cache`` (default: process-wide)."""
    if cache is None:
        cache = default_cache
    return cache.get(source)

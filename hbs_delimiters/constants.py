"""Shared constants for hbs-delimiters.

Native Handlebars markers, the tag-content character class, guard sentinels
and logging thresholds are defined here. No magic strings in other modules:
import from here.
"""

# ─── Native Handlebars syntax ────────────────────────────────────────────────

# Escaped (HTML-escaped output) tag markers.
NATIVE_OPEN: str = "{{"
NATIVE_CLOSE: str = "}}"

# Safe (unescaped output) tag markers: "triple-stash".
NATIVE_SAFE_OPEN: str = "{{{"
NATIVE_SAFE_CLOSE: str = "}}}"

# Backslash prefix that marks a native tag as literal text.
NATIVE_ESCAPE_PREFIX: str = "\\"

# ─── Matcher sources ─────────────────────────────────────────────────────────

# Inner capture of every matcher: any character including newlines, non-greedy,
# so a tag ends at its nearest close marker.
TAG_CONTENT: str = r"([\s\S]+?)"

# Lookahead appended to literal open markers so "<%" never consumes "<%=".
OPEN_DISAMBIGUATION: str = "(?!=)"

# Matcher source for native double-marker tags. Used by escape().
NATIVE_SOURCE: str = r"\{\{" + TAG_CONTENT + r"\}\}"

# ─── Guard sentinels ─────────────────────────────────────────────────────────

# Unicode Private Use Area characters bracket each sentinel. They carry no
# meaning for pybars and are not produced by ordinary user content.
_PUA = "\ue000"

SENTINEL_OPEN_CURLY: str = f"{_PUA}HBSDELIM_OPEN_CURLY{_PUA}"
SENTINEL_CLOSE_CURLY: str = f"{_PUA}HBSDELIM_CLOSE_CURLY{_PUA}"
SENTINEL_BACKSLASH: str = f"{_PUA}HBSDELIM_BACKSLASH{_PUA}"

# Character → sentinel for every native marker character guarded in literal text.
GUARDED_CHARACTERS: dict[str, str] = {
    "{": SENTINEL_OPEN_CURLY,
    "}": SENTINEL_CLOSE_CURLY,
    "\\": SENTINEL_BACKSLASH,
}

# ─── Logging ─────────────────────────────────────────────────────────────────

# Template compiles slower than this are logged at WARNING instead of DEBUG.
SLOW_COMPILE_THRESHOLD_MS: float = 50.0

# ─── Config files ────────────────────────────────────────────────────────────

SUPPORTED_CONFIG_VERSION: int = 1

"""Unit tests for hbs_delimiters/scanner/guard.py."""

from __future__ import annotations

from hbs_delimiters.constants import (
    SENTINEL_BACKSLASH,
    SENTINEL_CLOSE_CURLY,
    SENTINEL_OPEN_CURLY,
)
from hbs_delimiters.scanner.guard import SentinelGuard, default_guard


class TestSentinelGuard:
    def test_protect_replaces_each_guarded_character(self) -> None:
        assert default_guard.protect("{a}\\") == (
            SENTINEL_OPEN_CURLY + "a" + SENTINEL_CLOSE_CURLY + SENTINEL_BACKSLASH
        )

    def test_protected_text_has_no_native_characters(self) -> None:
        protected = default_guard.protect("{{ name }} {{{ x }}} \\{{y}}")
        assert "{" not in protected
        assert "}" not in protected
        assert "\\" not in protected

    def test_restore_reverses_protect(self) -> None:
        text = "{%= name %}{{ name }}{{{ name }}} C:\\dir"
        assert default_guard.restore(default_guard.protect(text)) == text

    def test_restore_leaves_other_text_alone(self) -> None:
        assert default_guard.restore("plain &amp; {x}") == "plain &amp; {x}"

    def test_strip_removes_sentinels(self) -> None:
        assert default_guard.strip(default_guard.protect("{a}")) == "a"

    def test_text_without_guarded_characters_unchanged(self) -> None:
        assert default_guard.protect("<% name %>") == "<% name %>"

    def test_lookalike_user_text_not_restored(self) -> None:
        assert default_guard.restore("__OPEN_CURLY__ HBSDELIM_OPEN_CURLY") == (
            "__OPEN_CURLY__ HBSDELIM_OPEN_CURLY"
        )

    def test_custom_sentinels(self) -> None:
        guard = SentinelGuard({"{": "<<LB>>"})
        assert guard.protect("{x}") == "<<LB>>x}"
        assert guard.restore("<<LB>>x}") == "{x}"

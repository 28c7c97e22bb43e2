"""Unit tests for hbs_delimiters/config.py: delimiter config file loading.

Covers:
  - Missing path / missing file → native defaults, no exception
  - Missing or unsupported 'version' → DelimiterConfigError
  - Invalid YAML / non-mapping documents → DelimiterConfigError
  - Single-tier, two-tier and list-form delimiter sections
  - Pattern markers with flags
"""

from __future__ import annotations

import re
import textwrap
from typing import Any

import pytest

from hbs_delimiters.config import SUPPORTED_VERSIONS, DelimiterConfig, load_config
from hbs_delimiters.models.delimiter import (
    DelimiterConfigError,
    DelimiterSet,
    LiteralToken,
    PatternToken,
)


def _write(tmp_path: Any, content: str) -> str:
    config_file = tmp_path / "delimiters.yaml"
    config_file.write_text(textwrap.dedent(content))
    return str(config_file)


# ─── Defaults ─────────────────────────────────────────────────────────────────


class TestDefaults:
    def test_defaults_are_native(self) -> None:
        config = DelimiterConfig.defaults()
        assert config.version == 1
        assert config.delimiters.is_native is True
        assert config.path is None

    def test_no_path_returns_defaults(self) -> None:
        assert load_config() == DelimiterConfig.defaults()

    def test_nonexistent_path_returns_defaults(self) -> None:
        config = load_config(config_path="/nonexistent/path/delimiters.yaml")
        assert isinstance(config, DelimiterConfig)
        assert config.delimiters.is_native is True

    def test_supported_versions(self) -> None:
        assert SUPPORTED_VERSIONS == frozenset({1})


# ─── Validation ───────────────────────────────────────────────────────────────


class TestValidation:
    def test_missing_version(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            delimiters:
              open: "<%"
              close: "%>"
        """)
        with pytest.raises(DelimiterConfigError, match="version"):
            load_config(path)

    def test_empty_file(self, tmp_path: Any) -> None:
        path = _write(tmp_path, "")
        with pytest.raises(DelimiterConfigError, match="version"):
            load_config(path)

    def test_unsupported_version(self, tmp_path: Any) -> None:
        path = _write(tmp_path, "version: 2\n")
        with pytest.raises(DelimiterConfigError, match="Unsupported config version: 2"):
            load_config(path)

    @pytest.mark.parametrize("raw_version", ["[1]", "{v: 1}", "'1'", "true", "1.0"])
    def test_non_integer_version(self, tmp_path: Any, raw_version: str) -> None:
        path = _write(tmp_path, f"version: {raw_version}\n")
        with pytest.raises(DelimiterConfigError, match="Unsupported config version"):
            load_config(path)

    def test_invalid_yaml(self, tmp_path: Any) -> None:
        path = _write(tmp_path, "version: 1\ndelimiters: [unclosed\n")
        with pytest.raises(DelimiterConfigError, match="Failed to parse"):
            load_config(path)

    def test_scalar_document(self, tmp_path: Any) -> None:
        path = _write(tmp_path, "just a string\n")
        with pytest.raises(DelimiterConfigError, match="not a valid YAML mapping"):
            load_config(path)

    def test_missing_close(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters:
              open: "<%"
        """)
        with pytest.raises(DelimiterConfigError, match="delimiters.close"):
            load_config(path)

    def test_non_string_marker(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters:
              open: 42
              close: "%>"
        """)
        with pytest.raises(DelimiterConfigError, match="delimiters.open"):
            load_config(path)

    def test_invalid_pattern(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters:
              open: {pattern: "(<%"}
              close: "%>"
        """)
        with pytest.raises(DelimiterConfigError, match="invalid pattern"):
            load_config(path)

    def test_unknown_flag(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters:
              open: {pattern: "<%", flags: [NOT_A_FLAG]}
              close: "%>"
        """)
        with pytest.raises(DelimiterConfigError, match="unknown regex flag"):
            load_config(path)

    def test_half_safe_pair(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters:
              open: "<%"
              close: "%>"
              open_safe: "<<%"
        """)
        with pytest.raises(DelimiterConfigError):
            load_config(path)


# ─── Successful loads ─────────────────────────────────────────────────────────


class TestLoad:
    def test_single_tier(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters:
              open: "<%"
              close: "%>"
        """)
        config = load_config(path)
        assert config.delimiters == DelimiterSet.from_list(["<%", "%>"])
        assert config.path == path

    def test_two_tier(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters:
              open: "<%"
              close: "%>"
              open_safe: "<<%"
              close_safe: "%>>"
        """)
        config = load_config(path)
        assert config.delimiters.is_two_tier is True
        assert config.delimiters.open_safe == LiteralToken("<<%")

    def test_list_form(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters: ["<<", ">>"]
        """)
        assert load_config(path).delimiters == DelimiterSet.from_list(["<<", ">>"])

    def test_pattern_marker(self, tmp_path: Any) -> None:
        path = _write(tmp_path, """
            version: 1
            delimiters:
              open: {pattern: "^<%-?", flags: [ignorecase]}
              close: "%>"
        """)
        token = load_config(path).delimiters.open
        assert isinstance(token, PatternToken)
        assert token.source == "^<%-?"
        assert token.flags & re.IGNORECASE

    def test_no_delimiters_section_is_native(self, tmp_path: Any) -> None:
        path = _write(tmp_path, "version: 1\n")
        assert load_config(path).delimiters.is_native is True

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = DelimiterConfig.from_dict(
            {"version": 1, "delimiters": ["<%", "%>"], "extra": True}
        )
        assert config.delimiters == DelimiterSet.from_list(["<%", "%>"])

    def test_from_dict_rejects_scalar_delimiters(self) -> None:
        with pytest.raises(DelimiterConfigError):
            DelimiterConfig.from_dict({"version": 1, "delimiters": "<% %>"})

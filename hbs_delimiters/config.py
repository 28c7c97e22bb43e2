"""Delimiter config loading for hbs-delimiters.

Reads a YAML file describing one delimiter set. Only an explicit path is
ever read: there are no environment variables and no implicit search paths.
If no path is given, or the file does not exist, the native pybars markers
are returned (safe to run without config).

File format::

    version: 1
    delimiters:
      open: "<%"
      close: "%>"
      open_safe: "<<%"           # optional, together with close_safe
      close_safe: "%>>"

A marker may also be a pattern::

      open: {pattern: "<%-?", flags: [IGNORECASE]}

Pattern flags are validated but, like anchors, are not carried into the
combined matcher.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

from hbs_delimiters.constants import (
    NATIVE_CLOSE,
    NATIVE_OPEN,
    SUPPORTED_CONFIG_VERSION,
)
from hbs_delimiters.models.delimiter import (
    DelimiterConfigError,
    DelimiterSet,
    DelimiterToken,
    LiteralToken,
    to_token,
)
from hbs_delimiters.utils.logger import get_logger

logger = get_logger(__name__)

# ─── Version constants ────────────────────────────────────────────────────────

SUPPORTED_VERSIONS: frozenset[int] = frozenset({SUPPORTED_CONFIG_VERSION})

# Keys of the ``delimiters`` mapping, in DelimiterSet.from_list() order.
_MARKER_KEYS = ("open", "close", "open_safe", "close_safe")


# ─── Dataclasses ─────────────────────────────────────────────────────────────


def _native_set() -> DelimiterSet:
    return DelimiterSet(LiteralToken(NATIVE_OPEN), LiteralToken(NATIVE_CLOSE))


@dataclass
class DelimiterConfig:
    """Root configuration object populated from a delimiter YAML file.

    All fields have safe defaults: the default delimiters are pybars' own, so
    compiling with a default config is a plain pybars compile.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    delimiters: DelimiterSet = field(default_factory=_native_set)
    path: Optional[str] = None  # Path to the loaded config file

    @classmethod
    def defaults(cls) -> "DelimiterConfig":
        """Return a fully-default config (no file required)."""
        return cls()

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "DelimiterConfig":
        """Construct a config from a parsed YAML dict.

        Unknown top-level keys are ignored. A missing ``delimiters`` section
        keeps the native markers.

        Raises:
            DelimiterConfigError: On malformed ``delimiters`` entries.
        """
        delimiters_raw = raw.get("delimiters")
        if delimiters_raw is None:
            delimiters = _native_set()
        elif isinstance(delimiters_raw, dict):
            delimiters = _parse_delimiters(delimiters_raw)
        elif isinstance(delimiters_raw, list):
            delimiters = DelimiterSet.from_list([_parse_marker(v, str(i)) for i, v in enumerate(delimiters_raw)])
        else:
            raise DelimiterConfigError(
                "'delimiters' must be a mapping of open/close markers or a list of 2 or 4 markers"
            )

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            delimiters=delimiters,
            path=path,
        )


def _parse_marker(value: Any, key: str) -> DelimiterToken:
    """Parse one marker: a plain string or ``{pattern: ..., flags: [...]}``."""
    if isinstance(value, dict):
        source = value.get("pattern")
        if not isinstance(source, str) or not source:
            raise DelimiterConfigError(f"delimiters.{key}: 'pattern' must be a non-empty string")
        flags = 0
        for name in value.get("flags", []) or []:
            flag = getattr(re.RegexFlag, str(name).upper(), None)
            if flag is None:
                raise DelimiterConfigError(f"delimiters.{key}: unknown regex flag '{name}'")
            flags |= flag
        try:
            return to_token(re.compile(source, flags))
        except re.error as exc:
            raise DelimiterConfigError(
                f"delimiters.{key}: invalid pattern {source!r}: {exc}"
            ) from exc
    if isinstance(value, str):
        return to_token(value)
    raise DelimiterConfigError(
        f"delimiters.{key}: expected a string or a pattern mapping, got {type(value).__name__}"
    )


def _parse_delimiters(raw: dict) -> DelimiterSet:
    for key in ("open", "close"):
        if key not in raw:
            raise DelimiterConfigError(f"delimiters.{key} is required")
    markers = [
        _parse_marker(raw[key], key)
        for key in _MARKER_KEYS
        if raw.get(key) is not None
    ]
    return DelimiterSet.from_list(markers)


# ─── Config loading ───────────────────────────────────────────────────────────


def load_config(config_path: Optional[str] = None) -> DelimiterConfig:
    """Load and validate a delimiter configuration file.

    If ``config_path`` is None or does not exist, returns the default config
    (not an error). ``~`` is expanded.

    Returns:
        DelimiterConfig with file values merged onto defaults.

    Raises:
        DelimiterConfigError: On read error, YAML parse error, non-mapping
            document, missing or unsupported ``version``, or malformed markers.
    """
    if config_path is None:
        logger.debug("No config path given: using native delimiters")
        return DelimiterConfig.defaults()

    expanded = os.path.expanduser(config_path)
    if not os.path.isfile(expanded):
        logger.info("Config file not found: using native delimiters", path=expanded)
        return DelimiterConfig.defaults()

    logger.debug("Loading config", path=expanded)

    try:
        with open(expanded) as fh:
            raw = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise DelimiterConfigError(
            f"CONFIG ERROR: Failed to parse {expanded}: {exc}"
        ) from exc
    except OSError as exc:
        raise DelimiterConfigError(
            f"CONFIG ERROR: Could not read {expanded}: {exc}"
        ) from exc

    # Empty file or non-mapping YAML (e.g. plain scalar)
    if not isinstance(raw, dict):
        if raw is None:
            msg = (
                f"CONFIG ERROR: {expanded} is missing the required 'version' field.\n"
                f"Add 'version: {SUPPORTED_CONFIG_VERSION}' to the top of your config file."
            )
        else:
            msg = (
                f"CONFIG ERROR: {expanded} is not a valid YAML mapping.\n"
                "The config file must be a YAML dictionary at the top level."
            )
        raise DelimiterConfigError(msg)

    version = raw.get("version")
    if version is None:
        raise DelimiterConfigError(
            f"CONFIG ERROR: {expanded} is missing the required 'version' field.\n"
            f"Add 'version: {SUPPORTED_CONFIG_VERSION}' to the top of your config file."
        )
    # bool is an int subclass: "version: true" must not pass as 1
    if (
        isinstance(version, bool)
        or not isinstance(version, int)
        or version not in SUPPORTED_VERSIONS
    ):
        raise DelimiterConfigError(
            f"CONFIG ERROR: Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )

    config = DelimiterConfig.from_dict(raw, path=expanded)

    logger.info(
        "Config loaded",
        path=expanded,
        version=config.version,
        two_tier=config.delimiters.is_two_tier,
        native=config.delimiters.is_native,
    )
    return config

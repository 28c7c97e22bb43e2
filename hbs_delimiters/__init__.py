"""hbs-delimiters: custom tag delimiters for pybars (Handlebars for Python).

Write templates with ``<% name %>``, ``<<& name &>>`` or any marker pair and
compile them with pybars as if they used ``{{ name }}``::

    from pybars import Compiler
    from hbs_delimiters import install

    compiler = Compiler()
    install(compiler, ["<%", "%>"])
    compiler.compile("Hello <% name %>!")({"name": "World"})  # 'Hello World!'

Two-tier sets distinguish escaped from unescaped output::

    install(compiler, ["<%", "%>", "<<%", "%>>"])   # <% x %> → {{x}}, <<% x %>> → {{{x}}}

Public API:
    compile_template, install, uninstall, Template
    replace, escape, scan
    DelimiterSet, DelimiterConfigError, LiteralToken, PatternToken
    DelimiterConfig, load_config
    MatcherCache
"""

from hbs_delimiters.compiler import Template, compile_template, install, uninstall
from hbs_delimiters.config import DelimiterConfig, load_config
from hbs_delimiters.models.delimiter import (
    DelimiterConfigError,
    DelimiterSet,
    LiteralToken,
    PatternToken,
)
from hbs_delimiters.models.segment import LiteralSegment, TagSegment, TagVariant
from hbs_delimiters.scanner.cache import MatcherCache
from hbs_delimiters.scanner.engine import escape, replace, scan

__all__ = [
    "DelimiterConfig",
    "DelimiterConfigError",
    "DelimiterSet",
    "LiteralSegment",
    "LiteralToken",
    "MatcherCache",
    "PatternToken",
    "TagSegment",
    "TagVariant",
    "Template",
    "compile_template",
    "escape",
    "install",
    "load_config",
    "replace",
    "scan",
    "uninstall",
]

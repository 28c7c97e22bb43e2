"""Compile/render pipeline for custom-delimiter templates.

Provides:
  - ``compile_template()``: rewrite a custom-delimiter template into native
    pybars syntax and compile it.
  - ``Template``: the render callable returned for non-native delimiter sets.
  - ``install()`` / ``uninstall()``: patch a pybars ``Compiler`` instance so its
    own ``compile()`` understands the custom delimiters.

Pipeline:
  raw text → normalize markers (memoized matcher) → scan (two-tier: recompose)
  → guard literal text → assemble native text → pybars compile
  → render → guard restore → final string

Native delimiter sets (``{{ }}``, optionally with ``{{{ }}}``) skip the whole
pipeline: the pybars render function is returned as-is.

Errors raised by pybars while compiling or rendering propagate unchanged.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Optional, Sequence, Union

from pybars import Compiler

from hbs_delimiters.models.delimiter import DelimiterSet
from hbs_delimiters.models.segment import Segment, TagSegment
from hbs_delimiters.scanner.cache import MatcherCache, get_matcher
from hbs_delimiters.scanner.engine import scan
from hbs_delimiters.scanner.guard import SentinelGuard, default_guard
from hbs_delimiters.scanner.normalizer import build_source
from hbs_delimiters.scanner.recomposer import assemble, recompose
from hbs_delimiters.utils.logger import PerformanceLogger, get_logger, template_scope

logger = get_logger(__name__)

# Attribute under which install() keeps the Compiler's original compile method.
_NATIVE_COMPILE_ATTR = "_native_compile"

NativeRender = Callable[..., Any]
NativeCompile = Callable[[str], NativeRender]


# ─── Template ─────────────────────────────────────────────────────────────────


class Template:
    """A compiled custom-delimiter template.

    Calling the template renders it with pybars and restores guarded literal
    characters in the output.

    Single-tier templates are assembled and compiled at construction. Two-tier
    templates (``lazy=True``) keep their segment list and assemble + compile on
    the first render; the native render function is then reused, so the source
    text is never scanned again.

    ``name`` (the pybars path, if any) is bound as ``template_name`` on the
    compile events, including a deferred two-tier compile.
    """

    def __init__(
        self,
        segments: list[Segment],
        compile_native: NativeCompile,
        guard: SentinelGuard = default_guard,
        lazy: bool = False,
        name: Optional[str] = None,
    ) -> None:
        self.segments = segments
        self.name = name
        self._compile_native = compile_native
        self._guard = guard
        self._render: Optional[NativeRender] = None
        if not lazy:
            self._render = self._build()

    @property
    def native_source(self) -> str:
        """Assembled native text with guarded literal characters removed (debug view)."""
        return self._guard.strip(assemble(self.segments, self._guard))

    @property
    def is_compiled(self) -> bool:
        return self._render is not None

    def _build(self) -> NativeRender:
        source = assemble(self.segments, self._guard)
        with template_scope(self.name):
            with PerformanceLogger("Native compile", logger, segments=len(self.segments)):
                return self._compile_native(source)

    def __call__(self, context: Any = None, *args: Any, **kwargs: Any) -> str:
        """Render with ``context``; extra arguments (helpers, partials) go to pybars."""
        if self._render is None:
            self._render = self._build()
        return self._guard.restore(str(self._render(context, *args, **kwargs)))


# ─── compile_template() ───────────────────────────────────────────────────────


def _native_compile_of(compiler: Compiler) -> NativeCompile:
    """Return the un-patched compile method of ``compiler``."""
    return getattr(compiler, _NATIVE_COMPILE_ATTR, compiler.compile)


def compile_template(
    raw: str,
    delimiters: Union[DelimiterSet, Sequence[Any]],
    compiler: Optional[Compiler] = None,
    cache: Optional[MatcherCache] = None,
    guard: SentinelGuard = default_guard,
    path: Optional[str] = None,
) -> Union[Template, NativeRender]:
    """Compile ``raw`` written with custom ``delimiters``.

    Args:
        raw:        Template source using the custom markers.
        delimiters: ``DelimiterSet`` or a 2/4-element list of strings / patterns.
        compiler:   pybars ``Compiler`` to use (default: a new one). If it was
                    patched by ``install()``, its original compile is used.
        cache:      Matcher cache (default: process-wide).
        guard:      Literal-text guard (default: the shared sentinel guard).
        path:       Template name passed to pybars and bound as
                    ``template_name`` on log events.

    Returns:
        A ``Template``, or the unmodified pybars render function when the
        delimiters are pybars' own.

    Raises:
        DelimiterConfigError: on a malformed delimiter list.
    """
    delimiter_set = DelimiterSet.coerce(delimiters)
    if compiler is None:
        compiler = Compiler()
    native_compile = _native_compile_of(compiler)
    if path is not None:
        native_compile = partial(native_compile, path=path)

    if delimiter_set.is_native:
        return native_compile(raw)

    with template_scope(path):
        escaped_matcher = get_matcher(
            build_source(delimiter_set.open, delimiter_set.close), cache
        )
        if delimiter_set.is_two_tier:
            safe_matcher = get_matcher(
                build_source(delimiter_set.open_safe, delimiter_set.close_safe), cache  # type: ignore[arg-type]
            )
            segments = recompose(raw, safe_matcher, escaped_matcher)
        else:
            segments = scan(raw, escaped_matcher)

        logger.debug(
            "Template scanned",
            two_tier=delimiter_set.is_two_tier,
            segments=len(segments),
            tags=sum(1 for s in segments if isinstance(s, TagSegment)),
        )
        return Template(
            segments, native_compile, guard, lazy=delimiter_set.is_two_tier, name=path
        )


# ─── install() / uninstall() ──────────────────────────────────────────────────


def install(
    compiler: Compiler,
    delimiters: Union[DelimiterSet, Sequence[Any]],
    cache: Optional[MatcherCache] = None,
) -> None:
    """Patch ``compiler.compile`` to accept templates written with ``delimiters``.

    The original compile method is saved on the instance the first time and
    every later install wraps that saved original, never a previous wrapper,
    so repeated installs do not nest.

    Usage:
        compiler = Compiler()
        install(compiler, ["<%", "%>"])
        compiler.compile("Hello <% name %>")({"name": "World"})

    Non-``str`` sources are passed to the original compile untouched.
    """
    delimiter_set = DelimiterSet.coerce(delimiters)
    native_compile = getattr(compiler, _NATIVE_COMPILE_ATTR, None)
    if native_compile is None:
        native_compile = compiler.compile
        setattr(compiler, _NATIVE_COMPILE_ATTR, native_compile)

    def compile(source: Any, path: Optional[str] = None) -> Union[Template, NativeRender]:
        if not isinstance(source, str):
            if path is None:
                return native_compile(source)
            return native_compile(source, path=path)
        return compile_template(source, delimiter_set, compiler=compiler, cache=cache, path=path)

    compiler.compile = compile  # type: ignore[method-assign]
    logger.debug(
        "Delimiters installed",
        two_tier=delimiter_set.is_two_tier,
        native=delimiter_set.is_native,
    )


def uninstall(compiler: Compiler) -> bool:
    """Restore the compile method saved by ``install()``.

    Returns:
        True if a patch was removed, False if ``compiler`` was not patched.
    """
    native_compile = getattr(compiler, _NATIVE_COMPILE_ATTR, None)
    if native_compile is None:
        return False
    compiler.compile = native_compile  # type: ignore[method-assign]
    delattr(compiler, _NATIVE_COMPILE_ATTR)
    logger.debug("Delimiters uninstalled")
    return True

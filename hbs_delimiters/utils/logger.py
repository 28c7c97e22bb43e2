"""Structured logging for hbs-delimiters.

Every module logs through ``get_logger(__name__)`` with key/value events.
While a named template is being scanned or compiled, ``template_name`` is
bound in a context variable so its events can be told apart:

    with template_scope("emails/welcome.hbs"):
        ...  # events here carry template_name="emails/welcome.hbs"

The library never configures structlog itself. Host applications either call
``configure_logging()`` once at startup or install their own processors (add
``add_template_name`` to keep the template name on events).
"""

import logging
import sys
import time
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

import structlog
from structlog.types import EventDict, Processor

from hbs_delimiters.constants import SLOW_COMPILE_THRESHOLD_MS

# Name of the template currently being compiled, if the caller gave one.
template_name_var: ContextVar[Optional[str]] = ContextVar("template_name", default=None)


@contextmanager
def template_scope(template_name: Optional[str]) -> Iterator[None]:
    """Bind ``template_name`` for the duration of the block.

    ``None`` leaves any outer binding in place. The previous value is always
    restored on exit, so nested and concurrent compiles do not leak names.
    """
    if template_name is None:
        yield
        return
    token = template_name_var.set(template_name)
    try:
        yield
    finally:
        template_name_var.reset(token)


def add_template_name(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor: copy the bound template name onto the event."""
    template_name = template_name_var.get()
    if template_name:
        event_dict.setdefault("template_name", template_name)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True
) -> None:
    """Configure structlog for a host application.

    Args:
        log_level: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
            Rewrite and compile events are DEBUG; slow compiles are WARNING.
        json_output: JSON lines if True, coloured console output otherwise.
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_template_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper())
        ),
        context_class=dict,
        # Templates are often rendered to stdout; keep diagnostics off it.
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "hbs_delimiters") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


class PerformanceLogger:
    """Time a block and log one event when it ends.

    ``"<operation> completed"`` goes out at DEBUG, or at WARNING once the block
    runs past ``threshold_ms``. ``"<operation> failed"`` goes out at ERROR and
    the exception propagates. Extra keyword arguments are added to the event.

    Usage:
        with PerformanceLogger("Native compile", logger, segments=12):
            render = compile_native(source)
    """

    def __init__(
        self,
        operation: str,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        threshold_ms: float = SLOW_COMPILE_THRESHOLD_MS,
        **context: Any,
    ):
        self.operation = operation
        self.logger = logger or get_logger()
        self.threshold_ms = threshold_ms
        self.context = context
        self._start: Optional[float] = None
        self._elapsed: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self._elapsed = time.perf_counter() - (self._start or 0.0)
        duration_ms = self.duration_ms

        if exc_type is not None:
            self.logger.error(
                f"{self.operation} failed",
                duration_ms=duration_ms,
                error=str(exc_val),
                error_type=exc_type.__name__,
                **self.context,
            )
            return

        slow = duration_ms > self.threshold_ms
        log_method = self.logger.warning if slow else self.logger.debug
        log_method(
            f"{self.operation} completed",
            duration_ms=duration_ms,
            slow=slow,
            **self.context,
        )

    @property
    def duration_ms(self) -> float:
        """Elapsed milliseconds: final once the block has exited, running before."""
        if self._start is None:
            return 0.0
        if self._elapsed is None:
            return (time.perf_counter() - self._start) * 1000
        return self._elapsed * 1000

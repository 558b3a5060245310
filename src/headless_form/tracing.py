"""
Tracing configuration for headless-form.

Pipeline stages (resolve, validate, build, reconcile) report through the
standard ``logging`` hierarchy under the ``headless_form`` logger. This module
wires handlers onto that logger and provides helpers to time stages.
"""

import functools
import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator

from headless_form.config import get_config

LOGGER_NAME = "headless_form"
_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())

_handlers: list[logging.Handler] = []


def setup_tracing(
    enabled: bool = True,
    console: bool = True,
    verbose: bool = False,
    file_path: str | None = None,
) -> None:
    """
    Configure tracing for headless-form.

    Args:
        enabled: Whether tracing is enabled.
        console: Whether to write traces to stderr.
        verbose: Whether to include per-stage DEBUG records.
        file_path: Optional file path to append traces to.

    Example:
        >>> from headless_form.tracing import setup_tracing
        >>> setup_tracing(console=True, verbose=True)
    """
    for handler in _handlers:
        logger.removeHandler(handler)
        handler.close()
    _handlers.clear()

    if not enabled:
        disable_tracing()
        return

    enable_tracing()
    level = logging.DEBUG if verbose else getattr(logging, get_config().log_level, logging.WARNING)
    logger.setLevel(level)

    formatter = logging.Formatter(_FORMAT)
    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        _handlers.append(stream)
    if file_path:
        file_handler = logging.FileHandler(file_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        _handlers.append(file_handler)

    for handler in _handlers:
        logger.addHandler(handler)


def disable_tracing() -> None:
    """Disable all tracing."""
    logger.disabled = True


def enable_tracing() -> None:
    """Enable tracing."""
    logger.disabled = False


@contextmanager
def traced_operation(name: str, **metadata: Any) -> Iterator[None]:
    """
    Context manager for tracing a pipeline stage.

    Args:
        name: Name of the operation to trace.
        metadata: Optional key/value pairs added to the trace record.

    Example:
        >>> with traced_operation("resolve", fields=3):
        ...     resolved = resolve_schema(schema, values)
    """
    log = logging.getLogger(f"{LOGGER_NAME}.trace")
    details = " ".join(f"{key}={value}" for key, value in metadata.items())
    log.debug("[start] %s %s", name, details)
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        log.debug("[end] %s (%.2f ms)", name, elapsed_ms)


def trace_stage(name: str):
    """Decorator to trace a pipeline stage."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with traced_operation(name):
                return func(*args, **kwargs)

        return wrapper

    return decorator


_config = get_config()
if _config.enable_tracing:
    setup_tracing(enabled=True, console=True, verbose=_config.trace_verbose)

"""Logging helpers for console output and per-run decode traces."""

from __future__ import annotations

import logging
from pathlib import Path

__all__ = [
    "TRACE_LOGGER",
    "configure_console_logging",
    "configure_trace_logger",
    "close_trace_logger",
]

TRACE_LOGGER = "ailscript.trace"


def configure_console_logging(verbose: bool = False) -> None:
    """Route library logging to stderr; ``verbose`` enables debug output."""

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def configure_trace_logger(
    path: Path,
    *,
    name: str = TRACE_LOGGER,
    level: int = logging.DEBUG,
    formatter: logging.Formatter | None = None,
) -> logging.Logger:
    """Return a logger writing one line per decoded instruction to ``path``.

    The trace file is truncated and written as UTF-8. A trace handler left
    over from an earlier call on ``name`` is closed first.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    close_trace_logger(logger)

    handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    handler._ailscript_trace = True  # type: ignore[attr-defined]
    if formatter is None:
        formatter = logging.Formatter("%(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger


def close_trace_logger(logger: logging.Logger) -> None:
    """Tear down handlers installed by :func:`configure_trace_logger`."""

    for handler in list(logger.handlers):
        if getattr(handler, "_ailscript_trace", False):
            logger.removeHandler(handler)
            handler.close()

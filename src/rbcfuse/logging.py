"""Structured logging for rbcfuse on top of structlog and stdlib logging.

Fused rankings are written to stdout by the CLI, so log records always go
to a separate stream (stderr unless told otherwise).
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# Applied to structlog events and to records from plain stdlib loggers alike
_PRE_CHAIN: tuple[structlog.types.Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route rbcfuse log events to *stream* as console lines or JSON objects."""
    stream = sys.stderr if stream is None else stream

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(_formatter(json_output, stream))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def _formatter(json_output: bool, stream: TextIO) -> structlog.stdlib.ProcessorFormatter:
    if json_output:
        tail: list[structlog.types.Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        tail = [structlog.dev.ConsoleRenderer(colors=_isatty(stream))]

    return structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *tail],
        foreign_pre_chain=list(_PRE_CHAIN),
    )


def _isatty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger on top of the stdlib logger *name*.

    Events go through stdlib logging even before :func:`setup_logging` runs,
    so library callers only see them once they configure a handler.
    """
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )

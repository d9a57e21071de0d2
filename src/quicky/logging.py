"""structlog wiring for the one-shot CLI.

Events are rendered on stderr through the stdlib root logger; stdout only
ever carries the final ``done`` and elapsed-time lines. The order symbol and
environment are bound as contextvars by the order placer and appear on every
event emitted while an order is in flight.
"""

import logging
import sys
from typing import TextIO

import structlog

LOG_FORMATS = ("console", "json")


def _renderer(log_format: str, stream: TextIO) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer(sort_keys=True)
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=stream.isatty())
    raise ValueError(f"unknown log format {log_format!r}, expected one of {LOG_FORMATS}")


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "console",
    stream: TextIO | None = None,
) -> None:
    """Route structlog events through a single stderr handler.

    Args:
        log_level: Stdlib level name; unknown names fall back to INFO.
        log_format: ``"console"`` for humans or ``"json"`` for one object per line.
        stream: Destination, ``sys.stderr`` when omitted.
    """
    stream = stream or sys.stderr
    renderer = _renderer(log_format, stream)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    level = logging.getLevelName(log_level.upper())
    root.setLevel(level if isinstance(level, int) else logging.INFO)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)

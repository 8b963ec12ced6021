"""Log routing for timelane.

Logs always go to stderr; stdout carries command results only. The
reconciliation path logs through structlog with bound fields (``seq``,
``item_id``, ``kind``), while the store and session use plain
``logging.getLogger(__name__)``. Both flow through one
``ProcessorFormatter``, so ``--log-json`` turns every record into one
JSON object per line.

Levels for ``timelane.*``: DEBUG with ``-v``, ERROR with ``-q``, else
WARNING. ``-v`` wins when both are given.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# Third-party loggers held at WARNING even with -v.
_QUIET_LIBRARIES = ("sqlalchemy", "asyncio")


def log_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Level for the ``timelane`` logger tree."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _final_processors(log_json: bool, stream: TextIO) -> list[structlog.types.Processor]:
    if log_json:
        # JSON lines need the traceback as a string field.
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=stream.isatty())]


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Install the single root handler and configure structlog.

    Safe to call repeatedly; each call replaces the previous handler.

    Args:
        verbose: DEBUG output for ``timelane.*``.
        quiet: Only errors for ``timelane.*`` (ignored when *verbose*).
        log_json: JSON lines instead of the console renderer.
        stream: Destination, default ``sys.stderr``.
    """
    stream = stream or sys.stderr
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *_final_processors(log_json, stream),
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("timelane").setLevel(log_level(verbose=verbose, quiet=quiet))
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

"""Diagnostic logging for mixer.

Logs go through structlog's ``ProcessorFormatter`` on a stderr handler
attached to the ``mixer`` logger. Stderr is also where the single
``ERROR:`` line of a failed run goes, so :func:`quiet_logging` lets the
exit path silence diagnostics while it tears down.

Human output (default) is one key=value line per event; ``--log-json``
switches to JSON lines with a timestamp.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

LOGGER_NAME = "mixer"

# Marks the handler installed here so reconfiguring replaces only it.
_HANDLER_ATTR = "_mixer_handler"


def _processors(log_json: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_json:
        processors.insert(2, structlog.processors.TimeStamper(fmt="iso", utc=True))
    return processors


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> logging.Logger:
    """Route ``mixer.*`` log records to stderr and return the ``mixer`` logger.

    Args:
        verbose: Emit DEBUG records; otherwise only WARNING and above.
        log_json: Render JSON lines instead of console lines.
    """
    pre_chain = _processors(log_json)

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            pad_event=0,
        )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    setattr(handler, _HANDLER_ATTR, True)

    logger = logging.getLogger(LOGGER_NAME)
    for old in [h for h in logger.handlers if getattr(h, _HANDLER_ATTR, False)]:
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger


@contextmanager
def quiet_logging() -> Iterator[None]:
    """Suppress every log record inside the block, then restore the previous state."""
    previous = logging.root.manager.disable
    logging.disable(logging.CRITICAL)
    try:
        yield
    finally:
        logging.disable(previous)

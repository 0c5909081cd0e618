"""Structured logging configuration using structlog.

Evaluations are replayed from recorded transcripts, usually inside a test
run, so log output goes to stderr by default and leaves stdout to whatever
reports the verdicts. The session being evaluated is bound through
contextvars; every event logged while it is bound carries its id.
"""

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

import structlog

__all__ = ["bound_session", "configure_logging", "get_logger"]


def configure_logging(
    verbose: bool = False,
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Configure structured logging for evaluation runs.

    Args:
        verbose: Log debug events such as per-evaluator skips and timings.
        json_output: Render one JSON object per line instead of console output.
        stream: Where log lines go. Defaults to stderr.

    """
    output = stream or sys.stderr
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=level,
        force=True,
    )

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        colors = hasattr(output, "isatty") and output.isatty()
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Uncached so structlog.testing.capture_logs still intercepts after this call.
        cache_logger_on_first_use=False,
    )


@contextmanager
def bound_session(session_id: str) -> Iterator[None]:
    """Attach a session id to every event logged inside the block."""
    with structlog.contextvars.bound_contextvars(session_id=session_id):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name, typically __name__ from the calling module.

    Returns:
        Configured structlog logger instance.

    Example:
        logger = get_logger(__name__)
        logger.info("evaluator_started", evaluator="approval-gate")

    """
    return structlog.get_logger(name)

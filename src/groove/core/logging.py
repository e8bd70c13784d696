"""Structured logging configuration for the Groove CLI.

Uses structlog on top of stdlib logging. Output goes to stderr so that
command output on stdout (tables, JSON) can be piped safely. Each CLI
invocation carries a short invocation ID via contextvars so that the
several GraphQL round-trips of one command can be correlated.

Usage:
    from groove.core.logging import get_logger, set_invocation_id

    logger = get_logger(__name__)

    set_invocation_id(uuid.uuid4().hex[:8])
    logger.debug("graphql_request", operation="Conversation")
"""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import structlog

_invocation_id: ContextVar[str | None] = ContextVar("invocation_id", default=None)


def set_invocation_id(invocation_id: str | None) -> None:
    """Set the invocation ID for the current context.

    Args:
        invocation_id: Short random ID for this CLI run, or None to clear
    """
    _invocation_id.set(invocation_id)


def get_invocation_id() -> str | None:
    """Get the current invocation ID, if set."""
    return _invocation_id.get()


def add_invocation_id(
    logger: structlog.types.WrappedLogger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor to add the invocation ID to log entries."""
    invocation_id = _invocation_id.get()
    if invocation_id is not None:
        event_dict["invocation_id"] = invocation_id
    return event_dict


def configure_logging(log_level: str = "WARNING", json_output: bool = False) -> None:
    """Configure structlog for the CLI.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_output: If True, output JSON; if False, output human-readable format
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        add_invocation_id,
    ]

    if json_output:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        A structlog BoundLogger instance
    """
    return structlog.get_logger(name)

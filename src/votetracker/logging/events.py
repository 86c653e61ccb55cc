"""Structured logging configuration and log event helpers.

This module provides:
- structlog configuration for JSON logging to stderr
- Structured log events for snapshot fetches and window updates
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable


def configure_logging(
    verbose: bool = False,
    json_output: bool = True,
) -> None:
    """Configure structured logging for the application.

    Sets up structlog with JSON formatting to stderr, including:
    - Timestamp in ISO format
    - Log level
    - Exception formatting

    Args:
        verbose: If True, enable DEBUG level. Otherwise INFO.
        json_output: If True, output JSON. Otherwise use console format.
    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    processors: list[Callable[..., Any]] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Optional logger name (typically __name__)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


def log_snapshot_fetched(
    url: str,
    updated: str,
    participants: int,
) -> None:
    """Log a successfully fetched and parsed snapshot.

    Args:
        url: Contest endpoint that was queried
        updated: Source update timestamp (ISO format)
        participants: Number of participants in the snapshot
    """
    log = get_logger("votetracker.contest")
    log.debug(
        "snapshot_fetched",
        url=url,
        updated=updated,
        participants=participants,
    )


def log_update_applied(
    outcome: str,
    label: str,
    rows: int,
    participants: int,
    persisted: bool,
) -> None:
    """Log the outcome of applying a snapshot to the rolling window.

    Duplicates are logged at info as well; they are a normal no-op.

    Args:
        outcome: 'duplicate', 'baseline_set' or 'updated'
        label: Display label of the snapshot's source timestamp
        rows: Rows in the window after the update
        participants: Participants tracked after the update
        persisted: Whether the new record was written to disk
    """
    log = get_logger("votetracker.window")
    log.info(
        "update_applied",
        outcome=outcome,
        label=label,
        rows=rows,
        participants=participants,
        persisted=persisted,
    )


def log_fetch_failed(
    url: str,
    error: str,
    status_code: int | None = None,
) -> None:
    """Log a failed contest fetch; the invocation ends without side effects.

    Args:
        url: Contest endpoint that was queried
        error: Short diagnostic
        status_code: HTTP status code if the server answered
    """
    log = get_logger("votetracker.contest")
    log.error(
        "fetch_failed",
        url=url,
        error=error,
        status_code=status_code,
    )

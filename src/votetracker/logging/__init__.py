"""Logging module for votetracker.

This module provides structured JSON logging with:
- structlog configuration for consistent log formatting
- Structured log events for fetches and window updates

Usage:
    from votetracker.logging import configure_logging, log_update_applied

    configure_logging(verbose=True)
    log_update_applied("updated", "12:30 PM", rows=4, participants=5, persisted=True)
"""

from votetracker.logging.events import (
    configure_logging,
    get_logger,
    log_fetch_failed,
    log_snapshot_fetched,
    log_update_applied,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_fetch_failed",
    "log_snapshot_fetched",
    "log_update_applied",
]

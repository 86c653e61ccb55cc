"""Shared pytest fixtures for votetracker tests.

This module provides common fixtures for:
- Temporary config files
- State store instances
- Sample contest API payloads and snapshots
- Fake HTTP transports (httpx.MockTransport)
"""

from __future__ import annotations

import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
import pytest
import structlog
import yaml

from votetracker.contest import Snapshot
from votetracker.state import StateStore

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


CONTEST_URL = "https://contest.example.com/contests/abc/vote_counts/"

# 04:00 UTC is 12:00 PM in Asia/Manila
BASE_TIME = datetime(2026, 1, 10, 4, 0, 0, tzinfo=UTC)


# ============================================================================
# Logging isolation
# ============================================================================


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Undo configure_logging() calls so later tests do not log to closed streams."""
    yield
    structlog.reset_defaults()


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory (cleaned up after test)
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def state_path(temp_dir: Path) -> Path:
    """Return path for a test state file."""
    return temp_dir / "rollingVotes.json"


@pytest.fixture
def minimal_config() -> dict[str, Any]:
    """Return a minimal valid configuration dictionary."""
    return {
        "version": 1,
        "contest": {"url": CONTEST_URL},
    }


@pytest.fixture
def sample_config(state_path: Path) -> dict[str, Any]:
    """Return a sample configuration with named participants."""
    return {
        "version": 1,
        "contest": {
            "url": CONTEST_URL,
            "timeout": 5,
            "participants": {
                "contests/abc/participants/AAAAAA111111": "ALPHA",
                "contests/abc/participants/BBBBBB222222": "BRAVO",
            },
        },
        "window": {
            "max_entries": 3,
            "timezone": "Asia/Manila",
        },
        "state": {"path": str(state_path)},
    }


@pytest.fixture
def write_config(temp_dir: Path) -> Callable[..., Path]:
    """Factory fixture to write config files.

    Args:
        config: Configuration dictionary
        filename: Name of the config file (default: config.yaml)

    Returns:
        Path to the written config file
    """

    def _write(config: dict[str, Any], filename: str = "config.yaml") -> Path:
        path = temp_dir / filename
        with path.open("w") as f:
            yaml.safe_dump(config, f)
        return path

    return _write


# ============================================================================
# State Fixtures
# ============================================================================


@pytest.fixture
def state_store(state_path: Path) -> StateStore:
    """Create a StateStore on a temporary file."""
    return StateStore(state_path)


# ============================================================================
# Snapshot Fixtures
# ============================================================================


@pytest.fixture
def make_snapshot() -> Callable[..., Snapshot]:
    """Factory fixture for snapshots spaced 15 minutes apart.

    Args:
        counts: Absolute counts by display name
        step: Row index; the source time is BASE_TIME + 15 min * step

    Returns:
        Snapshot instance
    """

    def _make(counts: dict[str, int], step: int = 0) -> Snapshot:
        updated = BASE_TIME + timedelta(minutes=15 * step)
        return Snapshot(
            counts=counts,
            updated=updated,
            captured_at=updated + timedelta(seconds=42),
        )

    return _make


@pytest.fixture
def vote_counts_payload() -> Callable[..., dict[str, Any]]:
    """Factory fixture for contest API payloads.

    Args:
        counts: Absolute counts keyed by participant id
        updated: ISO timestamp of the update

    Returns:
        Payload shaped like the contest vote_counts endpoint
    """

    def _payload(
        counts: dict[str, int],
        updated: str = "2026-01-10T04:30:00Z",
    ) -> dict[str, Any]:
        return {
            "updated": updated,
            "participants": {
                pid: {"count": count, "title": pid[-6:]} for pid, count in counts.items()
            },
        }

    return _payload


@pytest.fixture
def mock_http() -> Callable[..., httpx.AsyncClient]:
    """Factory fixture for an httpx client answering from a handler.

    Args:
        handler: Callable taking an httpx.Request and returning an httpx.Response

    Returns:
        httpx.AsyncClient on a MockTransport
    """

    def _client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _client

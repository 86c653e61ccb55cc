"""Single update cycle: fetch, load, apply, persist.

Contest errors propagate before the state file is read or written, so a
failed fetch never has side effects.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from votetracker.contest import ContestClient, parse_snapshot
from votetracker.logging import log_snapshot_fetched, log_update_applied
from votetracker.window import UpdateEngine

if TYPE_CHECKING:
    from datetime import datetime

    import httpx

    from votetracker.config.schema import Config
    from votetracker.contest import Snapshot
    from votetracker.state import StateStore
    from votetracker.window import UpdateResult

logger = logging.getLogger(__name__)


def build_engine(config: Config) -> UpdateEngine:
    """Create an UpdateEngine from the window configuration."""
    window = config.window
    return UpdateEngine(
        max_entries=window.max_entries,
        timezone=window.timezone,
        baseline_policy=window.baseline_policy,
        rebase=window.rebase,
        missing_participants=window.missing_participants,
        track_capture_times=window.track_capture_times,
    )


async def fetch_snapshot(
    config: Config,
    *,
    client: httpx.AsyncClient | None = None,
    captured_at: datetime | None = None,
) -> Snapshot:
    """Fetch and parse one snapshot from the configured contest.

    Args:
        config: Loaded configuration
        client: Optional httpx client (for testing)
        captured_at: Capture time override; defaults to now

    Returns:
        Parsed Snapshot

    Raises:
        ContestError: On transport, status or parse failures
    """
    contest = config.contest
    async with ContestClient(contest.url, timeout=contest.timeout, client=client) as api:
        payload = await api.fetch_vote_counts()

    snapshot = parse_snapshot(payload, contest.participants, captured_at=captured_at)
    log_snapshot_fetched(
        url=contest.url,
        updated=snapshot.updated.isoformat(),
        participants=len(snapshot.counts),
    )
    return snapshot


def apply_and_save(
    engine: UpdateEngine,
    store: StateStore,
    snapshot: Snapshot,
    *,
    dry_run: bool = False,
) -> UpdateResult:
    """Load the record, apply a snapshot and persist the result.

    Args:
        engine: Update engine
        store: State store
        snapshot: Snapshot to apply
        dry_run: Compute the new record without writing it

    Returns:
        UpdateResult of the transition

    Raises:
        StateSaveError: If the record cannot be written
    """
    record = store.load()
    result = engine.apply(record, snapshot)

    persisted = False
    if result.should_persist and not dry_run:
        store.save(result.record)
        persisted = True
    elif dry_run:
        logger.info("Dry run, not writing %s", store.path)

    log_update_applied(
        outcome=result.outcome.value,
        label=result.label,
        rows=result.record.row_count,
        participants=len(result.record.vote_increments),
        persisted=persisted,
    )
    return result


async def update_once(
    config: Config,
    store: StateStore,
    *,
    client: httpx.AsyncClient | None = None,
    dry_run: bool = False,
    captured_at: datetime | None = None,
) -> UpdateResult:
    """Run one full update cycle.

    Args:
        config: Loaded configuration
        store: State store for the rolling record
        client: Optional httpx client (for testing)
        dry_run: Compute the new record without writing it
        captured_at: Capture time override; defaults to now

    Returns:
        UpdateResult of the transition

    Raises:
        ContestError: If the snapshot cannot be fetched or parsed
        StateSaveError: If the record cannot be written
    """
    snapshot = await fetch_snapshot(config, client=client, captured_at=captured_at)
    return apply_and_save(build_engine(config), store, snapshot, dry_run=dry_run)

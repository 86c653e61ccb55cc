"""Rolling-window update engine.

This module provides the UpdateEngine class for applying a snapshot to a
RollingRecord. It handles:
- Duplicate detection on the snapshot's display label
- Baseline transitions (deferred or eager)
- Delta computation with back-fill for new participants
- Padding or dropping participants missing from a snapshot
- FIFO trimming of every parallel series to the window size
- Optional rebasing after each update
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from votetracker.config.schema import BaselinePolicy, MissingParticipantPolicy
from votetracker.window.labels import (
    DEFAULT_TIMEZONE,
    format_capture_label,
    format_time_label,
)
from votetracker.window.schema import Outcome, UpdateResult

if TYPE_CHECKING:
    from votetracker.contest.snapshot import Snapshot
    from votetracker.state.record import RollingRecord

logger = logging.getLogger(__name__)

# Default number of rows kept in the window
DEFAULT_MAX_ENTRIES = 12


def trim_window(record: RollingRecord, max_entries: int) -> int:
    """Drop the oldest rows so at most ``max_entries`` remain.

    ``times``, ``update_times`` and every increment sequence lose the same
    leading entries, so they stay index-aligned.

    Args:
        record: Record to trim in place.
        max_entries: Window size.

    Returns:
        Number of rows removed.
    """
    excess = len(record.times) - max_entries
    if excess <= 0:
        return 0

    del record.times[:excess]
    if record.update_times is not None:
        del record.update_times[:excess]
    for seq in record.vote_increments.values():
        del seq[:excess]

    logger.debug("Trimmed %d row(s) from the window", excess)
    return excess


def realign(record: RollingRecord) -> bool:
    """Force every series to ``len(times)`` entries, newest entries kept.

    Short series are left-padded with None; long series lose their oldest
    entries. Records written by this engine are always aligned; this repairs
    files from older writers that skipped absent participants.

    Args:
        record: Record to repair in place.

    Returns:
        True if anything was changed.
    """
    rows = len(record.times)
    changed = False

    series: list[tuple[str, list]] = list(record.vote_increments.items())
    if record.update_times is not None:
        series.append(("updateTimesPH", record.update_times))

    for name, seq in series:
        if len(seq) == rows:
            continue
        logger.warning(
            "Series %r has %d entries for %d row(s), realigning",
            name,
            len(seq),
            rows,
        )
        if len(seq) > rows:
            del seq[: len(seq) - rows]
        else:
            seq[:0] = [None] * (rows - len(seq))
        changed = True

    return changed


class UpdateEngine:
    """Engine applying snapshots to a rolling-window record.

    The engine never mutates the record it is given; every transition
    works on a deep copy, so a duplicate leaves the caller's record
    untouched.
    """

    def __init__(
        self,
        *,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        timezone: str = DEFAULT_TIMEZONE,
        baseline_policy: BaselinePolicy = BaselinePolicy.DEFERRED,
        rebase: bool = True,
        missing_participants: MissingParticipantPolicy = MissingParticipantPolicy.PAD,
        track_capture_times: bool = True,
    ) -> None:
        """Initialize update engine.

        Args:
            max_entries: Window size (rows kept).
            timezone: IANA timezone for labels.
            baseline_policy: Whether the baseline snapshot occupies a row.
            rebase: Reset the baseline after every update.
            missing_participants: Pad or drop participants absent from a snapshot.
            track_capture_times: Maintain the capture-time series.
        """
        if max_entries < 1:
            msg = f"max_entries must be at least 1, got {max_entries}"
            raise ValueError(msg)

        self._max_entries = max_entries
        self._tz = ZoneInfo(timezone)
        self._baseline_policy = baseline_policy
        self._rebase = rebase
        self._missing_participants = missing_participants
        self._track_capture_times = track_capture_times

    @property
    def max_entries(self) -> int:
        """Get the window size."""
        return self._max_entries

    def label_for(self, snapshot: Snapshot) -> str:
        """Get the display label of a snapshot's source timestamp."""
        return format_time_label(snapshot.updated, self._tz)

    def apply(self, record: RollingRecord, snapshot: Snapshot) -> UpdateResult:
        """Apply a snapshot to a record.

        Args:
            record: Current record (not modified).
            snapshot: Newly fetched snapshot.

        Returns:
            UpdateResult with the outcome and the new record.
        """
        label = self.label_for(snapshot)

        if label in record.times or label == record.baseline_time:
            logger.info("Duplicate timestamp %s, skipping update", label)
            return UpdateResult(outcome=Outcome.DUPLICATE, record=record, label=label)

        new = record.model_copy(deep=True)
        self._prepare(new)

        if not new.has_baseline:
            self._set_baseline(new, snapshot, label)
            return UpdateResult(outcome=Outcome.BASELINE_SET, record=new, label=label)

        self._append_update(new, snapshot, label)
        return UpdateResult(outcome=Outcome.UPDATED, record=new, label=label)

    def _prepare(self, record: RollingRecord) -> None:
        """Bring a loaded record in line with the engine's settings."""
        if self._track_capture_times:
            if record.update_times is None:
                record.update_times = [None] * len(record.times)
        else:
            record.update_times = None

        realign(record)

    def _start_row(self, record: RollingRecord, snapshot: Snapshot, label: str) -> None:
        record.times.append(label)
        if record.update_times is not None:
            record.update_times.append(format_capture_label(snapshot.captured_at, self._tz))

    def _series(self, record: RollingRecord, name: str) -> list[int | None]:
        """Get a participant's sequence, back-filling a new one.

        Must be called after the current row's label has been appended.
        """
        seq = record.vote_increments.get(name)
        if seq is None:
            seq = [None] * (len(record.times) - 1)
            record.vote_increments[name] = seq
            logger.debug("New participant %s, back-filled %d row(s)", name, len(seq))
        return seq

    def _set_baseline(self, record: RollingRecord, snapshot: Snapshot, label: str) -> None:
        record.baseline_votes = dict(snapshot.counts)

        if self._baseline_policy == BaselinePolicy.EAGER:
            self._start_row(record, snapshot, label)
            for name in snapshot.counts:
                self._series(record, name)
            for seq in record.vote_increments.values():
                seq.append(None)
            trim_window(record, self._max_entries)
        else:
            record.baseline_time = label

        logger.info(
            "Baseline set at %s (%d participant(s), policy=%s)",
            label,
            len(snapshot.counts),
            self._baseline_policy.value,
        )

    def _append_update(self, record: RollingRecord, snapshot: Snapshot, label: str) -> None:
        baseline = record.baseline_votes or {}
        self._start_row(record, snapshot, label)
        record.baseline_time = None

        for name, count in snapshot.counts.items():
            delta = count - baseline.get(name, 0)
            self._series(record, name).append(delta)

        missing = [name for name in record.vote_increments if name not in snapshot.counts]
        for name in missing:
            if self._missing_participants == MissingParticipantPolicy.DROP:
                del record.vote_increments[name]
                baseline.pop(name, None)
                logger.info("Participant %s absent from snapshot, dropped", name)
            else:
                record.vote_increments[name].append(None)
                logger.debug("Participant %s absent from snapshot, padded", name)

        trim_window(record, self._max_entries)

        if self._rebase:
            record.baseline_votes = dict(snapshot.counts)

        logger.info("Updated @ %s (%d row(s))", label, len(record.times))


def apply_snapshot(
    record: RollingRecord,
    snapshot: Snapshot,
    **engine_options: object,
) -> UpdateResult:
    """Apply a snapshot with a one-off UpdateEngine.

    Args:
        record: Current record.
        snapshot: Newly fetched snapshot.
        **engine_options: Keyword arguments for UpdateEngine.

    Returns:
        UpdateResult with the outcome and the new record.
    """
    engine = UpdateEngine(**engine_options)  # type: ignore[arg-type]
    return engine.apply(record, snapshot)

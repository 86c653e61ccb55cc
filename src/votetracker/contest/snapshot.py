"""Snapshot model and vote-count payload normalization."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from votetracker.contest.client import SnapshotParseError

# Characters kept from an unmapped participant id
FALLBACK_NAME_LENGTH = 6


class Snapshot(BaseModel):
    """One fetched set of absolute vote counts.

    Counts are keyed by display name, not by the API's opaque ids.
    """

    model_config = ConfigDict(frozen=True)

    counts: dict[str, int] = Field(..., description="Absolute votes per participant")
    updated: datetime = Field(..., description="Source-provided update time")
    captured_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Wall-clock time the snapshot was fetched",
    )


def participant_name(identifier: str, names: Mapping[str, str]) -> str:
    """Map an opaque participant id to its display name.

    Unmapped ids fall back to their last six characters.

    Args:
        identifier: Participant id from the API.
        names: Configured id -> name lookup table.

    Returns:
        Display name.
    """
    name = names.get(identifier)
    if name:
        return name
    return identifier[-FALLBACK_NAME_LENGTH:]


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 source timestamp; naive values are taken as UTC.

    Raises:
        SnapshotParseError: If the value is not an ISO-8601 string.
    """
    if not isinstance(value, str):
        msg = f"'updated' must be an ISO-8601 string, got {type(value).__name__}"
        raise SnapshotParseError(msg)

    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        msg = f"'updated' is not an ISO-8601 timestamp: {value!r}"
        raise SnapshotParseError(msg) from e

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def parse_snapshot(
    payload: Mapping[str, Any],
    names: Mapping[str, str],
    *,
    captured_at: datetime | None = None,
) -> Snapshot:
    """Normalize a vote-count payload into a Snapshot.

    Expected shape::

        {"updated": "2026-01-10T04:30:00Z",
         "participants": {"<id>": {"count": 123, ...}, ...}}

    Args:
        payload: Decoded JSON from the contest endpoint.
        names: Configured id -> name lookup table.
        captured_at: Capture time; defaults to now (UTC).

    Returns:
        Snapshot keyed by display name.

    Raises:
        SnapshotParseError: If required fields are missing or mistyped.
    """
    if "updated" not in payload:
        msg = "Payload has no 'updated' field"
        raise SnapshotParseError(msg)
    updated = parse_timestamp(payload["updated"])

    participants = payload.get("participants")
    if not isinstance(participants, Mapping):
        msg = "Payload 'participants' must be an object"
        raise SnapshotParseError(msg)

    counts: dict[str, int] = {}
    for identifier, info in participants.items():
        count = info.get("count") if isinstance(info, Mapping) else None
        # bool is an int subclass; reject it explicitly
        if not isinstance(count, int) or isinstance(count, bool):
            msg = f"Participant {identifier!r} has no integer 'count'"
            raise SnapshotParseError(msg)
        counts[participant_name(str(identifier), names)] = count

    return Snapshot(
        counts=counts,
        updated=updated,
        captured_at=captured_at or datetime.now(UTC),
    )

"""Contest API client and snapshot normalization."""

from votetracker.contest.client import (
    DEFAULT_TIMEOUT,
    ContestAPIError,
    ContestClient,
    ContestError,
    ContestUnavailableError,
    SnapshotParseError,
)
from votetracker.contest.snapshot import (
    Snapshot,
    parse_snapshot,
    participant_name,
)

__all__ = [
    "DEFAULT_TIMEOUT",
    "ContestAPIError",
    "ContestClient",
    "ContestError",
    "ContestUnavailableError",
    "Snapshot",
    "SnapshotParseError",
    "parse_snapshot",
    "participant_name",
]

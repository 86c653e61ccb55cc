"""Rolling-window record persisted between invocations.

The on-disk keys are camelCase (``times``, ``updateTimesPH``,
``voteIncrements``, ``baselineVotes``, ``baselineTimePH``) so files written
by earlier deployments of the tracker load unchanged.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RollingRecord(BaseModel):
    """Fixed-capacity history of per-participant vote increments.

    Attributes:
        times: Display labels, one per completed row, oldest first
        update_times: Capture-time labels aligned 1:1 with ``times``
                      (None when capture times are not tracked)
        vote_increments: Participant name -> deltas aligned with ``times``;
                         None marks a row with no delta for that participant
        baseline_votes: Absolute counts deltas are computed against
                        (None until the first snapshot is applied)
        baseline_time: Label of a baseline that has no row of its own yet;
                       cleared once the first update row is written

    Invariants:
        - every vote_increments sequence has len(times) entries
        - update_times, when present, has len(times) entries
    """

    model_config = ConfigDict(populate_by_name=True)

    times: list[str] = Field(default_factory=list)
    update_times: list[str | None] | None = Field(default=None, alias="updateTimesPH")
    vote_increments: dict[str, list[int | None]] = Field(
        default_factory=dict, alias="voteIncrements"
    )
    baseline_votes: dict[str, int] | None = Field(default=None, alias="baselineVotes")
    baseline_time: str | None = Field(default=None, alias="baselineTimePH")

    @property
    def has_baseline(self) -> bool:
        """Check whether a baseline snapshot has been applied."""
        return self.baseline_votes is not None

    @property
    def row_count(self) -> int:
        """Number of rows in the window."""
        return len(self.times)

    def is_aligned(self) -> bool:
        """Check every parallel series has one entry per row."""
        rows = len(self.times)
        if self.update_times is not None and len(self.update_times) != rows:
            return False
        return all(len(seq) == rows for seq in self.vote_increments.values())

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with on-disk key names.

        Optional keys that are unset (``updateTimesPH`` when capture times
        are not tracked, ``baselineTimePH`` outside a pending baseline) are
        omitted.
        """
        data = self.model_dump(by_alias=True)
        for key in ("updateTimesPH", "baselineTimePH"):
            if data.get(key) is None:
                data.pop(key, None)
        return data

"""Update result models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from votetracker.state.record import RollingRecord


class Outcome(str, Enum):
    """How a snapshot was applied to the window."""

    DUPLICATE = "duplicate"
    BASELINE_SET = "baseline_set"
    UPDATED = "updated"


class UpdateResult(BaseModel):
    """Result of applying one snapshot."""

    model_config = ConfigDict(frozen=True)

    outcome: Outcome = Field(..., description="Which transition was taken")
    record: RollingRecord = Field(..., description="Record after the transition")
    label: str = Field(..., description="Display label of the snapshot's source time")

    @property
    def should_persist(self) -> bool:
        """Duplicates leave the record untouched and are not written."""
        return self.outcome != Outcome.DUPLICATE

"""Pydantic schema models for configuration.

This module defines all configuration models:
- Config: Top-level configuration container
- ContestConfig: Contest endpoint and participant names
- WindowConfig: Rolling-window and update-policy settings
- StateConfig: State file settings
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from votetracker.paths import get_default_state_path


class BaselinePolicy(str, Enum):
    """How the first snapshot of an empty record is stored."""

    DEFERRED = "deferred"
    EAGER = "eager"


class MissingParticipantPolicy(str, Enum):
    """What happens to a tracked participant absent from a snapshot."""

    PAD = "pad"
    DROP = "drop"


class ContestConfig(BaseModel):
    """Contest endpoint configuration.

    Attributes:
        url: Vote-count endpoint URL (or ${VAR} reference)
        timeout: HTTP timeout in seconds (1-300, default: 30)
        participants: Mapping of opaque participant id to display name
    """

    model_config = ConfigDict(extra="forbid")

    url: str
    timeout: Annotated[float, Field(gt=0, le=300)] = 30.0
    participants: dict[str, Annotated[str, Field(min_length=1, max_length=50)]] = Field(
        default_factory=dict
    )

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate the endpoint is an http(s) URL."""
        if not v.startswith(("http://", "https://")):
            msg = "url must start with http:// or https://"
            raise ValueError(msg)
        return v


class WindowConfig(BaseModel):
    """Rolling-window configuration.

    Attributes:
        max_entries: Number of rows kept in the window (1-1000, default: 12)
        timezone: IANA timezone used for time labels (default: Asia/Manila)
        track_capture_times: Record capture wall-clock labels in updateTimesPH
        baseline_policy: 'deferred' (no row for the baseline) or 'eager'
        rebase: Reset the baseline after every update (incremental deltas)
        missing_participants: 'pad' with null or 'drop' the participant
    """

    model_config = ConfigDict(extra="forbid")

    max_entries: Annotated[int, Field(ge=1, le=1000)] = 12
    timezone: str = "Asia/Manila"
    track_capture_times: bool = True
    baseline_policy: BaselinePolicy = BaselinePolicy.DEFERRED
    rebase: bool = True
    missing_participants: MissingParticipantPolicy = MissingParticipantPolicy.PAD

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            msg = f"unknown timezone: {v!r}"
            raise ValueError(msg) from e
        return v


class StateConfig(BaseModel):
    """State storage configuration.

    Attributes:
        path: State file path (default: XDG data dir)
              Uses $XDG_DATA_HOME/votetracker/rollingVotes.json
    """

    model_config = ConfigDict(extra="forbid")

    path: str | None = None

    def get_path(self) -> Path:
        """Get the state file path, expanding ~ if needed."""
        if self.path:
            return Path(self.path).expanduser()
        return get_default_state_path()


class Config(BaseModel):
    """Top-level configuration loaded from YAML.

    Attributes:
        version: Schema version (must be 1)
        contest: Contest endpoint settings
        window: Rolling-window settings
        state: State storage settings
    """

    model_config = ConfigDict(extra="forbid")

    version: Literal[1]
    contest: ContestConfig
    window: WindowConfig = Field(default_factory=WindowConfig)
    state: StateConfig = Field(default_factory=StateConfig)

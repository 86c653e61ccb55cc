"""Rolling-window update engine."""

from votetracker.window.engine import (
    DEFAULT_MAX_ENTRIES,
    UpdateEngine,
    apply_snapshot,
    realign,
    trim_window,
)
from votetracker.window.labels import format_capture_label, format_time_label
from votetracker.window.schema import Outcome, UpdateResult

__all__ = [
    "DEFAULT_MAX_ENTRIES",
    "Outcome",
    "UpdateEngine",
    "UpdateResult",
    "apply_snapshot",
    "format_capture_label",
    "format_time_label",
    "realign",
    "trim_window",
]

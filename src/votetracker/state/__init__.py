"""State management module for votetracker.

This module provides JSON file persistence for the rolling-window record.

Usage:
    from votetracker.state import StateStore
    from votetracker.paths import get_default_state_path

    store = StateStore(get_default_state_path())  # XDG data path
    record = store.load()
    store.save(record)
"""

from votetracker.state.record import RollingRecord
from votetracker.state.store import StateSaveError, StateStore

__all__ = [
    "RollingRecord",
    "StateSaveError",
    "StateStore",
]

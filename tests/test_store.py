"""Tests for the JSON state store."""

from __future__ import annotations

import json
import os
import stat
from typing import TYPE_CHECKING

import pytest

from votetracker.state import RollingRecord, StateSaveError, StateStore

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def populated_record() -> RollingRecord:
    return RollingRecord(
        times=["12:15 PM", "12:30 PM"],
        update_times=["12:15:42 PM", "12:30:42 PM"],
        vote_increments={"ALPHA": [4, 9], "BRAVÖ": [None, 2]},
        baseline_votes={"ALPHA": 113, "BRAVÖ": 52},
    )


class TestLoad:
    def test_missing_file_gives_empty_record(self, state_store: StateStore) -> None:
        record = state_store.load()

        assert record == RollingRecord()
        assert record.times == []
        assert record.vote_increments == {}
        assert record.baseline_votes is None

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "{not json",
            "[1, 2, 3]",
            '{"times": "12:00 PM"}',
            '{"times": [], "voteIncrements": {"A": ["x"]}}',
        ],
    )
    def test_corrupt_file_gives_empty_record(
        self, state_store: StateStore, state_path: Path, content: str
    ) -> None:
        state_path.write_text(content, encoding="utf-8")

        assert state_store.load() == RollingRecord()

    def test_loads_file_without_capture_times(
        self, state_store: StateStore, state_path: Path
    ) -> None:
        state_path.write_text(
            json.dumps(
                {
                    "times": ["12:00 PM", "12:15 PM"],
                    "voteIncrements": {"DUSTBIA": [None, 12]},
                    "baselineVotes": {"DUSTBIA": 1000},
                }
            ),
            encoding="utf-8",
        )

        record = state_store.load()

        assert record.times == ["12:00 PM", "12:15 PM"]
        assert record.update_times is None
        assert record.vote_increments == {"DUSTBIA": [None, 12]}
        assert record.baseline_votes == {"DUSTBIA": 1000}


class TestSave:
    def test_round_trip(self, state_store: StateStore, populated_record: RollingRecord) -> None:
        state_store.save(populated_record)

        assert state_store.load() == populated_record

    def test_save_of_load_is_idempotent(
        self, state_store: StateStore, state_path: Path, populated_record: RollingRecord
    ) -> None:
        state_store.save(populated_record)
        first = state_path.read_bytes()

        state_store.save(state_store.load())

        assert state_path.read_bytes() == first

    def test_on_disk_format(
        self, state_store: StateStore, state_path: Path, populated_record: RollingRecord
    ) -> None:
        state_store.save(populated_record)
        text = state_path.read_text(encoding="utf-8")
        data = json.loads(text)

        assert list(data) == ["times", "updateTimesPH", "voteIncrements", "baselineVotes"]
        assert data["voteIncrements"]["BRAVÖ"] == [None, 2]
        assert "BRAVÖ" in text
        assert text.endswith("\n")
        assert '\n  "times": [' in text

    def test_empty_record_format(self, state_store: StateStore, state_path: Path) -> None:
        state_store.save(RollingRecord())

        assert json.loads(state_path.read_text(encoding="utf-8")) == {
            "times": [],
            "voteIncrements": {},
            "baselineVotes": None,
        }

    def test_creates_parent_directory(self, temp_dir: Path) -> None:
        store = StateStore(temp_dir / "nested" / "dir" / "rollingVotes.json")

        store.save(RollingRecord(times=["1:00 PM"], vote_increments={"A": [1]}))

        assert store.exists

    def test_no_temp_files_left(
        self, state_store: StateStore, state_path: Path, populated_record: RollingRecord
    ) -> None:
        state_store.save(populated_record)
        state_store.save(populated_record)

        assert [p.name for p in state_path.parent.iterdir()] == [state_path.name]

    def test_new_file_honours_umask(self, state_store: StateStore, state_path: Path) -> None:
        previous = os.umask(0o022)
        try:
            state_store.save(RollingRecord())
        finally:
            os.umask(previous)

        assert stat.S_IMODE(state_path.stat().st_mode) == 0o644

    def test_existing_file_mode_is_kept(
        self, state_store: StateStore, state_path: Path, populated_record: RollingRecord
    ) -> None:
        state_store.save(RollingRecord())
        state_path.chmod(0o640)

        state_store.save(populated_record)

        assert stat.S_IMODE(state_path.stat().st_mode) == 0o640

    def test_write_failure_raises(self, temp_dir: Path) -> None:
        target = temp_dir / "occupied"
        target.mkdir()
        store = StateStore(target)

        with pytest.raises(StateSaveError) as exc_info:
            store.save(RollingRecord())

        assert exc_info.value.path == target.resolve()
        assert list(target.iterdir()) == []
        assert [p.name for p in temp_dir.iterdir()] == ["occupied"]

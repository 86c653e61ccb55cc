"""Tests for snapshot parsing and participant naming."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import pytest
from freezegun import freeze_time

from votetracker.contest import SnapshotParseError, parse_snapshot, participant_name

if TYPE_CHECKING:
    from collections.abc import Callable

NAMES = {"contests/abc/participants/AAAAAA111111": "ALPHA"}


class TestParticipantName:
    def test_mapped_id(self) -> None:
        assert participant_name("contests/abc/participants/AAAAAA111111", NAMES) == "ALPHA"

    def test_unknown_id_uses_last_six_characters(self) -> None:
        assert participant_name("contests/abc/participants/QQQXYZ123", NAMES) == "XYZ123"

    def test_short_unknown_id(self) -> None:
        assert participant_name("abc", {}) == "abc"


class TestParseSnapshot:
    def test_parses_counts_and_timestamp(
        self, vote_counts_payload: Callable[..., dict[str, Any]]
    ) -> None:
        payload = vote_counts_payload(
            {
                "contests/abc/participants/AAAAAA111111": 130,
                "contests/abc/participants/ZZZXYZ123": 10,
            }
        )
        captured = datetime(2026, 1, 10, 4, 31, tzinfo=UTC)

        snapshot = parse_snapshot(payload, NAMES, captured_at=captured)

        assert snapshot.counts == {"ALPHA": 130, "XYZ123": 10}
        assert snapshot.updated == datetime(2026, 1, 10, 4, 30, tzinfo=UTC)
        assert snapshot.captured_at == captured

    def test_capture_time_defaults_to_now(
        self, vote_counts_payload: Callable[..., dict[str, Any]]
    ) -> None:
        with freeze_time("2026-01-10T04:30:05Z"):
            snapshot = parse_snapshot(vote_counts_payload({"id000001": 1}), {})

        assert snapshot.captured_at == datetime(2026, 1, 10, 4, 30, 5, tzinfo=UTC)

    def test_offset_and_naive_timestamps(
        self, vote_counts_payload: Callable[..., dict[str, Any]]
    ) -> None:
        offset = parse_snapshot(vote_counts_payload({"p": 1}, "2026-01-10T12:30:00+08:00"), {})
        naive = parse_snapshot(vote_counts_payload({"p": 1}, "2026-01-10T04:30:00"), {})

        assert offset.updated == naive.updated
        assert naive.updated.tzinfo is not None

    def test_empty_participants(self) -> None:
        snapshot = parse_snapshot({"updated": "2026-01-10T04:30:00Z", "participants": {}}, {})

        assert snapshot.counts == {}

    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ({"participants": {}}, "updated"),
            ({"updated": 12345, "participants": {}}, "ISO-8601"),
            ({"updated": "yesterday", "participants": {}}, "ISO-8601"),
            ({"updated": "2026-01-10T04:30:00Z"}, "participants"),
            ({"updated": "2026-01-10T04:30:00Z", "participants": []}, "participants"),
            ({"updated": "2026-01-10T04:30:00Z", "participants": {"p": {}}}, "count"),
            ({"updated": "2026-01-10T04:30:00Z", "participants": {"p": {"count": "5"}}}, "count"),
            ({"updated": "2026-01-10T04:30:00Z", "participants": {"p": {"count": True}}}, "count"),
            ({"updated": "2026-01-10T04:30:00Z", "participants": {"p": 5}}, "count"),
        ],
    )
    def test_malformed_payload(self, payload: dict[str, Any], message: str) -> None:
        with pytest.raises(SnapshotParseError, match=message):
            parse_snapshot(payload, {})

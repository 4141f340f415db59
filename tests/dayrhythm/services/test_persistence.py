"""
Tests for state document persistence.

Covers:
- Encoding format (sorted keys, indentation, ISO timestamps)
- Decoding failures surface as SerializationError
- Atomic writes
- SerialWriter ordering, flush, close
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from dayrhythm.lib.exceptions import SerializationError, StorageError
from dayrhythm.models import AppState, DayPlan, EnergyRhythm, Spot
from dayrhythm.services.persistence import SerialWriter, atomic_write, decode_state, encode_state


class TestEncodeDecode:
    def test_document_format(self) -> None:
        raw = encode_state(AppState())
        text = raw.decode("utf-8")
        document = json.loads(text)

        assert list(document) == sorted(document)
        assert text.startswith('{\n  "')
        # ISO-8601 with offset
        assert "T" in document["config"]["created_at"]
        assert document["config"]["rhythm_table"]["normal"]["budget_minutes"] == 420

    def test_round_trip_keeps_plans(self) -> None:
        state = AppState()
        plan = DayPlan.blank(date(2024, 3, 1), rhythm=EnergyRhythm.INTENSE)
        plan.variants[0].spots.append(Spot(title="Run", duration_min=45))
        state.day_plans.append(plan)

        decoded = decode_state(encode_state(state))

        assert decoded.day_plans[0].day_key == "2024-03-01"
        assert decoded.day_plans[0].variants[0].rhythm is EnergyRhythm.INTENSE
        assert decoded.day_plans[0].variants[0].spots[0].title == "Run"
        assert decoded == state

    def test_encoding_is_deterministic(self) -> None:
        state = AppState()
        assert encode_state(state) == encode_state(state)

    @pytest.mark.parametrize("raw", [b"", b"not json", b"[1, 2, 3]", b'{"day_plans": "nope"}'])
    def test_decode_failures(self, raw: bytes) -> None:
        with pytest.raises(SerializationError):
            decode_state(raw)

    def test_decode_ignores_unknown_fields(self) -> None:
        document = json.loads(encode_state(AppState()))
        document["legacy_field"] = 1
        state = decode_state(json.dumps(document).encode())
        assert isinstance(state, AppState)


class TestAtomicWrite:
    def test_writes_and_replaces(self, tmp_path: Path) -> None:
        target = tmp_path / "state.json"
        atomic_write(target, b"one")
        atomic_write(target, b"two")
        assert target.read_bytes() == b"two"
        # No temp files left behind
        assert [p.name for p in tmp_path.iterdir()] == ["state.json"]

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        target = tmp_path / "nested" / "dir" / "state.json"
        atomic_write(target, b"data")
        assert target.read_bytes() == b"data"

    def test_failure_raises_storage_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(StorageError):
            atomic_write(blocker / "state.json", b"data")


class TestSerialWriter:
    def test_writes_land_in_submission_order(self, tmp_path: Path) -> None:
        target = tmp_path / "state.json"
        writer = SerialWriter(target)
        for i in range(50):
            writer.submit(str(i).encode())
        assert writer.flush(timeout=10) is True
        assert target.read_bytes() == b"49"
        writer.close()

    def test_failed_write_is_logged_not_raised(self, tmp_path: Path, caplog) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        writer = SerialWriter(blocker / "state.json")

        future = writer.submit(b"data")
        writer.flush(timeout=10)

        assert future.exception() is None
        assert "State write failed" in caplog.text
        writer.close()

    def test_submit_after_close_is_dropped(self, tmp_path: Path) -> None:
        writer = SerialWriter(tmp_path / "state.json")
        writer.close()
        assert writer.closed is True
        assert writer.submit(b"late") is None
        assert not (tmp_path / "state.json").exists()

    def test_flush_with_nothing_pending(self, tmp_path: Path) -> None:
        writer = SerialWriter(tmp_path / "state.json")
        assert writer.flush() is True
        writer.close()

"""Unit tests for snapshot serialization and promotion."""

import os
from datetime import datetime
from pathlib import Path

import pytest

from hunt_summary.errors import OutputUnavailable
from hunt_summary.models.rows import PlayerRecord
from hunt_summary.storage.snapshots import LocalSnapshotStore, SnapshotWriter, serialize_snapshot


def _row(team, player, *values):
    return PlayerRecord(team_index=team, player_index=player, field_values=[(f"f{i}", v) for i, v in enumerate(values)])


class TestSerializeSnapshot:

    def test_header_then_rows_without_trailing_newline(self):
        content = serialize_snapshot(["Team", "Player", "mmr"], [_row(0, 0, "2500"), _row(0, 1, "2600")])

        assert content == b"Team,Player,mmr\n1,1,2500\n1,2,2600"

    def test_zero_based(self):
        content = serialize_snapshot(["Team", "Player", "mmr"], [_row(1, 2, "2500")], zero_based=True)

        assert content == b"Team,Player,mmr\n1,2,2500"

    def test_values_are_written_verbatim(self):
        content = serialize_snapshot(["Team", "Player", "name"], [_row(0, 0, 'a,b "c"')])

        assert content.decode("utf-8").splitlines()[1] == '1,1,a,b "c"'

    def test_header_only(self):
        assert serialize_snapshot(["Team", "Player"], []) == b"Team,Player"


class TestSnapshotWriter:

    def test_first_snapshot_is_promoted(self, memory_store, clock):
        writer = SnapshotWriter(memory_store, clock=clock)

        outcome = writer.write(b"A")

        assert outcome.promoted
        assert outcome.path == memory_store.path_for("2024-03-09_21-15-00.csv")
        assert memory_store.read_bytes("2024-03-09_21-15-00.csv") == b"A"
        assert not memory_store.exists("TEMP.CSV")
        assert outcome.previous is None

    def test_identical_content_is_not_promoted_again(self, memory_store, clock):
        writer = SnapshotWriter(memory_store, clock=clock)
        writer.write(b"A")

        outcome = writer.write(b"A")

        assert not outcome.promoted
        assert outcome.path == memory_store.path_for("TEMP.CSV")
        assert memory_store.read_bytes("TEMP.CSV") == b"A"
        assert sorted(memory_store.files) == ["2024-03-09_21-15-00.csv", "TEMP.CSV"]

    def test_novel_content_creates_exactly_one_new_file(self, memory_store, clock):
        writer = SnapshotWriter(memory_store, clock=clock)
        memory_store.add("2024-03-01_10-00-00.csv", b"A")
        before = dict(memory_store.files)

        outcome = writer.write(b"B")

        assert outcome.promoted
        assert outcome.previous == "2024-03-01_10-00-00.csv"
        new_files = set(memory_store.files) - set(before)
        assert new_files == {"2024-03-09_21-15-00.csv"}
        assert memory_store.read_bytes("2024-03-09_21-15-00.csv") == b"B"
        assert memory_store.files["2024-03-01_10-00-00.csv"] == before["2024-03-01_10-00-00.csv"]

    def test_only_most_recent_snapshot_is_compared(self, memory_store, clock):
        memory_store.add("old.csv", b"B", mtime=10)
        memory_store.add("new.csv", b"A", mtime=20)
        writer = SnapshotWriter(memory_store, clock=clock)

        assert writer.latest_snapshot() == "new.csv"
        assert writer.write(b"B").promoted
        assert not writer.write(b"B").promoted

    def test_staging_file_is_never_a_candidate(self, memory_store, clock):
        memory_store.add("TEMP.CSV", b"A", mtime=100)
        writer = SnapshotWriter(memory_store, clock=clock)

        assert writer.latest_snapshot() is None
        assert writer.write(b"A").promoted

    def test_custom_staging_name(self, memory_store, clock):
        writer = SnapshotWriter(memory_store, staging_name="pending.csv", clock=clock)

        writer.write(b"A")
        outcome = writer.write(b"A")

        assert not outcome.promoted
        assert memory_store.exists("pending.csv")

    def test_timestamp_collision_gets_suffix(self, memory_store):
        frozen = datetime(2024, 3, 9, 21, 15, 0)
        writer = SnapshotWriter(memory_store, clock=lambda: frozen)

        first = writer.write(b"A")
        second = writer.write(b"B")
        third = writer.write(b"C")

        assert first.path.name == "2024-03-09_21-15-00.csv"
        assert second.path.name == "2024-03-09_21-15-00_1.csv"
        assert third.path.name == "2024-03-09_21-15-00_2.csv"
        assert memory_store.read_bytes("2024-03-09_21-15-00.csv") == b"A"


class TestLocalSnapshotStore:

    def test_end_to_end_on_disk(self, tmp_path, clock):
        out_dir = tmp_path / "MatchData"
        writer = SnapshotWriter(LocalSnapshotStore(out_dir), clock=clock)

        first = writer.write(b"Team,Player\n1,1")
        second = writer.write(b"Team,Player\n1,1")

        assert first.promoted and not second.promoted
        assert first.path.read_bytes() == b"Team,Player\n1,1"
        assert sorted(p.name for p in out_dir.iterdir()) == ["2024-03-09_21-15-00.csv", "TEMP.CSV"]

    def test_latest_by_modification_time(self, tmp_path):
        store = LocalSnapshotStore(tmp_path)
        (tmp_path / "b.csv").write_bytes(b"B")
        (tmp_path / "a.csv").write_bytes(b"A")
        os.utime(tmp_path / "b.csv", (1_000, 1_000))
        os.utime(tmp_path / "a.csv", (2_000, 2_000))

        assert SnapshotWriter(store).latest_snapshot() == "a.csv"

    def test_only_csv_files_are_candidates(self, tmp_path):
        (tmp_path / "notes.txt").write_text("x")
        (tmp_path / "UPPER.CSV").write_text("x")
        (tmp_path / "TEMP.CSV").write_text("x")
        (tmp_path / "nested.csv").mkdir()

        names = [name for name, _ in LocalSnapshotStore(tmp_path).list_candidates(exclude="TEMP.CSV")]

        assert names == ["UPPER.CSV"]

    def test_unwritable_directory_raises_output_unavailable(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        writer = SnapshotWriter(LocalSnapshotStore(blocker / "MatchData"))

        with pytest.raises(OutputUnavailable) as exc_info:
            writer.write(b"A")

        assert exc_info.value.path == Path(blocker / "MatchData")

"""End-to-end tests of one extraction run over a dump on disk."""

import pytest

from hunt_summary.config import SchemaStrategy
from hunt_summary.errors import InputUnavailable, MalformedDump, MalformedInput, MissingField
from hunt_summary.pipelines.extract import ExtractionStatus, run_extraction
from hunt_summary.storage.snapshots import LocalSnapshotStore, SnapshotWriter
from tests.factories import fixed_pairs, pattern_pairs


@pytest.fixture
def out_dir(tmp_path):
    return tmp_path / "MatchData"


@pytest.fixture
def writer(out_dir, clock):
    return SnapshotWriter(LocalSnapshotStore(out_dir), clock=clock)


def _snapshots(out_dir):
    return sorted(p.name for p in out_dir.iterdir() if p.name != "TEMP.CSV")


def test_identical_dump_is_promoted_once(write_dump, writer, out_dir):
    dump = write_dump(fixed_pairs([2, 1]))

    first = run_extraction(dump, writer)
    second = run_extraction(dump, writer)

    assert first.status == ExtractionStatus.PROMOTED
    assert second.status == ExtractionStatus.UNCHANGED
    assert second.content == first.content
    assert (out_dir / "TEMP.CSV").read_bytes() == first.content
    assert _snapshots(out_dir) == [first.path.name]


def test_changed_dump_is_promoted_as_new_file(write_dump, writer, out_dir):
    dump = write_dump(fixed_pairs([1]))
    first = run_extraction(dump, writer)
    original = first.path.read_bytes()

    write_dump(fixed_pairs([1, 1]))
    second = run_extraction(dump, writer)

    assert second.promoted
    assert second.path != first.path
    assert second.path.read_bytes() == second.content
    assert first.path.read_bytes() == original
    assert len(_snapshots(out_dir)) == 2


def test_fixed_schema_output(write_dump, writer):
    result = run_extraction(write_dump(fixed_pairs([1, 2])), writer, zero_based=True)

    lines = result.text.split("\n")
    assert lines[0].startswith("Team,Player,blood_line_name,profileid,mmr,")
    assert [tuple(line.split(",")[:2]) for line in lines[1:]] == [("0", "0"), ("1", "0"), ("1", "1")]
    assert all(len(line.split(",")) == 19 for line in lines)
    assert result.rows == 3
    assert not result.text.endswith("\n")


def test_pattern_schema_output_is_one_based_by_default(write_dump, writer):
    dump = write_dump(pattern_pairs({
        (0, 0): [("blood_line_name", "Alice"), ("mmr", "2500")],
        (0, 1): [("blood_line_name", "Bob"), ("mmr", "2600")],
    }, num_teams=1))

    result = run_extraction(dump, writer, strategy=SchemaStrategy.PATTERN)

    assert result.text == "Team,Player,blood_line_name,mmr\n1,1,Alice,2500\n1,2,Bob,2600"


def test_no_match_data_leaves_output_untouched(write_dump, writer, out_dir):
    out_dir.mkdir()
    (out_dir / "2024-01-01_00-00-00.csv").write_bytes(b"old")
    before = {p.name: p.stat().st_mtime_ns for p in out_dir.iterdir()}

    result = run_extraction(write_dump([("MissionBagIsQuickPlay", "false")]), writer)

    assert result.status == ExtractionStatus.NO_MATCH_DATA
    assert result.path is None
    assert {p.name: p.stat().st_mtime_ns for p in out_dir.iterdir()} == before


def test_no_match_data_does_not_create_output_dir(write_dump, writer, out_dir):
    run_extraction(write_dump([]), writer)

    assert not out_dir.exists()


def test_malformed_dump_writes_nothing(write_dump, writer, out_dir):
    with pytest.raises(MalformedInput):
        run_extraction(write_dump([("MissionBagNumTeams", "two")]), writer)

    assert not out_dir.exists()


def test_missing_field_writes_nothing(write_dump, writer, out_dir):
    dump = write_dump(fixed_pairs([1], skip=["MissionBagPlayer_0_0_mmr"]))

    with pytest.raises(MissingField):
        run_extraction(dump, writer)

    assert not out_dir.exists()


def test_unreadable_dump(tmp_path, writer):
    with pytest.raises(InputUnavailable):
        run_extraction(tmp_path / "missing.xml", writer)


def test_garbage_dump_is_reported(tmp_path, writer, out_dir):
    dump = tmp_path / "attributes.xml"
    dump.write_text("this is not xml at all {{{", encoding="utf-8")

    with pytest.raises(MalformedDump) as exc_info:
        run_extraction(dump, writer)

    assert exc_info.value.path == dump
    assert not out_dir.exists()


def test_dump_cut_off_mid_write_is_not_promoted(write_dump, writer, out_dir):
    dump = write_dump(pattern_pairs({
        (0, 0): [("blood_line_name", "A"), ("mmr", "1")],
        (1, 0): [("blood_line_name", "B"), ("mmr", "2")],
    }, num_teams=2))
    first = run_extraction(dump, writer)
    full = dump.read_text(encoding="utf-8")
    dump.write_text(full[: full.index('<Attr name="MissionBagPlayer_1_0_mmr"') + 25], encoding="utf-8")

    with pytest.raises(MalformedDump):
        run_extraction(dump, writer)

    assert _snapshots(out_dir) == [first.path.name]

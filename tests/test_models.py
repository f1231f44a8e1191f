"""
Tests for data models: parameter validation, enums, errors and reports.
"""
import errno
import pytest
from dedup.core.models import (
    DeduplicationParams, DeduplicationStats, HashWidth, DedupStrategy, Action,
    DuplicateGroup, FileRecord, ScanResult, ActionReport, FileOutcome, OutcomeStatus,
    DedupError, ErrorKind, KeepSelection)


class TestDeduplicationParams:

    def test_defaults(self):
        params = DeduplicationParams(roots=["/data"])
        assert params.short_hash_bytes == 4096
        assert params.hash_width == HashWidth.BITS_64
        assert params.strategy == DedupStrategy.MAP
        assert params.recursive is False

    @pytest.mark.parametrize("kwargs", [
        {"roots": []},
        {"roots": [""]},
        {"roots": ["/data"], "short_hash_bytes": -1},
        {"roots": ["/data"], "progress_steps": 0},
        {"roots": ["/data"], "hash_width": 3},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            DeduplicationParams(**kwargs)

    def test_int_hash_width_is_converted(self):
        assert DeduplicationParams(roots=["/d"], hash_width=2).hash_width == HashWidth.BITS_16

    def test_from_human_readable(self):
        params = DeduplicationParams.from_human_readable(
            roots=("/a", "/b"), short_hash_str="1K", recursive=True, hash_width=4)
        assert params.roots == ["/a", "/b"]
        assert params.short_hash_bytes == 1024
        assert params.hash_width == HashWidth.BITS_32
        assert params.recursive


class TestEnums:

    def test_hash_width_masks(self):
        assert HashWidth.BITS_8.mask == 0xFF
        assert HashWidth.BITS_64.mask == 2 ** 64 - 1

    def test_read_only_actions(self):
        assert Action.LIST.is_read_only
        assert Action.SUMMARIZE.is_read_only
        assert not Action.HARD_LINK.is_read_only

    def test_failure_statuses(self):
        assert not OutcomeStatus.DELETED.is_failure
        assert OutcomeStatus.SKIPPED_MODIFIED.is_failure


class TestGroupsAndReports:

    def test_group_reclaimable_bytes(self):
        files = [FileRecord(path=f"/{i}", size=5, modified_at=0) for i in range(3)]
        group = DuplicateGroup(size=5, files=files)
        assert group.reclaimable_bytes == 10

    def test_scan_result_totals(self):
        result = ScanResult()
        result.add(FileRecord(path="/a", size=5, modified_at=0))
        result.add(FileRecord(path="/b", size=5, modified_at=0))
        result.add(FileRecord(path="/c", size=7, modified_at=0))
        assert (result.total_count, result.total_bytes) == (3, 17)
        assert len(result.size_table[5]) == 2

    def test_report_counts(self):
        report = ActionReport(action=Action.NO_PROMPT_DELETE)
        report.add(FileOutcome("/a", OutcomeStatus.KEPT))
        report.add(FileOutcome("/b", OutcomeStatus.DELETED))
        report.add(FileOutcome("/c", OutcomeStatus.NOT_FOUND))
        assert report.count(OutcomeStatus.DELETED) == 1
        assert [o.path for o in report.failures] == ["/c"]

    def test_outcome_text(self):
        outcome = FileOutcome("/b", OutcomeStatus.LINKED, target="/a")
        assert str(outcome) == "linked: /b -> /a"

    def test_keep_selection(self):
        assert KeepSelection.all().keeps(7)
        assert not KeepSelection.none().keeps(0)


class TestDedupError:

    def test_from_os_error(self):
        error = DedupError.from_os_error(OSError(errno.EACCES, "Permission denied"), "/x")
        assert error.kind == ErrorKind.IO
        assert error.path == "/x"
        assert str(error) == "Permission denied [/x]"

    def test_is_runtime_error(self):
        assert isinstance(DedupError(ErrorKind.INVARIANT, "bad"), RuntimeError)


class TestDeduplicationStats:

    def test_increment_accumulates(self):
        stats = DeduplicationStats()

        stats.increment("comparisons")
        stats.increment("comparisons", 2)

        assert stats.comparisons == 3

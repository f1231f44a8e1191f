"""
Tests for DuplicateService: summaries and keep previews of duplicate groups.
"""
from dedup.services.duplicate_service import DuplicateService
from dedup.core.models import FileRecord, DuplicateGroup


def _rec(path, size=100, modified_at=0, priority=0):
    return FileRecord(path=path, size=size, modified_at=modified_at, scan_priority=priority)


class TestSummarize:

    def test_counts_duplicates_not_originals(self):
        groups = [
            DuplicateGroup(size=100, files=[_rec("/a"), _rec("/b"), _rec("/c")]),
            DuplicateGroup(size=10, files=[_rec("/x", 10), _rec("/y", 10)]),
        ]

        summary = DuplicateService.summarize(groups)

        assert summary.duplicate_files == 3
        assert summary.groups == 2
        assert summary.reclaimable_bytes == 2 * 100 + 10

    def test_empty(self):
        summary = DuplicateService.summarize([])
        assert (summary.duplicate_files, summary.groups, summary.reclaimable_bytes) == (0, 0, 0)


class TestKeepOnlyOneFilePerGroup:
    """Preview of the automatic modes."""

    def test_identifies_files_to_act_on(self):
        group = DuplicateGroup(size=100, files=[
            _rec("/new", modified_at=300),
            _rec("/old", modified_at=100),
        ])

        kept, others = DuplicateService.keep_only_one_file_per_group([group])

        assert [f.path for f in kept] == ["/old"]
        assert [f.path for f in others] == ["/new"]

    def test_handles_multiple_groups_independently(self):
        groups = [
            DuplicateGroup(size=100, files=[_rec("/b1", priority=1), _rec("/a1", priority=0)]),
            DuplicateGroup(size=50, files=[_rec("/a2", 50), _rec("/b2", 50), _rec("/c2", 50)]),
        ]

        kept, others = DuplicateService.keep_only_one_file_per_group(groups)

        assert [f.path for f in kept] == ["/a1", "/a2"]
        assert [f.path for f in others] == ["/b1", "/b2", "/c2"]

    def test_handles_empty_groups_safely(self):
        kept, others = DuplicateService.keep_only_one_file_per_group([DuplicateGroup(size=1, files=[])])
        assert kept == [] and others == []

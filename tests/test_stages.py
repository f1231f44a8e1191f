"""
Unit tests for the candidate tables between the size table and the final groups.
Verifies deferred promotion in the short-hash tier and byte-verified sub-groups
in the full-hash tier.
"""
from dedup.core.stages import ShortHashTable, FullHashTable, partition_by_content
from dedup.core.models import FileRecord, DeduplicationStats


def _rec(name, size=10):
    return FileRecord(path=f"/data/{name}", size=size, modified_at=0)


class FakeComparer:
    """Compares records by a content label instead of reading files."""

    def __init__(self, contents, failing=()):
        self.contents = contents
        self.failing = set(failing)
        self.calls = []

    def same_content(self, first, second):
        self.calls.append((first.path, second.path))
        if first.path in self.failing or second.path in self.failing:
            raise PermissionError(13, "Permission denied", first.path)
        return self.contents[first.path] == self.contents[second.path]


class TestShortHashTable:
    """Test deferral of full hashing until a short-hash collision."""

    def test_first_record_is_held_back(self):
        table = ShortHashTable()

        assert table.insert(_rec("a"), 7) == []
        assert len(table) == 1

    def test_collision_promotes_occupant_and_newcomer(self):
        table = ShortHashTable()
        a, b = _rec("a"), _rec("b")
        table.insert(a, 7)

        promoted = table.insert(b, 7)

        assert promoted == [(a, 7), (b, 7)]

    def test_escalated_slot_promotes_only_the_newcomer(self):
        table = ShortHashTable()
        table.insert(_rec("a"), 7)
        table.insert(_rec("b"), 7)
        c = _rec("c")

        assert table.insert(c, 7) == [(c, 7)]

    def test_same_hash_different_size_does_not_collide(self):
        table = ShortHashTable()
        table.insert(_rec("a", size=10), 7)

        assert table.insert(_rec("b", size=20), 7) == []
        assert len(table) == 2

    def test_drain_empties_the_table(self):
        table = ShortHashTable()
        table.insert(_rec("a"), 1)
        table.insert(_rec("b"), 2)

        table.drain()

        assert len(table) == 0


class TestFullHashTable:
    """Test byte-verified grouping under a full-hash key."""

    def test_equal_content_forms_a_group(self):
        comparer = FakeComparer({"/data/a": "X", "/data/b": "X"})
        table = FullHashTable(comparer)
        table.insert(_rec("a"), 99)
        table.insert(_rec("b"), 99)

        groups = list(table.drain())

        assert len(groups) == 1
        assert [f.path for f in groups[0].files] == ["/data/a", "/data/b"]
        assert groups[0].size == 10

    def test_hash_collision_with_different_content_is_split(self):
        """Files sharing a full hash but not content never end up together."""
        comparer = FakeComparer({"/data/a": "X", "/data/b": "Y", "/data/c": "X", "/data/d": "Y"})
        stats = DeduplicationStats()
        table = FullHashTable(comparer, stats)
        for name in "abcd":
            table.insert(_rec(name), 1)

        groups = sorted(([f.name for f in g.files] for g in table.drain()))

        assert groups == [["a", "c"], ["b", "d"]]
        assert stats.comparisons == 4  # b:a, c:a, d:a, d:b

    def test_singletons_are_not_reported(self):
        comparer = FakeComparer({"/data/a": "X", "/data/b": "Y"})
        table = FullHashTable(comparer)
        table.insert(_rec("a"), 1)
        table.insert(_rec("b"), 2)

        assert list(table.drain()) == []
        assert len(table) == 0

    def test_comparison_error_is_isolated(self):
        comparer = FakeComparer(
            {"/data/a": "X", "/data/b": "X", "/data/c": "X"}, failing={"/data/b"})
        stats = DeduplicationStats()
        table = FullHashTable(comparer, stats)
        for name in "abc":
            table.insert(_rec(name), 5)

        groups = list(table.drain())

        # b could not be compared and stays alone; a and c are still grouped
        assert [[f.name for f in g.files] for g in groups] == [["a", "c"]]
        assert stats.errors == 1


class TestPartitionByContent:

    def test_keeps_input_order_inside_subgroups(self):
        comparer = FakeComparer({"/data/z": "X", "/data/y": "Y", "/data/x": "X"})
        records = [_rec("z"), _rec("y"), _rec("x")]

        subgroups = partition_by_content(records, comparer)

        assert [[r.name for r in s] for s in subgroups] == [["z", "x"], ["y"]]

    def test_empty_input(self):
        assert partition_by_content([], FakeComparer({})) == []

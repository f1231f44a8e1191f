"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Candidate tables used by the deduplication engine between the size table and
the final duplicate groups.

CLASS HIERARCHY
---------------
ShortHashTable  : (size, short hash) -> one pending record, or "escalated"
FullHashTable   : (size, full hash) -> sub-groups of byte-identical records
partition_by_content : byte-comparison grouping shared by both strategies

TIER CONTRACTS
--------------
  • A short-hash slot holds a single pending record until a second record
    lands on it. Both are then promoted and the slot stays escalated, so every
    later record with the same key is promoted directly.
  • A full-hash bucket never trusts the hash: a record joins a sub-group only
    after a byte comparison with that sub-group's first member.
  • Both tables are drained completely; only sub-groups with 2+ members
    become DuplicateGroups.
"""

import logging
from typing import List, Dict, Tuple, Iterator, Optional, Union

from dedup.core.models import FileRecord, DuplicateGroup, DeduplicationStats
from dedup.core.interfaces import ContentComparer

logger = logging.getLogger(__name__)


class _Escalated:
    """Marker for a short-hash slot whose records go straight to the full tier."""
    def __repr__(self):
        return "<escalated>"


ESCALATED = _Escalated()

ShortKey = Tuple[int, int]
PendingSlot = Tuple[FileRecord, int]


# =============================
# Short-hash tier
# =============================
class ShortHashTable:
    def __init__(self):
        self._slots: Dict[ShortKey, Union[PendingSlot, _Escalated]] = {}

    def insert(self, record: FileRecord, short_hash: int) -> List[PendingSlot]:
        """
        Registers a record under (size, short hash).

        Returns the (record, short hash) pairs that must be promoted to the
        full-hash tier: none for the first record on a key, the pending
        occupant plus the new record on the first collision, and just the new
        record once the slot is escalated.
        """
        key = (record.size, short_hash)
        slot = self._slots.get(key)

        if slot is None:
            # First file that produces this hash, defer the full hash
            self._slots[key] = (record, short_hash)
            return []

        self._slots[key] = ESCALATED
        if slot is ESCALATED:
            return [(record, short_hash)]
        return [slot, (record, short_hash)]

    def drain(self) -> None:
        """Pending slots never collided and hold a single file: no group."""
        self._slots.clear()

    def __len__(self) -> int:
        return len(self._slots)


# =============================
# Full-hash tier
# =============================
class FullHashTable:
    def __init__(self, comparer: ContentComparer, stats: Optional[DeduplicationStats] = None):
        self.comparer = comparer
        self.stats = stats
        self._buckets: Dict[Tuple[int, int], List[List[FileRecord]]] = {}

    def insert(self, record: FileRecord, full_hash: int) -> None:
        """
        Adds the record to the sub-group whose first member has the same
        content, or opens a new sub-group under the same hash.
        """
        subgroups = self._buckets.setdefault((record.size, full_hash), [])
        if not _join_matching_subgroup(record, subgroups, self.comparer, self.stats):
            subgroups.append([record])

    def drain(self) -> Iterator[DuplicateGroup]:
        """Yields every sub-group with 2+ members, emptying the table."""
        while self._buckets:
            (size, _), subgroups = self._buckets.popitem()
            for members in subgroups:
                if len(members) >= 2:
                    yield DuplicateGroup(size=size, files=members)

    def __len__(self) -> int:
        return len(self._buckets)


def partition_by_content(
    records: List[FileRecord],
    comparer: ContentComparer,
    stats: Optional[DeduplicationStats] = None
) -> List[List[FileRecord]]:
    """
    Splits same-size records into sub-groups of byte-identical files,
    keeping the input order inside each sub-group.
    """
    subgroups: List[List[FileRecord]] = []
    for record in records:
        if not _join_matching_subgroup(record, subgroups, comparer, stats):
            subgroups.append([record])
    return subgroups


def _join_matching_subgroup(
    record: FileRecord,
    subgroups: List[List[FileRecord]],
    comparer: ContentComparer,
    stats: Optional[DeduplicationStats]
) -> bool:
    for members in subgroups:
        if stats is not None:
            stats.increment("comparisons")
        try:
            if comparer.same_content(record, members[0]):
                members.append(record)
                return True
        except OSError as e:
            # Try the remaining sub-groups, a failed comparison proves nothing
            logger.warning(f"Could not compare {record.path} with {members[0].path}: {e.strerror or e}")
            if stats is not None:
                stats.increment("errors")
    return False

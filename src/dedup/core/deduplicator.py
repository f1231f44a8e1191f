"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Turns a size table into verified groups of byte-identical files.

Two strategies share the Deduplicator contract:
    - TieredDeduplicator (default): size → short hash (deferred full hash) → full hash → byte comparison
    - SortedDeduplicator: size → sorted short hashes → equal ranges → byte comparison
"""
import logging
import time
from typing import List, Optional, Callable

from dedup.core.models import (
    FileRecord, DuplicateGroup, DeduplicationStats, DeduplicationConfig,
    DedupStrategy, HashWidth, SizeTable)
from dedup.core.interfaces import Deduplicator, Hasher, ContentComparer
from dedup.core.hasher import HasherImpl, ByteComparer
from dedup.core.stages import ShortHashTable, FullHashTable, partition_by_content

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, Optional[int]], None]


class _ProgressReporter:
    """Calls back every `total / steps` files and once more at the end."""

    def __init__(self, callback: Optional[ProgressCallback], total: int, steps: int, stage: str):
        self.callback = callback
        self.total = total
        self.step_size = max(1, total // steps)  # Prevent zero step size
        self.stage = stage
        self.current = 0

    def advance(self) -> None:
        self.current += 1
        if self.callback and (self.current % self.step_size == 0 or self.current == self.total):
            self.callback(self.stage, self.current, self.total)


class DeduplicatorBase(Deduplicator):
    """Shared plumbing: unique-size elimination, stats, hashing with error isolation."""

    STAGE_NAME = "Deduplication"

    def __init__(
        self,
        hasher: Hasher = None,
        comparer: ContentComparer = None,
        progress_steps: int = DeduplicationConfig.DEFAULT_PROGRESS_STEPS
    ):
        self.hasher = hasher or HasherImpl()
        self.comparer = comparer or ByteComparer()
        self.progress_steps = progress_steps
        self._stats = DeduplicationStats()

    @property
    def stats(self) -> DeduplicationStats:
        return self._stats

    def deduplicate(
        self,
        size_table: SizeTable,
        short_hash_bytes: int = DeduplicationConfig.DEFAULT_SHORT_HASH_BYTES,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[DuplicateGroup]:
        """
        Main entry point. Drains `size_table` and returns duplicate groups,
        largest files first.
        """
        if short_hash_bytes < 0:
            raise ValueError("Short hash length cannot be negative")

        self._stats = DeduplicationStats()
        start_time = time.time()

        total = self._discard_unique_sizes(size_table)
        logger.debug(f"Discarded {self._stats.unique_size_discarded} files with unique size")
        progress = _ProgressReporter(progress_callback, total, self.progress_steps, self.STAGE_NAME)

        groups = self._find_groups(size_table, short_hash_bytes, progress)
        size_table.clear()

        groups.sort(key=lambda g: -g.size)
        self._stats.groups = len(groups)
        self._stats.total_time = time.time() - start_time
        return groups

    def _find_groups(self, size_table: SizeTable, short_hash_bytes: int,
                     progress: _ProgressReporter) -> List[DuplicateGroup]:
        raise NotImplementedError

    def _discard_unique_sizes(self, size_table: SizeTable) -> int:
        """Removes buckets with a single file; returns the number of files left."""
        for size in [s for s, records in size_table.items() if len(records) < 2]:
            self._stats.unique_size_discarded += len(size_table.pop(size))
        remaining = sum(len(records) for records in size_table.values())
        self._stats.files_considered = remaining
        return remaining

    @staticmethod
    def _pop_buckets(size_table: SizeTable):
        """Yields (size, records) while removing each bucket from the table."""
        for size in sorted(size_table, reverse=True):
            yield size, size_table.pop(size)

    def _short_hash(self, record: FileRecord, short_hash_bytes: int) -> Optional[int]:
        try:
            value = self.hasher.compute_short_hash(record, short_hash_bytes)
        except OSError as e:
            logger.warning(f"Could not hash {record.path}: {e.strerror or e}")
            self._stats.increment("errors")
            return None
        self._stats.increment("short_hashes")
        return value

    def _full_hash(self, record: FileRecord, short_hash_bytes: int, short_hash: Optional[int]) -> Optional[int]:
        # A prefix at least as long as the file already covers the whole content
        if short_hash is not None and 0 < record.size <= short_hash_bytes:
            return short_hash
        try:
            value = self.hasher.compute_full_hash(record)
        except OSError as e:
            logger.warning(f"Could not hash {record.path}: {e.strerror or e}")
            self._stats.increment("errors")
            return None
        self._stats.increment("full_hashes")
        return value


class TieredDeduplicator(DeduplicatorBase):
    """
    Hash-map strategy. The full hash of a file is computed only once another
    file of the same size produced the same short hash.
    """

    def _find_groups(self, size_table: SizeTable, short_hash_bytes: int,
                     progress: _ProgressReporter) -> List[DuplicateGroup]:
        short_table = ShortHashTable()
        full_table = FullHashTable(self.comparer, self._stats)

        for size, records in self._pop_buckets(size_table):
            for record in records:
                if short_hash_bytes == 0:
                    # No prefix tier: every candidate is hashed in full
                    self._promote(full_table, record, 0, None)
                else:
                    short_hash = self._short_hash(record, short_hash_bytes)
                    if short_hash is not None:
                        for promoted, promoted_hash in short_table.insert(record, short_hash):
                            self._promote(full_table, promoted, short_hash_bytes, promoted_hash)
                progress.advance()

        short_table.drain()
        return list(full_table.drain())

    def _promote(self, full_table: FullHashTable, record: FileRecord,
                 short_hash_bytes: int, short_hash: Optional[int]) -> None:
        full_hash = self._full_hash(record, short_hash_bytes, short_hash)
        if full_hash is not None:
            full_table.insert(record, full_hash)


class SortedDeduplicator(DeduplicatorBase):
    """
    Sorted-list strategy: every candidate of a size bucket gets a short hash,
    the bucket is sorted by it and each run of equal hashes is split by byte
    comparison. No full hash is computed.
    """

    def _find_groups(self, size_table: SizeTable, short_hash_bytes: int,
                     progress: _ProgressReporter) -> List[DuplicateGroup]:
        groups: List[DuplicateGroup] = []

        for size, records in self._pop_buckets(size_table):
            hashed = []
            for order, record in enumerate(records):
                short_hash = self._short_hash(record, short_hash_bytes)
                if short_hash is not None:
                    hashed.append((short_hash, order, record))
                progress.advance()

            # order keeps scan order inside every run of equal hashes
            hashed.sort(key=lambda item: (item[0], item[1]))

            start = 0
            while start < len(hashed):
                end = start
                while end < len(hashed) and hashed[end][0] == hashed[start][0]:
                    end += 1
                if end - start >= 2:
                    candidates = [record for _, _, record in hashed[start:end]]
                    for members in partition_by_content(candidates, self.comparer, self._stats):
                        if len(members) >= 2:
                            groups.append(DuplicateGroup(size=size, files=members))
                start = end

        return groups


def create_deduplicator(
    strategy: DedupStrategy = DedupStrategy.MAP,
    hash_width: HashWidth = HashWidth.BITS_64,
    progress_steps: int = DeduplicationConfig.DEFAULT_PROGRESS_STEPS,
    hasher: Hasher = None,
    comparer: ContentComparer = None
) -> DeduplicatorBase:
    """Builds the engine for the given strategy."""
    hasher = hasher or HasherImpl(width=hash_width)
    if strategy == DedupStrategy.SORTED:
        return SortedDeduplicator(hasher, comparer, progress_steps)
    return TieredDeduplicator(hasher, comparer, progress_steps)

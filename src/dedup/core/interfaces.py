"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the deduplication system.

Key Components:
---------------
- HashAlgorithm: Streaming hash function (xxHash3-64 by default).
- Hasher: Prefix and whole-file hashing of a FileRecord.
- ContentComparer: Byte-for-byte comparison of two files.
- FileScanner: Walks root paths and builds the size table.
- Deduplicator: Turns a size table into verified duplicate groups.
- Prompter: Interactive collaborator asked which files of a group to keep.
"""

from typing import Protocol, List, Optional, Callable
from dedup.core.models import (
    FileRecord,
    DuplicateGroup,
    DeduplicationStats,
    ScanResult,
    SizeTable,
)


# ===== Interfaces =====

class HashState(Protocol):
    def update(self, data: bytes) -> None: ...
    def intdigest(self) -> int: ...


class HashAlgorithm(Protocol):
    """
    Interface for streaming hash algorithms.

    Allows plugging in a different hash function without touching the
    deduplication logic.
    """

    @staticmethod
    def new() -> HashState:
        """Returns a fresh streaming hash state."""
        ...


class Hasher(Protocol):
    """Interface for hashing the beginning or the whole content of a file."""
    def compute_short_hash(self, file: FileRecord, num_bytes: int) -> int: ...
    def compute_full_hash(self, file: FileRecord) -> int: ...


class ContentComparer(Protocol):
    def same_content(self, first: FileRecord, second: FileRecord) -> bool:
        """True if both files hold exactly the same bytes. Raises OSError."""
        ...


class FileScanner(Protocol):
    """
    Interface for scanning file systems and collecting file metadata.
    """
    def scan(
        self,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> ScanResult:
        """
        Scan the configured roots.

        Args:
            progress_callback: Optional callback (stage, current, total).

        Returns:
            ScanResult with the size table and totals.
        """
        ...


class Deduplicator(Protocol):
    """
    Interface for the deduplication engine.

    Every implementation consumes (drains) the size table and returns
    groups of at least two byte-identical files.
    """
    def deduplicate(
        self,
        size_table: SizeTable,
        short_hash_bytes: int,
        progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> List[DuplicateGroup]:
        ...

    @property
    def stats(self) -> DeduplicationStats:
        ...


class Prompter(Protocol):
    def __call__(self, group: DuplicateGroup, index_base: int) -> str:
        """Show the group and return the raw answer typed by the user."""
        ...

"""
Core deduplication engine: scanner, hasher, candidate tables, engine and executor.

This package contains the performance-critical foundation of dedup:
- FileScannerImpl: walks root paths, skips symlinks/empty files, collapses hard links
- HasherImpl + XXHashAlgorithmImpl: xxHash3-64 prefix and whole-file hashing
- TieredDeduplicator / SortedDeduplicator: size → short hash → full hash → byte comparison
- ActionExecutor: delete or link duplicates with race checks and rollback
- Models: FileRecord, DuplicateGroup, ActionReport and configuration objects

All components are pure Python, suitable for CLI and library usage.
"""

from .models import (
    FileRecord, DuplicateGroup, ScanResult, Summary, Action, HashWidth, DedupStrategy,
    DeduplicationParams, DeduplicationStats, DeduplicationConfig, KeepSelection,
    FileOutcome, ActionReport, OutcomeStatus, DedupError, ErrorKind)
from .scanner import FileScannerImpl
from .hasher import HasherImpl, XXHashAlgorithmImpl, ByteComparer
from .deduplicator import TieredDeduplicator, SortedDeduplicator, create_deduplicator
from .sorter import Sorter
from .selection import parse_keep_selection
from .executor import ActionExecutor

__all__ = [
    "FileScannerImpl",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "ByteComparer",
    "TieredDeduplicator",
    "SortedDeduplicator",
    "create_deduplicator",
    "Sorter",
    "parse_keep_selection",
    "ActionExecutor",
    "FileRecord",
    "DuplicateGroup",
    "ScanResult",
    "Summary",
    "Action",
    "HashWidth",
    "DedupStrategy",
    "DeduplicationParams",
    "DeduplicationStats",
    "DeduplicationConfig",
    "KeepSelection",
    "FileOutcome",
    "ActionReport",
    "OutcomeStatus",
    "DedupError",
    "ErrorKind",
]

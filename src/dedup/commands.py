"""
Unified command orchestrator for deduplication.
Root normalization → scan → deduplicate, used by the CLI and by library callers.
"""
import logging
import os
from typing import List, Optional, Callable, Tuple

from dedup.core.models import (
    DuplicateGroup, DeduplicationStats, DeduplicationParams, ScanResult,
    DedupError, ErrorKind)
from dedup.core.scanner import FileScannerImpl
from dedup.core.deduplicator import create_deduplicator

logger = logging.getLogger(__name__)


def normalize_roots(roots: List[str]) -> List[str]:
    """
    Canonical, absolute roots in caller order (the order defines scan priority).
    Missing, unreadable and symlinked roots are reported and skipped, repeated
    roots keep only their first occurrence.
    """
    normalized = []
    seen = set()
    for root in roots:
        if os.path.islink(root):
            logger.warning(f"Skipping symbolic link given as path: {root}")
            continue
        if not os.path.exists(root):
            logger.warning(f"{root} does not exist")
            continue
        if not os.access(root, os.R_OK):
            logger.warning(f"{root} is not readable")
            continue
        canonical = os.path.realpath(os.path.abspath(root))
        if canonical in seen:
            logger.debug(f"Skipping repeated path: {root}")
            continue
        seen.add(canonical)
        normalized.append(canonical)
    return normalized


class DeduplicationCommand:
    """
    Orchestrates the find-duplicates workflow:
    1. Normalize the root paths
    2. Scan them into a size table
    3. Run the engine selected by params.strategy

    Usage:
        params = DeduplicationParams(roots=["/photos", "/backup"], recursive=True)
        command = DeduplicationCommand()
        groups, stats = command.execute(params, progress_callback=printer)
    """

    def __init__(self):
        self._scan_result: Optional[ScanResult] = None

    def execute(
            self,
            params: DeduplicationParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[List[DuplicateGroup], DeduplicationStats]:
        """
        Execute deduplication with given parameters.

        Args:
            params: Validated deduplication parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (duplicate_groups, statistics)

        Raises:
            DedupError: If none of the root paths can be used
        """
        roots = normalize_roots(params.roots)
        if not roots:
            raise DedupError(ErrorKind.NO_ROOTS, "No readable root paths given")

        scanner = FileScannerImpl(roots=roots, recursive=params.recursive)
        scan_result = scanner.scan(progress_callback=progress_callback)
        self._scan_result = ScanResult(
            total_count=scan_result.total_count,
            total_bytes=scan_result.total_bytes,
            skipped_directories=scan_result.skipped_directories)

        deduplicator = create_deduplicator(
            strategy=params.strategy,
            hash_width=params.hash_width,
            progress_steps=params.progress_steps,
        )
        groups = deduplicator.deduplicate(
            scan_result.size_table,
            params.short_hash_bytes,
            progress_callback=progress_callback
        )
        return groups, deduplicator.stats

    @property
    def scan_totals(self) -> Tuple[int, int]:
        """(file count, total bytes) of the last scan."""
        if self._scan_result is None:
            return 0, 0
        return self._scan_result.total_count, self._scan_result.total_bytes

    @property
    def skipped_directories(self) -> List[DedupError]:
        """DIRECTORY_ACCESS errors of the last scan."""
        if self._scan_result is None:
            return []
        return list(self._scan_result.skipped_directories)

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements file scanning over an ordered list of root paths.
Features:
- Roots may be single files or directories (walked recursively or one level deep)
- Symlinks are never followed or recorded, empty files are skipped
- Extra hard links to an inode that was already recorded are collapsed
- Returns a ScanResult: files bucketed by size plus count and byte totals
"""

import os
import stat
from typing import List, Optional, Callable, Dict, Set, Tuple
import time
import logging

logger = logging.getLogger(__name__)

# Local imports
from dedup.core.models import FileRecord, ScanResult, DedupError, ErrorKind
from dedup.core.interfaces import FileScanner


class FileScannerImpl(FileScanner):
    """
    Walks root paths and collects FileRecords. Only metadata is read.

    Attributes:
        roots: Root paths, in priority order (index = scan_priority)
        recursive: Descend into subdirectories
    """

    def __init__(self, roots: List[str], recursive: bool = False):
        self.roots = list(roots)
        self.recursive = recursive
        # size -> (st_dev, st_ino) already recorded, for hard link collapsing
        self._seen_inodes: Dict[int, Set[Tuple[int, int]]] = {}
        self._skipped_directories: List[DedupError] = []

    def scan(self,
             progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None) -> ScanResult:
        """
        Scans every root in order and returns the size table with totals.
        Unreadable entries are logged and skipped. Directories that cannot be
        listed are also kept in ScanResult.skipped_directories.
        """
        logger.debug(f"Starting scan of {len(self.roots)} root(s), recursive={self.recursive}")
        result = ScanResult()
        self._seen_inodes = {}
        self._skipped_directories = []
        start_time = time.time()

        # Progress throttling: update every N entries
        progress_interval = 5000
        progress_counter = 0
        processed = 0

        for priority, root in enumerate(self.roots):
            for path in self._iter_root(root):
                record = self._process_file(path, priority)
                if record is not None:
                    result.add(record)
                processed += 1
                progress_counter += 1
                if progress_callback and progress_counter >= progress_interval:
                    progress_callback('scanning', processed, None)
                    progress_counter = 0

        if progress_callback and progress_counter > 0:
            progress_callback('scanning', processed, None)

        result.skipped_directories = list(self._skipped_directories)
        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.debug(f"Scan completed. Recorded {result.total_count} files, {result.total_bytes} bytes.")
        return result

    def _iter_root(self, root: str):
        """Yields candidate paths under one root in a stable (sorted) order."""
        try:
            root_is_dir = os.path.isdir(root) and not os.path.islink(root)
        except OSError as e:
            logger.warning(f"Cannot access {root}: {e}")
            return

        if not root_is_dir:
            yield root
            return

        if not self.recursive:
            yield from self._list_directory(root)
            return

        def on_walk_error(error: OSError) -> None:
            # os.walk drops the subtree it could not list and carries on
            self._skip_directory(error.filename, error)

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_walk_error, followlinks=False):
            dirnames.sort()
            for filename in sorted(filenames):
                yield os.path.join(dirpath, filename)

    def _list_directory(self, directory: str) -> List[str]:
        try:
            with os.scandir(directory) as entries:
                names = sorted(entry.name for entry in entries)
        except OSError as e:
            self._skip_directory(directory, e)
            return []
        return [os.path.join(directory, name) for name in names]

    def _skip_directory(self, directory: str, error: OSError) -> None:
        logger.warning(f"Skipping directory {directory}: {error.strerror or error}")
        self._skipped_directories.append(
            DedupError.from_os_error(error, directory, kind=ErrorKind.DIRECTORY_ACCESS))

    def _process_file(self, path: str, priority: int) -> Optional[FileRecord]:
        """
        Returns a FileRecord if the path is a non-empty regular file that is not
        an extra link to an inode recorded earlier, else None.
        """
        try:
            # lstat: a symlink reports itself, not its target
            st = os.lstat(path)
        except OSError as e:
            logger.warning(f"Could not stat {path}: {e.strerror or e}")
            return None

        if stat.S_ISLNK(st.st_mode):
            logger.debug(f"Skipping symbolic link: {path}")
            return None

        if not stat.S_ISREG(st.st_mode):
            return None

        if st.st_size == 0:
            logger.debug(f"Skipping zero-byte file: {path}")
            return None

        inode = (st.st_dev, st.st_ino)
        seen = self._seen_inodes.setdefault(st.st_size, set())
        if inode in seen:
            # Another hard link (or another route) to a file already recorded
            logger.debug(f"Skipping extra link to an already recorded file: {path}")
            return None
        seen.add(inode)

        logger.debug(f"Accepted file: {path} ({st.st_size} bytes)")
        return FileRecord(
            path=path,
            size=st.st_size,
            modified_at=st.st_mtime_ns,
            scan_priority=priority,
        )

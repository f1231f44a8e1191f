"""
Shared fixtures for dedup tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so the 'dedup' package is importable without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from dedup.core.models import FileRecord, DuplicateGroup

BASE_MTIME_NS = 1_600_000_000 * 1_000_000_000


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def set_mtime(path: Path, offset_seconds: int = 0) -> int:
    """Pins the modification time of `path` and returns it in nanoseconds."""
    mtime = BASE_MTIME_NS + offset_seconds * 1_000_000_000
    os.utime(path, ns=(mtime, mtime))
    return mtime


def record_for(path: Path, priority: int = 0) -> FileRecord:
    """FileRecord as the scanner would build it for `path`."""
    st = os.lstat(path)
    return FileRecord(path=str(path), size=st.st_size, modified_at=st.st_mtime_ns, scan_priority=priority)


@pytest.fixture
def make_record():
    return record_for


@pytest.fixture
def pin_mtime():
    return set_mtime


@pytest.fixture
def make_group():
    """Builds a DuplicateGroup from paths (written beforehand by the test)."""
    def _make(paths, priorities=None):
        priorities = priorities or [0] * len(paths)
        records = [record_for(p, prio) for p, prio in zip(paths, priorities)]
        return DuplicateGroup(size=records[0].size, files=records)
    return _make


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - 2 identical 1KB files plus a 1KB file that differs only in its last byte
    - 2 identical 2KB files
    - 2 files with unique sizes
    - 1 empty file (skipped by the scanner)
    - a subdirectory with one more copy of the 1KB content
    """
    files = {}

    # Duplicate pair #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Same size and same prefix as pair #1, different last byte
    files["near1"] = temp_dir / "near1.txt"
    files["near1"].write_bytes(b"A" * 1023 + b"Z")

    # Duplicate pair #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique sizes
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    # Empty file (0 bytes, skipped by the scanner)
    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Subdirectory with duplicates
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)  # Same as dup1_a/b

    for offset, key in enumerate(sorted(files)):
        set_mtime(files[key], offset)

    return files

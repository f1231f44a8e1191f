"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for scanning, deduplication and acting on duplicate groups.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, FrozenSet
import os
from enum import Enum


# =============================
# Enums
# =============================

class Action(Enum):
    """
    What to do with the verified duplicate groups.
    LIST and SUMMARIZE are read-only, the others mutate the filesystem.
    """
    LIST = "list"
    SUMMARIZE = "summarize"
    PROMPT_DELETE = "prompt-delete"
    NO_PROMPT_DELETE = "no-prompt-delete"
    HARD_LINK = "hardlink"
    SYM_LINK = "symlink"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            Action.LIST: "List",
            Action.SUMMARIZE: "Summarize",
            Action.PROMPT_DELETE: "Delete (interactive)",
            Action.NO_PROMPT_DELETE: "Delete (automatic)",
            Action.HARD_LINK: "Replace with hard links",
            Action.SYM_LINK: "Replace with symbolic links",
        }
        return mapping.get(self, self.value)

    @property
    def is_read_only(self) -> bool:
        return self in (Action.LIST, Action.SUMMARIZE)

    def __repr__(self) -> str:
        return self.value


class HashWidth(Enum):
    """
    Width of the hash digest used as a tier key, in bytes.
    Narrower digests collide more often; byte comparison keeps results correct.
    """
    BITS_8 = 1
    BITS_16 = 2
    BITS_32 = 4
    BITS_64 = 8

    @property
    def mask(self) -> int:
        return (1 << (self.value * 8)) - 1

    @classmethod
    def from_bytes(cls, size: int) -> "HashWidth":
        for width in cls:
            if width.value == size:
                return width
        valid = ", ".join(str(w.value) for w in cls)
        raise ValueError(f"Invalid hash width: {size} (valid values are {valid})")


class DedupStrategy(Enum):
    """Storage strategy for the short-hash and full-hash tiers."""
    MAP = "map"
    SORTED = "sorted"

    @property
    def description(self) -> str:
        mapping = {
            DedupStrategy.MAP: "Tiered hash maps, full hash computed only after a short-hash collision",
            DedupStrategy.SORTED: "Sorted list of short hashes, equal ranges verified byte by byte",
        }
        return mapping.get(self, self.value)


class OutcomeStatus(Enum):
    KEPT = "kept"
    DELETED = "deleted"
    LINKED = "linked"
    SKIPPED_MODIFIED = "skipped-modified"
    NOT_FOUND = "not-found"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        return self in (OutcomeStatus.SKIPPED_MODIFIED, OutcomeStatus.NOT_FOUND, OutcomeStatus.ERROR)


class ErrorKind(Enum):
    IO = "io"
    DIRECTORY_ACCESS = "directory-access"
    MODIFIED_SINCE_SCAN = "modified-since-scan"
    LINK_FAILED = "link-failed"
    ROLLBACK_FAILED = "rollback-failed"
    INVARIANT = "invariant"
    NO_ROOTS = "no-roots"


# =============================
# Errors
# =============================

class DedupError(RuntimeError):
    """
    The one error type of the package. `kind` tells which part of the
    error taxonomy it belongs to, `path` names the file involved (if any).

    Per-file failures travel inside FileOutcome objects; only setup
    failures and invariant violations are raised.
    """

    def __init__(self, kind: ErrorKind, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.path = path

    @classmethod
    def from_os_error(cls, error: OSError, path: str, kind: ErrorKind = ErrorKind.IO) -> "DedupError":
        reason = error.strerror or str(error)
        return cls(kind, f"{reason} [{path}]", path=path)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"<DedupError kind={self.kind.value}, path={self.path}>"


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileRecord:
    """
    One regular file as it was at scan time.
    `modified_at` is the modification time in nanoseconds (st_mtime_ns),
    `scan_priority` the 0-based index of the root the file was found under.
    """
    path: str
    size: int  # in bytes
    modified_at: int
    scan_priority: int = 0

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self):
        return f"<FileRecord path={self.path}, size={self.size}>"


# size -> records of that size, in scan order
SizeTable = Dict[int, List[FileRecord]]


@dataclass
class ScanResult:
    """
    Output of the scanner: the size table plus totals for reporting.
    `skipped_directories` holds one DIRECTORY_ACCESS error per directory
    that could not be listed.
    """
    size_table: SizeTable = field(default_factory=dict)
    total_count: int = 0
    total_bytes: int = 0
    skipped_directories: List[DedupError] = field(default_factory=list)

    def add(self, record: FileRecord) -> None:
        self.size_table.setdefault(record.size, []).append(record)
        self.total_count += 1
        self.total_bytes += record.size


@dataclass
class DuplicateGroup:
    """
    Files whose whole content was verified byte-identical.
    A group returned by the engine always holds at least two files.
    """
    size: int
    files: List[FileRecord]

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.files)

    @property
    def reclaimable_bytes(self) -> int:
        """Bytes freed by keeping a single copy."""
        return max(0, self.duplicate_count - 1) * self.size

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}>"


@dataclass(frozen=True)
class Summary:
    duplicate_files: int
    groups: int
    reclaimable_bytes: int

    @staticmethod
    def from_groups(groups: List[DuplicateGroup]) -> "Summary":
        # A set of n identical files has n - 1 duplicate files
        return Summary(
            duplicate_files=sum(g.duplicate_count - 1 for g in groups),
            groups=len(groups),
            reclaimable_bytes=sum(g.reclaimable_bytes for g in groups),
        )


@dataclass(frozen=True)
class KeepSelection:
    """
    Parsed answer of the interactive prompt.
    `indices` holds positions in the group (already converted to 0-based).
    """
    keep_all: bool = False
    indices: FrozenSet[int] = frozenset()

    @staticmethod
    def all() -> "KeepSelection":
        return KeepSelection(keep_all=True)

    @staticmethod
    def none() -> "KeepSelection":
        return KeepSelection()

    def keeps(self, index: int) -> bool:
        return self.keep_all or index in self.indices


@dataclass
class FileOutcome:
    path: str
    status: OutcomeStatus
    error: Optional[DedupError] = None
    target: Optional[str] = None  # kept file a link points at

    def __str__(self) -> str:
        text = f"{self.status.value}: {self.path}"
        if self.target:
            text += f" -> {self.target}"
        if self.error is not None:
            text += f" ({self.error})"
        return text


@dataclass
class ActionReport:
    """Per-file outcomes of one executor run, in execution order."""
    action: Action
    outcomes: List[FileOutcome] = field(default_factory=list)
    bytes_reclaimed: int = 0

    def add(self, outcome: FileOutcome) -> None:
        self.outcomes.append(outcome)

    def with_status(self, status: OutcomeStatus) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status == status]

    def count(self, status: OutcomeStatus) -> int:
        return len(self.with_status(status))

    @property
    def failures(self) -> List[FileOutcome]:
        return [o for o in self.outcomes if o.status.is_failure]


@dataclass
class DeduplicationStats:
    """
    Counters collected while the engine runs.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_considered: int = 0
        self.unique_size_discarded: int = 0
        self.short_hashes: int = 0
        self.full_hashes: int = 0
        self.comparisons: int = 0
        self.errors: int = 0
        self.groups: int = 0

    def increment(self, counter: str, amount: int = 1) -> None:
        value = getattr(self, counter) + amount
        setattr(self, counter, value)

    def print_summary(self) -> str:
        lines = [
            "Deduplication Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Files considered: {self.files_considered}",
            f"Discarded (unique size): {self.unique_size_discarded}",
            f"Short hashes: {self.short_hashes}",
            f"Full hashes: {self.full_hashes}",
            f"Byte comparisons: {self.comparisons}",
            f"Unreadable files: {self.errors}",
            f"Duplicate groups: {self.groups}",
        ]
        return "\n".join(lines)


"""
DTO for deduplication parameters with built-in validation.
Interface-agnostic, the CLI and tests both build it.
"""
from dedup.utils.convert_utils import ConvertUtils


class DeduplicationConfig:
    DEFAULT_SHORT_HASH_BYTES = 4096
    READ_BUFFER_SIZE = 64 * 1024
    DEFAULT_PROGRESS_STEPS = 20  # report every 5%
    TEMP_SUFFIX = ".dedup-tmp"
    TEMP_NAME_CHARS = 32  # of the original name kept in a temporary sibling


@dataclass
class DeduplicationParams:
    """Parameters for a deduplication run with validation."""
    roots: List[str]
    recursive: bool = False
    short_hash_bytes: int = DeduplicationConfig.DEFAULT_SHORT_HASH_BYTES
    hash_width: HashWidth = HashWidth.BITS_64
    strategy: DedupStrategy = DedupStrategy.MAP
    progress_steps: int = DeduplicationConfig.DEFAULT_PROGRESS_STEPS

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.roots:
            raise ValueError("At least one root path is required")

        if any(not root for root in self.roots):
            raise ValueError("Root path cannot be empty")

        if self.short_hash_bytes < 0:
            raise ValueError("Short hash length cannot be negative")

        if self.progress_steps < 1:
            raise ValueError("Progress steps must be at least 1")

        if isinstance(self.hash_width, int):
            self.hash_width = HashWidth.from_bytes(self.hash_width)

    @staticmethod
    def from_human_readable(
            roots: List[str],
            short_hash_str: str = "4096",
            recursive: bool = False,
            hash_width: int = 8,
            strategy: DedupStrategy = DedupStrategy.MAP,
    ) -> 'DeduplicationParams':
        """
        Factory method to create params from human-readable inputs,
        e.g. a prefix length of "4K".
        """
        return DeduplicationParams(
            roots=list(roots),
            recursive=recursive,
            short_hash_bytes=ConvertUtils.human_to_bytes(short_hash_str),
            hash_width=HashWidth.from_bytes(hash_width),
            strategy=strategy,
        )

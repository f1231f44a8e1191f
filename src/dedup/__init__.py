"""
dedup: find files with byte-identical content and act on them.

Core features:
- Three-tier candidate narrowing: size → short (prefix) hash → full hash → byte comparison
- Actions: list, summarize, delete (interactive or automatic), replace with hard or symbolic links
- Race-safe mutations: files modified since the scan are never deleted or replaced
- Optional deletion to the system trash (via send2trash)
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dedup")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    from pathlib import Path as _Path
    _pyproject = _Path(__file__).resolve().parents[2] / "pyproject.toml"
    with open(_pyproject, "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API, only what users should import directly
from dedup.commands import DeduplicationCommand
from dedup.core import (
    DeduplicationParams, Action, HashWidth, DedupStrategy, FileRecord, DuplicateGroup,
    ActionExecutor, ActionReport, OutcomeStatus, DedupError, ErrorKind)
from dedup.utils.convert_utils import ConvertUtils
from dedup.services import DuplicateService
from dedup.services.file_service import FileService

__all__ = [
    "DeduplicationCommand",
    "DeduplicationParams",
    "Action",
    "HashWidth",
    "DedupStrategy",
    "FileRecord",
    "DuplicateGroup",
    "ActionExecutor",
    "ActionReport",
    "OutcomeStatus",
    "DedupError",
    "ErrorKind",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "__version__",
]

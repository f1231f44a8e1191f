"""File operations and duplicate group management services."""

from .duplicate_service import DuplicateService
from .file_service import FileService

__all__ = ["DuplicateService", "FileService"]

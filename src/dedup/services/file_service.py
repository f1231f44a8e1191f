"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Filesystem primitives used when acting on duplicate groups: probing the
modification time, removing (permanently or to the system trash), renaming
and creating hard or symbolic links.

Every method raises OSError (FileNotFoundError when the path is gone);
callers decide how a failure is reported.
"""
import os
import uuid
from pathlib import Path
from send2trash import send2trash

from dedup.core.models import DeduplicationConfig


class FileService:
    """
    Thin wrappers over os calls so the executor can be tested with fault injection.
    """

    @staticmethod
    def modified_at(file_path: str) -> int:
        """Current modification time in nanoseconds, without following symlinks."""
        return os.lstat(file_path).st_mtime_ns

    @staticmethod
    def remove(file_path: str):
        """Deletes a file permanently."""
        os.unlink(file_path)

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path)

        if not path.exists() and not path.is_symlink():
            raise FileNotFoundError(2, "No such file or directory", file_path)

        try:
            send2trash(str(path))
        except OSError:
            raise
        except Exception as e:
            raise OSError(f"Failed to move to trash: {e}") from e

    @staticmethod
    def rename(source: str, destination: str):
        os.rename(source, destination)

    @staticmethod
    def hard_link(target: str, link_path: str):
        """Creates `link_path` as another name of `target`."""
        os.link(target, link_path)

    @staticmethod
    def sym_link(target: str, link_path: str):
        """Creates `link_path` pointing at the absolute path of `target`."""
        os.symlink(os.path.abspath(target), link_path)

    @staticmethod
    def temporary_sibling(file_path: str) -> str:
        """
        Returns an unused name in the same directory, so that a rename to it
        never crosses a filesystem boundary. Only the start of the original
        name is used, the result stays short even for names near NAME_MAX.
        """
        directory, name = os.path.split(file_path)
        stem = name[:DeduplicationConfig.TEMP_NAME_CHARS]
        while True:
            candidate = os.path.join(
                directory, f".{stem}.{uuid.uuid4().hex[:8]}{DeduplicationConfig.TEMP_SUFFIX}")
            if not os.path.lexists(candidate):
                return candidate

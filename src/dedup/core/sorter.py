"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Pure keep-selection logic for duplicate groups, zero dependencies outside core.
"""
from typing import List, Tuple
from dedup.core.models import DuplicateGroup, FileRecord


class Sorter:
    """
    Orders files inside duplicate groups so that the file to keep comes first.
    Sorting priority (applied lexicographically):
    1. scan_priority ascending: a file from an earlier-given root wins
    2. modified_at ascending: within one root the oldest file wins
    The sort is stable, so remaining ties keep scan order.
    """

    @staticmethod
    def keep_key(file: FileRecord) -> Tuple[int, int]:
        return file.scan_priority, file.modified_at

    @staticmethod
    def split_keep(group: DuplicateGroup) -> Tuple[FileRecord, List[FileRecord]]:
        """Returns (file to keep, files to act on) without touching the group."""
        ordered = sorted(group.files, key=Sorter.keep_key)
        return ordered[0], ordered[1:]

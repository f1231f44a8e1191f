from typing import List, Tuple
from dedup.core.models import DuplicateGroup, FileRecord, Summary
from dedup.core.sorter import Sorter


class DuplicateService:
    @staticmethod
    def summarize(groups: List[DuplicateGroup]) -> Summary:
        """
        Counts duplicate files (n - 1 per group of n), groups and the bytes
        that keeping a single copy per group would free.
        """
        return Summary.from_groups(groups)

    @staticmethod
    def keep_only_one_file_per_group(groups: List[DuplicateGroup]) -> Tuple[List[FileRecord], List[FileRecord]]:
        """
        Preview of the automatic modes, nothing is touched.
        Returns:
            - Files that would be kept (one per group)
            - Files that would be deleted or replaced by links
        """
        kept_files = []
        other_files = []
        for group in groups:
            if not group.files:
                continue
            kept, others = Sorter.split_keep(group)
            kept_files.append(kept)
            other_files.extend(others)
        return kept_files, other_files

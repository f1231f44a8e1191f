"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/executor.py
Acts on verified duplicate groups: deletes, or replaces with hard/symbolic links.

SAFETY RULES
------------
  • Before a file is removed or replaced, its current modification time is
    compared with the one recorded at scan time. A mismatch skips that file.
  • Link replacement is rename → link → delete temporary. A failure at any
    step undoes the previous steps, so the original name always ends up
    holding either the link or the untouched original.
  • One file failing never stops the batch; every file gets a FileOutcome.

Interruption by process kill in the middle of a replacement can still leave
the temporary sibling (".<name>.<random>.dedup-tmp") behind next to the file.
"""

import logging
from typing import List, Optional, Type

from dedup.core.models import (
    Action, DuplicateGroup, FileRecord, ActionReport, FileOutcome,
    OutcomeStatus, DedupError, ErrorKind)
from dedup.core.interfaces import Prompter
from dedup.core.selection import parse_keep_selection
from dedup.core.sorter import Sorter
from dedup.services.file_service import FileService

logger = logging.getLogger(__name__)


class ActionExecutor:
    """
    Executes an Action over a list of duplicate groups.

    Attributes:
        prompter: Interactive collaborator, required for PROMPT_DELETE
        use_trash: Move removed files to the system trash instead of unlinking
        index_base: First index shown by the prompter (0 or 1)
    """

    def __init__(
        self,
        prompter: Optional[Prompter] = None,
        use_trash: bool = False,
        index_base: int = 1,
        file_service: Type[FileService] = FileService
    ):
        if index_base not in (0, 1):
            raise ValueError("index_base must be 0 or 1")
        self.prompter = prompter
        self.use_trash = use_trash
        self.index_base = index_base
        self.fs = file_service

    def execute(self, action: Action, groups: List[DuplicateGroup]) -> ActionReport:
        report = ActionReport(action=action)
        self._check_groups(groups)

        if action.is_read_only:
            return report

        if action == Action.PROMPT_DELETE and self.prompter is None:
            raise DedupError(ErrorKind.INVARIANT, "Interactive deletion needs a prompter")

        for group in groups:
            if action == Action.PROMPT_DELETE:
                self._prompt_delete(group, report)
            elif action == Action.NO_PROMPT_DELETE:
                self._auto_delete(group, report)
            elif action in (Action.HARD_LINK, Action.SYM_LINK):
                self._link_group(group, report, symbolic=action == Action.SYM_LINK)

        logger.debug(
            f"{action.display_name}: {report.count(OutcomeStatus.DELETED)} deleted, "
            f"{report.count(OutcomeStatus.LINKED)} linked, {len(report.failures)} not processed")
        return report

    @staticmethod
    def _check_groups(groups: List[DuplicateGroup]) -> None:
        for group in groups:
            if len(group.files) < 2:
                raise DedupError(
                    ErrorKind.INVARIANT,
                    f"Duplicate group with {len(group.files)} file(s) reached the executor")

    # =============================
    # Delete
    # =============================
    def _auto_delete(self, group: DuplicateGroup, report: ActionReport) -> None:
        kept, others = Sorter.split_keep(group)
        report.add(FileOutcome(kept.path, OutcomeStatus.KEPT))
        for record in others:
            report.add(self._delete(record, report))

    def _prompt_delete(self, group: DuplicateGroup, report: ActionReport) -> None:
        while True:
            answer = self.prompter(group, self.index_base)
            selection = parse_keep_selection(answer, len(group.files), self.index_base)
            if selection is not None:
                break
            logger.info(f"Invalid selection: {answer!r}")

        for index, record in enumerate(group.files):
            if selection.keeps(index):
                report.add(FileOutcome(record.path, OutcomeStatus.KEPT))
            else:
                report.add(self._delete(record, report))

    def _delete(self, record: FileRecord, report: ActionReport) -> FileOutcome:
        refused = self._verify_unchanged(record)
        if refused is not None:
            return refused

        try:
            if self.use_trash:
                self.fs.move_to_trash(record.path)
            else:
                self.fs.remove(record.path)
        except FileNotFoundError as e:
            logger.warning(f"File not found, could not delete it: {record.path}")
            return FileOutcome(record.path, OutcomeStatus.NOT_FOUND, DedupError.from_os_error(e, record.path))
        except OSError as e:
            logger.warning(f"Failed to delete {record.path}: {e.strerror or e}")
            return FileOutcome(record.path, OutcomeStatus.ERROR, DedupError.from_os_error(e, record.path))

        logger.debug(f"Deleted {record.path}")
        report.bytes_reclaimed += record.size
        return FileOutcome(record.path, OutcomeStatus.DELETED)

    # =============================
    # Link replacement
    # =============================
    def _link_group(self, group: DuplicateGroup, report: ActionReport, symbolic: bool) -> None:
        kept, others = Sorter.split_keep(group)

        # Linking to a file that changed would replace the others with different content
        refused = self._verify_unchanged(kept)
        if refused is not None:
            report.add(refused)
            for record in others:
                report.add(FileOutcome(
                    record.path,
                    refused.status if refused.status == OutcomeStatus.SKIPPED_MODIFIED else OutcomeStatus.ERROR,
                    DedupError(refused.error.kind, f"Kept file {kept.path} unusable, skipped", path=record.path),
                ))
            return

        report.add(FileOutcome(kept.path, OutcomeStatus.KEPT))
        for record in others:
            outcome = self._replace_with_link(record, kept, symbolic)
            if outcome.status == OutcomeStatus.LINKED:
                report.bytes_reclaimed += record.size
            report.add(outcome)

    def _replace_with_link(self, record: FileRecord, kept: FileRecord, symbolic: bool) -> FileOutcome:
        refused = self._verify_unchanged(record)
        if refused is not None:
            return refused

        path = record.path
        temp_path = self.fs.temporary_sibling(path)
        make_link = self.fs.sym_link if symbolic else self.fs.hard_link

        try:
            self.fs.rename(path, temp_path)
        except OSError as e:
            logger.warning(f"Could not move {path} aside: {e.strerror or e}")
            return FileOutcome(path, OutcomeStatus.ERROR, DedupError.from_os_error(e, path))

        try:
            make_link(kept.path, path)
        except OSError as e:
            logger.warning(f"Could not link {path} to {kept.path}: {e.strerror or e}")
            return self._rollback(
                path, temp_path, link_created=False,
                error=DedupError.from_os_error(e, path, ErrorKind.LINK_FAILED))

        try:
            self.fs.remove(temp_path)
        except OSError as e:
            logger.warning(f"Could not remove temporary file {temp_path}: {e.strerror or e}")
            return self._rollback(
                path, temp_path, link_created=True,
                error=DedupError.from_os_error(e, path))

        logger.debug(f"Linked {path} -> {kept.path}")
        return FileOutcome(path, OutcomeStatus.LINKED, target=kept.path)

    def _rollback(self, path: str, temp_path: str, link_created: bool, error: DedupError) -> FileOutcome:
        """Restores the original file under its name after a failed replacement."""
        try:
            if link_created:
                self.fs.remove(path)
            self.fs.rename(temp_path, path)
        except OSError as e:
            logger.error(f"Rollback failed, original content of {path} is at {temp_path}: {e.strerror or e}")
            return FileOutcome(path, OutcomeStatus.ERROR, DedupError(
                ErrorKind.ROLLBACK_FAILED,
                f"{error.message}; rollback failed, original kept at {temp_path}",
                path=path))
        return FileOutcome(path, OutcomeStatus.ERROR, error)

    # =============================
    # Race check
    # =============================
    def _verify_unchanged(self, record: FileRecord) -> Optional[FileOutcome]:
        """
        None if the file still has its scan-time modification time,
        otherwise the outcome that skips it.
        """
        try:
            current = self.fs.modified_at(record.path)
        except FileNotFoundError as e:
            logger.warning(f"File not found: {record.path}")
            return FileOutcome(record.path, OutcomeStatus.NOT_FOUND, DedupError.from_os_error(e, record.path))
        except OSError as e:
            logger.warning(f"Could not stat {record.path}: {e.strerror or e}")
            return FileOutcome(record.path, OutcomeStatus.ERROR, DedupError.from_os_error(e, record.path))

        if current != record.modified_at:
            logger.warning(f"File modified since scan, skipped: {record.path}")
            return FileOutcome(record.path, OutcomeStatus.SKIPPED_MODIFIED, DedupError(
                ErrorKind.MODIFIED_SINCE_SCAN, f"File modified since scan, skipped [{record.path}]",
                path=record.path))
        return None

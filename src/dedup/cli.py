#!/usr/bin/env python3
"""
dedup CLI: command line interface for finding and removing duplicate files.
Lists or summarizes duplicate sets, deletes duplicates (interactively or not),
or replaces them with hard or symbolic links.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from typing import List, Optional, NoReturn
import logging

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dedup.core.models import (
    Action, DeduplicationParams, DuplicateGroup, OutcomeStatus, ActionReport, DedupError)
from dedup.core.executor import ActionExecutor
from dedup.core.selection import prompt_hint
from dedup.commands import DeduplicationCommand
from dedup.utils.convert_utils import ConvertUtils
from dedup.services.duplicate_service import DuplicateService
from dedup.aliases import (
    STRATEGY_ALIASES, STRATEGY_CHOICES, STRATEGY_HELP_TEXT,
    HASH_WIDTH_CHOICES, HASH_WIDTH_HELP_TEXT, BYTES_HELP_TEXT,
    EPILOG_TEXT
)

logger = logging.getLogger(__name__)


class CLIApplication:
    """Main CLI application controller."""

    INDEX_BASE = 1

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding='utf-8')
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dedup",
            description="dedup: find duplicate files",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "paths",
            nargs="*",
            metavar="PATH",
            help="Files or directories to search, earlier paths are preferred when keeping files"
        )

        parser.add_argument(
            "--recurse", "-r",
            action="store_true",
            help="Search the paths for duplicates recursively"
        )
        parser.add_argument(
            "--bytes", "-b",
            default="4096",
            type=str,
            metavar="N",
            help=BYTES_HELP_TEXT
        )
        parser.add_argument(
            "--hash", "-a",
            default=8,
            type=int,
            choices=HASH_WIDTH_CHOICES,
            metavar="N",
            dest="hash_width",
            help=HASH_WIDTH_HELP_TEXT
        )
        parser.add_argument(
            "--strategy",
            choices=STRATEGY_CHOICES,
            default="map",
            type=str,
            help=STRATEGY_HELP_TEXT
        )

        # Actions (at most one)
        actions = parser.add_mutually_exclusive_group()
        actions.add_argument(
            "--list", "-l",
            action="store_true",
            help="List found duplicates, don't prompt for deduplication"
        )
        actions.add_argument(
            "--summarize", "-s",
            action="store_true",
            help="Print only a summary of found duplicates, don't prompt for deduplication"
        )
        actions.add_argument(
            "--delete", "-d",
            action="count",
            default=0,
            help="Prompt for the files to keep in each set and delete the rest.\n"
                 "Given twice (-dd), delete without prompting"
        )
        actions.add_argument(
            "--hardlink", "-k",
            action="store_true",
            help="Replace duplicates with hard links to the kept file"
        )
        actions.add_argument(
            "--symlink", "-y",
            action="store_true",
            help="Replace duplicates with symbolic links to the kept file"
        )

        parser.add_argument(
            "--trash",
            action="store_true",
            help="Move deleted files to the system trash instead of deleting them permanently"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and progress"
        )

        return parser.parse_args(args)

    @staticmethod
    def resolve_action(args: argparse.Namespace) -> Action:
        """Maps the action flags to an Action. Without any flag the user is prompted."""
        if args.list:
            return Action.LIST
        if args.summarize:
            return Action.SUMMARIZE
        if args.delete >= 2:
            return Action.NO_PROMPT_DELETE
        if args.hardlink:
            return Action.HARD_LINK
        if args.symlink:
            return Action.SYM_LINK
        return Action.PROMPT_DELETE

    def validate_args(self, args: argparse.Namespace, action: Action) -> None:
        """Validate command-line arguments before execution."""
        if not args.paths:
            self.error_exit("Usage: dedup path1 [path2] [path3]...")

        if args.trash and action not in (Action.PROMPT_DELETE, Action.NO_PROMPT_DELETE):
            self.error_exit("--trash can only be used when deleting (-d or -dd)")

        # Prevent interactive prompting in non-TTY environments
        if action == Action.PROMPT_DELETE and not sys.stdin.isatty():
            self.error_exit(
                "Cannot prompt for deletions in a non-interactive session.\n"
                "Use -l, -s, -dd, -k or -y when piping input or running in scripts."
            )

        try:
            ConvertUtils.human_to_bytes(args.bytes)
        except ValueError as e:
            self.error_exit(f"Invalid argument bytes: {e}")

    def create_params(self, args: argparse.Namespace) -> DeduplicationParams:
        """Create DeduplicationParams from CLI arguments."""
        try:
            return DeduplicationParams.from_human_readable(
                roots=args.paths,
                short_hash_str=args.bytes,
                recursive=args.recurse,
                hash_width=args.hash_width,
                strategy=STRATEGY_ALIASES[args.strategy],
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  File {current}/{total} ({percent:.0f} %)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} entries checked...")
        sys.stderr.flush()

    def run_deduplication(self, params: DeduplicationParams) -> List[DuplicateGroup]:
        """Execute the find-duplicates workflow and report what was counted."""
        command = DeduplicationCommand()
        if not self.quiet:
            print("Counting number and size of files in given paths...")

        try:
            groups, stats = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None
            )
        except DedupError as e:
            self.error_exit(str(e))

        if self.verbose:
            sys.stderr.write("\n")

        if not self.quiet:
            count, total_bytes = command.scan_totals
            print(f"Counted {count} files occupying {ConvertUtils.bytes_to_human(total_bytes)}.")
            print(f"Discarded {stats.unique_size_discarded} files with unique size from deduplication.")
            skipped = command.skipped_directories
            if skipped:
                print(f"Skipped {len(skipped)} unreadable directories.")

        if self.verbose:
            print(stats.print_summary())

        return groups

    def output_summary(self, groups: List[DuplicateGroup]) -> None:
        if not groups:
            print("Didn't find any duplicates.")
            return
        summary = DuplicateService.summarize(groups)
        print(f"\nFound {summary.duplicate_files} duplicate files in {summary.groups} sets.")
        print(f"Space taken by duplicates: {ConvertUtils.bytes_to_human(summary.reclaimable_bytes)}")

    @staticmethod
    def output_groups(groups: List[DuplicateGroup]) -> None:
        """Output duplicate groups as plain text, one set per paragraph."""
        print()
        for group in groups:
            for file in group.files:
                print(file.path)
            print()

    @staticmethod
    def output_preview(action: Action, groups: List[DuplicateGroup]) -> None:
        """Shows which file of each set is kept by an automatic action."""
        kept, others = DuplicateService.keep_only_one_file_per_group(groups)
        verb = "delete" if action == Action.NO_PROMPT_DELETE else "link"
        print(f"\nKeeping {len(kept)} files, going to {verb} {len(others)} files.")
        for file in kept:
            print(f"  keep: {file.path}")

    def prompt_group(self, group: DuplicateGroup, index_base: int) -> str:
        """Interactive collaborator for Action.PROMPT_DELETE."""
        print()
        for index, file in enumerate(group.files, index_base):
            modified = ConvertUtils.ns_to_human(file.modified_at)
            print(f"[{index}] {file.path}  ({modified})")
        print()
        print(prompt_hint(len(group.files), index_base))
        try:
            return input()
        except EOFError:
            # No more input: keep the remaining sets untouched
            return "all"

    def execute_action(self, action: Action, groups: List[DuplicateGroup], use_trash: bool) -> ActionReport:
        executor = ActionExecutor(
            prompter=self.prompt_group,
            use_trash=use_trash,
            index_base=self.INDEX_BASE
        )
        report = executor.execute(action, groups)
        self.output_report(report)
        return report

    def output_report(self, report: ActionReport) -> None:
        if self.quiet and not report.failures:
            return

        if self.verbose:
            for outcome in report.outcomes:
                print(f"  {outcome}")

        deleted = report.count(OutcomeStatus.DELETED)
        linked = report.count(OutcomeStatus.LINKED)
        if report.action in (Action.HARD_LINK, Action.SYM_LINK):
            print(f"\nReplaced {linked} files with links.")
        else:
            print(f"\nDeleted {deleted} files.")
        print(f"Space freed: {ConvertUtils.bytes_to_human(report.bytes_reclaimed)}")

        failures = report.failures
        if failures:
            print(f"⚠️  {len(failures)} file(s) were not processed:")
            for outcome in failures[:5]:
                print(f"  • {outcome}")
            if len(failures) > 5:
                print(f"  ...and {len(failures) - 5} more files")

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point with conditional output behavior."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet

        if self.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        elif self.quiet:
            logging.getLogger().setLevel(logging.ERROR)

        action = self.resolve_action(args)
        self.validate_args(args, action)
        params = self.create_params(args)

        groups = self.run_deduplication(params)

        if not self.quiet or action == Action.SUMMARIZE:
            self.output_summary(groups)

        if action == Action.LIST:
            if groups:
                self.output_groups(groups)
        elif not action.is_read_only and groups:
            if self.verbose and action != Action.PROMPT_DELETE:
                self.output_preview(action, groups)
            self.execute_action(action, groups, use_trash=args.trash)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

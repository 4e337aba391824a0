#!/usr/bin/env python3
"""
onetrack CLI: one pass over a music folder: find duplicate tracks, tidy up names, prune empty folders.
Deletion always waits for confirmation (or --force) and goes to the system trash unless --permanent is given.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import threading
from pathlib import Path
from typing import NoReturn, Optional

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    from send2trash import send2trash
except ImportError:
    _MISSING_DEPS.append("send2trash")

if _MISSING_DEPS:
    print("❌ Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from onetrack import __version__
from onetrack.core.models import (
    MIN_FILE_SIZE, PREVIEW_LIMIT, PROGRESS_INTERVAL, ProcessingParams, RunContext, RunReport)
from onetrack.commands import CleanupCommand
from onetrack.utils.convert_utils import ConvertUtils
from onetrack.services.deletion_service import DeletionService

EPILOG_TEXT = """
Examples:
  onetrack ~/Music                 scan, rename, then ask before deleting
  onetrack ~/Music --force         delete duplicates without asking
  onetrack ~/Music --min-size 64K  treat files under 64KB as junk
"""


class ProgressMonitor:
    """Redraws one stderr status line from the live run counters until stopped."""

    def __init__(self, context: RunContext, interval: float = PROGRESS_INTERVAL):
        self.context = context
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._loop, name="onetrack-progress", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread.is_alive():
            self._thread.join()
        self.render()
        sys.stderr.write("\n")
        sys.stderr.flush()

    def _loop(self) -> None:
        while not self._stop_event.wait(self.interval):
            self.render()

    def format_line(self) -> str:
        snap = self.context.counters.snapshot()
        return (
            f"  Files scanned: {snap.files_scanned:,} | "
            f"Duplicates: {snap.duplicates_found:,} | "
            f"To rename: {len(self.context.file_renames):,} | "
            f"{snap.files_per_second:.1f} files/s ({snap.megabytes_per_second:.1f} MB/s) | "
            f"{ConvertUtils.seconds_to_clock(snap.elapsed)}"
        )

    def render(self) -> None:
        sys.stderr.write(f"\r{self.format_line()}")
        sys.stderr.flush()


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="onetrack",
            description="onetrack: duplicate track remover and name tidier for music folders",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "root",
            nargs="?",
            default=None,
            help="Root music folder (prompted for when omitted)"
        )

        parser.add_argument(
            "--min-size", "-m",
            default=None,
            type=str,
            metavar='',
            help=f"Files below this size are deleted as junk (e.g., 32K, 1MB). "
                 f"Default: {MIN_FILE_SIZE} bytes"
        )
        parser.add_argument(
            "--workers", "-w",
            default=None,
            type=int,
            metavar='',
            help="Number of hashing threads. Default: CPU count"
        )

        parser.add_argument(
            "--force",
            action="store_true",
            help="Delete without the confirmation prompt (for automation/scripts)"
        )
        parser.add_argument(
            "--permanent",
            action="store_true",
            help="Unlink files instead of moving them to the system trash"
        )

        output = parser.add_mutually_exclusive_group()
        output.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        output.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Debug logging"
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}"
        )

        return parser.parse_args(args)

    def configure_logging(self) -> None:
        if self.verbose:
            level = logging.DEBUG
        elif self.quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING
        logging.getLogger().setLevel(level)

    def resolve_root(self, args: argparse.Namespace) -> str:
        """Return the root from the command line, or ask for it."""
        root = (args.root or "").strip()
        if not root:
            try:
                root = input("Root music folder: ").strip()
            except EOFError:
                root = ""
        if not root:
            self.error_exit("Valid root folder path is required.")
        return root

    def validate_args(self, args: argparse.Namespace, root: str) -> None:
        """Validate command-line arguments before anything touches the disk."""
        root_path = Path(root).expanduser()
        if not root_path.exists():
            self.error_exit(f"Directory not found: {root}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {root}")

        if args.min_size is not None:
            try:
                ConvertUtils.human_to_bytes(args.min_size)
            except ValueError as e:
                self.error_exit(f"Invalid size format: {e}")

        if args.workers is not None and args.workers < 1:
            self.error_exit("Worker count must be at least 1")

        if args.force and args.permanent:
            self.warning("--force with --permanent: files will be erased without confirmation")

    def create_params(self, args: argparse.Namespace, root: str) -> ProcessingParams:
        """Create ProcessingParams from CLI arguments."""
        try:
            return ProcessingParams.from_human_readable(
                root_dir=str(Path(root).expanduser().resolve()),
                min_size_str=args.min_size,
                workers=args.workers,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def run_cleanup(self, command: CleanupCommand, params: ProcessingParams) -> RunReport:
        """Execute the cleanup run with a live progress line."""
        monitor = None if self.quiet else ProgressMonitor(command.context)
        if monitor:
            monitor.start()
        try:
            return command.execute(params)
        except (RuntimeError, ValueError) as e:
            self.error_exit(f"Cleanup failed: {e}")
        finally:
            if monitor:
                monitor.stop()

    def print_summary(self, report: RunReport) -> None:
        counters = report.counters
        if self.quiet:
            return
        print()
        print("=== Processing Complete ===")
        print(f"Total files scanned: {counters.files_scanned:,}")
        print(f"Total duplicates found: {counters.duplicates_found:,}")
        print(f"Total files renamed: {counters.files_renamed:,}")
        print(f"Total directories renamed: {counters.directories_renamed:,}")
        print(f"Empty directories removed: {counters.directories_removed:,}")
        print(f"Total data processed: {ConvertUtils.bytes_to_human(counters.bytes_processed)}")
        print(f"Total time: {ConvertUtils.seconds_to_clock(counters.elapsed)}")
        if counters.errors:
            print(f"Errors (see log): {counters.errors:,}")

        if self.verbose:
            for outcome in report.walk.skipped_directories:
                print(f"   [SKIP] {outcome.path}: {outcome.reason}")
            for outcome in report.walk.failed_files:
                print(f"   [FAIL] {outcome.path}: {outcome.reason}")

    @staticmethod
    def is_interactive() -> bool:
        return sys.stdin.isatty() and sys.stdout.isatty()

    def confirm_deletion(self, count: int, force: bool) -> bool:
        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
            return True

        if not self.is_interactive():
            self.warning(
                "Non-interactive session: nothing was deleted.\n"
                "   Use --force to delete without confirmation when piping output or running in scripts."
            )
            return False

        response = input(f"Delete {count} file(s)? [y/N]: ")
        if response.strip().lower() not in ("y", "yes"):
            print("Deletion cancelled by user.")
            return False
        return True

    def execute_deletion(self, report: RunReport, context: RunContext,
                         force: bool = False, permanent: bool = False) -> None:
        """Preview the deletion set, ask once, then delete."""
        if not report.deletions:
            if not self.quiet:
                print("\nNothing to delete.")
            return

        shown, hidden = DeletionService.preview(report, context, limit=PREVIEW_LIMIT)
        print()
        print(f"The following {len(report.deletions)} file(s) will be deleted "
              f"({ConvertUtils.bytes_to_human(report.reclaimable_bytes)}):")
        for path, candidate in zip(shown, report.deletions):
            reason = f"  [{candidate.reason.display_name}]" if self.verbose else ""
            print(f"  {path}{reason}")
        if hidden:
            print(f"  ... and {hidden} more")
        print()

        if not self.confirm_deletion(len(report.deletions), force):
            return

        target = "permanently" if permanent else "to trash"
        print(f"\nDeleting {len(report.deletions)} files {target}...")
        result = DeletionService.commit(
            report, context, permanent=permanent,
            progress_callback=self.deletion_progress if self.verbose else None,
        )
        if self.verbose:
            sys.stderr.write("\n")

        print(f"Deleted {result.deleted} of {result.total} files "
              f"({ConvertUtils.bytes_to_human(result.bytes_freed)} freed).")
        if result.removed_directories and not self.quiet:
            print(f"Removed {len(result.removed_directories)} empty directories.")
        if result.failed:
            print(f"Failed to delete {len(result.failed)} file(s):")
            for path, error in result.failed[:PREVIEW_LIMIT]:
                print(f"  • {os.path.basename(path)}: {error.split(':')[-1].strip()}")
            if len(result.failed) > PREVIEW_LIMIT:
                print(f"  ...and {len(result.failed) - PREVIEW_LIMIT} more files")

    @staticmethod
    def deletion_progress(current: int, total: Optional[int]) -> None:
        sys.stderr.write(f"\r  [delete] {current}/{total}")
        sys.stderr.flush()

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        if not self.quiet:
            print("🎵 onetrack — music folder cleanup")
            print("=" * 34)

        root = self.resolve_root(args)
        self.validate_args(args, root)
        params = self.create_params(args, root)

        if not self.quiet:
            print(f"Scanning directory: {params.root_dir}")

        command = CleanupCommand()
        report = self.run_cleanup(command, params)
        self.print_summary(report)
        self.execute_deletion(report, command.context, force=args.force, permanent=args.permanent)


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

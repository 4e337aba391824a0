"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/walker.py
Implements the concurrent tree walk that feeds every later phase.
Features:
- Sequential directory recursion, parallel hashing of files inside a directory
- Bounded thread pool shared by the whole walk
- Marks undersized files for deletion without hashing them
- Queues file and directory renames for names that are not yet canonical
- Per-file and per-directory failures are logged and skipped, never raised
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from onetrack.core.hasher import HasherImpl
from onetrack.core.interfaces import Hasher, TreeWalker
from onetrack.core.models import (
    DeletionCandidate,
    DeletionReason,
    DirectoryOutcome,
    FileEntry,
    FileOutcome,
    OutcomeStatus,
    ProcessingParams,
    RunContext,
    WalkResult,
)
from onetrack.core.normalizer import normalize_dirname, normalize_filename

logger = logging.getLogger(__name__)


class TreeWalkerImpl(TreeWalker):
    """
    Walks a music tree and fills the shared RunContext.

    Attributes:
        params: Run parameters (extensions, size threshold, worker count)
        context: Shared state receiving digests, renames and deletions
        hasher: Content hasher used for every file at or above the threshold
    """

    def __init__(self, params: ProcessingParams, context: RunContext, hasher: Optional[Hasher] = None):
        self.params = params
        self.context = context
        self.hasher = hasher or HasherImpl(chunk_size=params.chunk_size)
        self.extensions = {ext.lower() for ext in params.extensions}

    def walk(self, root: str, stopped_flag: Optional[Callable[[], bool]] = None) -> WalkResult:
        root_path = Path(root)
        if not root_path.exists():
            error_msg = f"Directory does not exist: {root}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {root}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        logger.debug(f"Starting walk of {root} with {self.params.max_workers} workers")
        result = WalkResult()
        with ThreadPoolExecutor(max_workers=self.params.max_workers,
                                thread_name_prefix="onetrack-hash") as pool:
            self._walk_directory(os.path.abspath(root), pool, result, stopped_flag)

        logger.debug(
            f"Walk finished: {result.directories_visited} directories, "
            f"{len(result.files)} files, {len(result.skipped_directories)} skipped directories"
        )
        return result

    def _walk_directory(
        self,
        directory: str,
        pool: ThreadPoolExecutor,
        result: WalkResult,
        stopped_flag: Optional[Callable[[], bool]],
    ) -> None:
        if stopped_flag and stopped_flag():
            logger.debug("Walk interrupted by stop request")
            return

        result.directories_visited += 1
        try:
            files, subdirs = self._list_directory(directory)
        except PermissionError as e:
            logger.warning(f"Access denied to directory: {directory}")
            self._skip_directory(result, directory, str(e))
            return
        except OSError as e:
            logger.warning(f"Error processing directory {directory}: {e}")
            self._skip_directory(result, directory, str(e))
            return

        # Join point: every file in this directory finishes before we descend
        futures = {pool.submit(self._process_file, path): path for path in files}
        outcomes = [self._collect(future, futures[future]) for future in as_completed(futures)]
        result.files.extend(sorted(outcomes, key=lambda o: o.path))

        for subdir in subdirs:
            self._queue_directory_rename(subdir)
            # Recurse into the pre-rename path; nothing is moved until the walk ends
            self._walk_directory(subdir, pool, result, stopped_flag)

    def _list_directory(self, directory: str) -> Tuple[List[str], List[str]]:
        """Returns (audio files, subdirectories) directly inside directory, sorted."""
        files, subdirs = [], []
        with os.scandir(directory) as entries:
            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(entry.path)
                    elif entry.is_file(follow_symlinks=False) and self._extension_passes(entry.name):
                        files.append(entry.path)
                except OSError as e:
                    logger.debug(f"Could not inspect {entry.path}: {e}")
        return sorted(files), sorted(subdirs)

    def _extension_passes(self, name: str) -> bool:
        _, ext = os.path.splitext(name)
        return ext.lower() in self.extensions

    def _process_file(self, path: str) -> FileOutcome:
        """
        Handle one audio file. Runs on a pool thread.
        Returns:
            FileOutcome describing what happened; never raises for I/O errors.
        """
        counters = self.context.counters
        try:
            entry = FileEntry(path=path, size=os.stat(path).st_size)
            counters.increment("bytes_processed", entry.size)
            self.context.record_size(path, entry.size)

            if entry.size < self.params.min_file_size:
                self.context.deletions.add(
                    DeletionCandidate(path=path, reason=DeletionReason.TOO_SMALL, size=entry.size)
                )
                logger.debug(f"Marked undersized file for deletion: {path} ({entry.size} bytes)")
                return FileOutcome(path=path, status=OutcomeStatus.MARKED_SMALL, entry=entry)

            entry.digest = self.hasher.compute_digest(path)
        except OSError as e:
            logger.warning(f"Error processing {path}: {e}")
            counters.increment("errors")
            return FileOutcome(path=path, status=OutcomeStatus.FAILED, reason=str(e))

        self.context.index.add(entry.digest, path)
        counters.increment("files_scanned")

        normalized = normalize_filename(entry.name)
        if normalized != entry.name:
            directory = os.path.dirname(path)
            self.context.file_renames.add(path, os.path.join(directory, normalized))

        return FileOutcome(path=path, status=OutcomeStatus.PROCESSED, entry=entry)

    def _collect(self, future: Future, path: str) -> FileOutcome:
        try:
            return future.result()
        except Exception as e:
            logger.exception(f"Unexpected error while processing {path}")
            self.context.counters.increment("errors")
            return FileOutcome(path=path, status=OutcomeStatus.FAILED, reason=str(e))

    def _queue_directory_rename(self, directory: str) -> None:
        parent, name = os.path.split(directory)
        normalized = normalize_dirname(name)
        if normalized != name:
            self.context.directory_renames.add(directory, os.path.join(parent, normalized))

    def _skip_directory(self, result: WalkResult, directory: str, reason: str) -> None:
        self.context.counters.increment("errors")
        result.skipped_directories.append(
            DirectoryOutcome(path=directory, status=OutcomeStatus.SKIPPED, reason=reason)
        )

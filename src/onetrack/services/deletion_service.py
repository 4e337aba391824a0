import logging
import os
from typing import Callable, List, Optional, Tuple

from onetrack.core.models import (
    PREVIEW_LIMIT,
    DeletionCandidate,
    DeletionReason,
    DeletionResult,
    RunContext,
    RunReport,
)
from onetrack.core.pruner import EmptyDirectoryPruner
from onetrack.services.file_service import FileService

logger = logging.getLogger(__name__)


class DeletionService:
    @staticmethod
    def preview(report: RunReport, context: RunContext,
                limit: int = PREVIEW_LIMIT) -> Tuple[List[str], int]:
        """
        Returns the first `limit` paths slated for deletion and how many more follow.
        Paths are shown where the files live now, after the rename passes.

        Args:
            report (RunReport): Result of a finished cleanup run.
            context (RunContext): The same context the run used.
            limit (int): Maximum number of paths to show.

        Returns:
            Tuple[List[str], int]: Shown paths and the count of hidden ones.
        """
        shown = [context.tracker.resolve(c.path) for c in report.deletions[:limit]]
        return shown, max(len(report.deletions) - limit, 0)

    @staticmethod
    def commit(
            report: RunReport,
            context: RunContext,
            permanent: bool = False,
            progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> DeletionResult:
        """
        Removes every file in the report's deletion set, then prunes folders the
        deletion emptied.

        Paths were recorded before the rename passes ran, so each one is resolved
        through the run's PathTracker first. A duplicate is only removed while its
        survivor still exists.

        Args:
            report (RunReport): Result of a finished cleanup run.
            context (RunContext): The same context the run used.
            permanent (bool): Unlink instead of moving to the system trash.
            progress_callback: (done, total) after each file.

        Returns:
            DeletionResult: Per-file success/failure tally.
        """
        result = DeletionResult(total=len(report.deletions))
        logger.info(f"Deleting {result.total} files (permanent={permanent})")

        for i, candidate in enumerate(report.deletions, 1):
            current = DeletionService._current_path(candidate, context)
            reason = DeletionService._safety_check(candidate, context)
            if reason:
                logger.warning(f"Not deleting {current}: {reason}")
                result.failed.append((current, reason))
            else:
                try:
                    FileService.remove(current, permanent=permanent)
                    result.deleted += 1
                    result.bytes_freed += candidate.size
                    result.deleted_files.append(current)
                except RuntimeError as e:
                    logger.warning(f"Error deleting {current}: {e}")
                    result.failed.append((current, str(e)))

            if progress_callback:
                progress_callback(i, result.total)

        pruner = EmptyDirectoryPruner(context)
        result.removed_directories = pruner.prune(report.root_dir)

        logger.info(f"Deleted {result.deleted}/{result.total} files, {len(result.failed)} failed")
        return result

    @staticmethod
    def _current_path(candidate: DeletionCandidate, context: RunContext) -> str:
        current = context.tracker.resolve(candidate.path)
        if current != candidate.path:
            logger.debug(f"Deletion target moved during renaming: {candidate.path} -> {current}")
        return current

    @staticmethod
    def _safety_check(candidate: DeletionCandidate, context: RunContext) -> str:
        """Returns an empty string when the file may be removed, otherwise the reason it may not."""
        if candidate.reason != DeletionReason.DUPLICATE or not candidate.survivor:
            return ""
        survivor = context.tracker.resolve(candidate.survivor)
        if not os.path.exists(survivor):
            return f"survivor no longer exists: {survivor}"
        return ""

"""
Cleanup command orchestrator.
The single place where run phases are sequenced. Used by the CLI and by library callers.
"""
import logging
from typing import Callable, Optional

from onetrack.core.models import ProcessingParams, RunContext, RunReport
from onetrack.core.walker import TreeWalkerImpl
from onetrack.core.resolver import DuplicateResolver
from onetrack.core.renamer import RenameExecutor
from onetrack.core.pruner import EmptyDirectoryPruner

logger = logging.getLogger(__name__)

STAGES = ("walk", "resolve", "rename-files", "rename-directories", "prune")


class CleanupCommand:
    """
    Orchestrates one cleanup run over a music tree:
    1. Walk the tree, hashing files in parallel and queuing renames
    2. Resolve duplicate sets into survivors and deletion candidates
    3. Rename files, then directories (deepest first)
    4. Prune directories left empty

    Nothing is deleted here; the returned RunReport is handed to
    DeletionService once the user has confirmed.

    Usage:
        command = CleanupCommand()
        report = command.execute(ProcessingParams(root_dir="/music"))
        # command.context is live while execute() runs, so a progress
        # thread can read command.context.counters.snapshot()
    """

    def __init__(self, context: Optional[RunContext] = None):
        self.context = context or RunContext()

    def execute(
            self,
            params: ProcessingParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
    ) -> RunReport:
        """
        Run every phase in order against params.root_dir.

        Args:
            params: Validated processing parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None,
                called as each phase starts
            stopped_flag: () -> bool; only the walk honours it

        Returns:
            RunReport describing everything the run did and what it proposes to delete

        Raises:
            RuntimeError: If the root directory is missing or not a directory
        """
        context = self.context
        counters = context.counters
        counters.start()
        try:
            self._report_stage(progress_callback, "walk")
            walker = TreeWalkerImpl(params, context)
            walk = walker.walk(params.root_dir, stopped_flag=stopped_flag)

            self._report_stage(progress_callback, "resolve")
            groups = DuplicateResolver().resolve(context.index, context)

            renamer = RenameExecutor(context)
            self._report_stage(progress_callback, "rename-files")
            file_renames = renamer.rename_files(context.file_renames.ops())
            self._report_stage(progress_callback, "rename-directories")
            directory_renames = renamer.rename_directories(context.directory_renames.ops())

            self._report_stage(progress_callback, "prune")
            removed = EmptyDirectoryPruner(context).prune(params.root_dir)
        finally:
            counters.stop()

        snapshot = counters.snapshot()
        logger.info(
            f"Run finished in {snapshot.elapsed:.2f}s: {snapshot.files_scanned} files, "
            f"{snapshot.duplicates_found} duplicates, {snapshot.errors} errors"
        )
        return RunReport(
            root_dir=params.root_dir,
            counters=snapshot,
            groups=groups,
            deletions=sorted(context.deletions.candidates(), key=lambda c: c.path),
            file_renames=file_renames,
            directory_renames=directory_renames,
            removed_directories=removed,
            walk=walk,
        )

    @staticmethod
    def _report_stage(progress_callback, stage: str) -> None:
        logger.debug(f"Stage started: {stage}")
        if progress_callback:
            progress_callback(stage, STAGES.index(stage) + 1, len(STAGES))

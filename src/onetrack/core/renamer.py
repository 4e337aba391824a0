"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/renamer.py
Executes queued renames in two strictly ordered passes:
    - files: collision-safe, never overwrites an existing distinct file
    - directories: deepest first, skipped when the target already exists
"""

import logging
import os
import re
from typing import List

from onetrack.core.interfaces import Renamer
from onetrack.core.models import OutcomeStatus, RenameOp, RenameOutcome, RunContext

logger = logging.getLogger(__name__)

# Only applied while resolving a name collision, never during normalization
_PATTERN_COLLISION_NOISE = re.compile(r'www|[._\-]', re.IGNORECASE)


def _same_file(first: str, second: str) -> bool:
    """True when both paths point at one inode (case-only rename on a case-insensitive FS)."""
    try:
        return os.path.samefile(first, second)
    except OSError:
        return False


class RenameExecutor(Renamer):
    """
    Applies RenameOps produced by the walker and records every move in the
    context's PathTracker so later phases can find files at their new paths.
    """

    def __init__(self, context: RunContext):
        self.context = context

    @staticmethod
    def get_unique_path(old_path: str, desired_path: str) -> str:
        """
        Returns desired_path if it is free (or is old_path itself), otherwise the
        first free "<base>_<n><ext>" with noise characters removed from base.
        """
        if not os.path.lexists(desired_path) or _same_file(old_path, desired_path):
            return desired_path

        directory, filename = os.path.split(desired_path)
        base, ext = os.path.splitext(filename)
        base = _PATTERN_COLLISION_NOISE.sub('', base)

        counter = 1
        while True:
            candidate = os.path.join(directory, f"{base}_{counter}{ext}")
            if not os.path.lexists(candidate):
                return candidate
            counter += 1

    def rename_files(self, ops: List[RenameOp]) -> List[RenameOutcome]:
        outcomes = []
        for op in sorted(ops, key=lambda o: o.old_path):
            try:
                final_path = self.get_unique_path(op.old_path, op.new_path)
                if final_path != op.old_path:
                    os.rename(op.old_path, final_path)
            except OSError as e:
                logger.warning(f"Error renaming {op.old_path}: {e}")
                self.context.counters.increment("errors")
                outcomes.append(RenameOutcome(op=op, status=OutcomeStatus.FAILED, reason=str(e)))
                continue

            if final_path != op.new_path:
                logger.debug(f"Name taken, renamed {op.old_path} -> {final_path}")
            self.context.tracker.record_file(op.old_path, final_path)
            self.context.counters.increment("files_renamed")
            outcomes.append(RenameOutcome(op=op, status=OutcomeStatus.RENAMED, final_path=final_path))

        logger.info(f"File pass finished: {len(outcomes)} operations")
        return outcomes

    def rename_directories(self, ops: List[RenameOp]) -> List[RenameOutcome]:
        outcomes = []
        # Longest old path first: descendants move while their ancestors still have old names
        for op in sorted(ops, key=lambda o: (-o.depth_key, o.old_path)):
            if os.path.lexists(op.new_path) and not _same_file(op.old_path, op.new_path):
                logger.info(f"Skipping directory rename, target exists: {op.new_path}")
                outcomes.append(RenameOutcome(op=op, status=OutcomeStatus.SKIPPED,
                                              reason="target exists"))
                continue
            try:
                os.rename(op.old_path, op.new_path)
            except OSError as e:
                logger.warning(f"Error renaming directory {op.old_path}: {e}")
                self.context.counters.increment("errors")
                outcomes.append(RenameOutcome(op=op, status=OutcomeStatus.FAILED, reason=str(e)))
                continue

            self.context.tracker.record_directory(op.old_path, op.new_path)
            self.context.counters.increment("directories_renamed")
            outcomes.append(RenameOutcome(op=op, status=OutcomeStatus.RENAMED, final_path=op.new_path))

        logger.info(f"Directory pass finished: {len(outcomes)} operations")
        return outcomes

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/pruner.py
Removes directories left without entries, deepest first.
"""

import logging
import os
from typing import List

from onetrack.core.interfaces import Pruner
from onetrack.core.models import RunContext

logger = logging.getLogger(__name__)


class EmptyDirectoryPruner(Pruner):
    """
    Post-order pruning: children are handled before their parent is checked,
    so a chain of folders that only held deleted files collapses in one pass.
    The root directory itself is never removed.
    """

    def __init__(self, context: RunContext):
        self.context = context

    def prune(self, root: str) -> List[str]:
        removed: List[str] = []
        self._prune_children(root, removed)
        if removed:
            logger.info(f"Removed {len(removed)} empty directories under {root}")
        return removed

    def _prune_children(self, directory: str, removed: List[str]) -> None:
        try:
            with os.scandir(directory) as entries:
                subdirs = sorted(e.path for e in entries if e.is_dir(follow_symlinks=False))
        except OSError as e:
            logger.warning(f"Could not list {directory} for pruning: {e}")
            return

        for subdir in subdirs:
            self._prune_children(subdir, removed)
            if not self._is_empty(subdir):
                continue
            try:
                os.rmdir(subdir)
            except OSError as e:
                logger.warning(f"Could not remove {subdir}: {e}")
                continue
            logger.debug(f"Removed empty directory: {subdir}")
            self.context.counters.increment("directories_removed")
            removed.append(subdir)

    @staticmethod
    def _is_empty(directory: str) -> bool:
        try:
            with os.scandir(directory) as entries:
                return next(entries, None) is None
        except OSError:
            return False

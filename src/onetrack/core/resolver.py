"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/resolver.py
Pure survivor selection for duplicate sets, no I/O.
Deeper files are kept: a track filed several folders down was placed there on purpose.
"""

import logging
from pathlib import PurePath
from typing import List, Sequence, Tuple

from onetrack.core.interfaces import Resolver
from onetrack.core.models import (
    DeletionCandidate,
    DeletionReason,
    DigestIndex,
    DuplicateGroup,
    RunContext,
)

logger = logging.getLogger(__name__)


class DuplicateResolver(Resolver):
    """
    Picks one survivor per digest and marks every other copy for deletion.
    Sorting priority (applied lexicographically):
    1. Number of path segments, descending (deepest first)
    2. Path string length, ascending (shorter first)
    3. Path string, ascending (makes exact ties reproducible)
    """

    @staticmethod
    def sort_key(path: str) -> Tuple[int, int, str]:
        return -len(PurePath(path).parts), len(path), path

    @staticmethod
    def order_duplicates(paths: Sequence[str]) -> List[str]:
        return sorted(paths, key=DuplicateResolver.sort_key)

    @staticmethod
    def select_survivor(paths: Sequence[str]) -> str:
        if not paths:
            raise ValueError("Cannot choose a survivor from an empty path list.")
        return DuplicateResolver.order_duplicates(paths)[0]

    def resolve(self, index: DigestIndex, context: RunContext) -> List[DuplicateGroup]:
        groups = []
        for digest, paths in index.duplicate_sets():
            ordered = self.order_duplicates(paths)
            survivor, duplicates = ordered[0], ordered[1:]
            for path in duplicates:
                context.deletions.add(
                    DeletionCandidate(
                        path=path,
                        reason=DeletionReason.DUPLICATE,
                        size=context.size_of(path),
                        survivor=survivor,
                    )
                )
                context.counters.increment("duplicates_found")
            logger.debug(f"Duplicate set {digest[:12]}: keep {survivor}, drop {len(duplicates)}")
            groups.append(DuplicateGroup(digest=digest, survivor=survivor, duplicates=duplicates))

        logger.info(f"Resolved {len(groups)} duplicate sets")
        return groups

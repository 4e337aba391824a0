"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the cleanup engine.
Structural typing keeps the phases swappable and easy to fake in tests.

Key Components:
---------------
- HashAlgorithm: Incremental hash factory (e.g., SHA-256).
- Hasher: Computes a whole-file content digest.
- TreeWalker: Walks a tree and fills the shared RunContext.
- Resolver: Picks one survivor per duplicate set.
- Renamer: Executes file and directory renames.
- Pruner: Removes directories left empty.
"""

from typing import Callable, List, Optional, Protocol

from onetrack.core.models import (
    DigestIndex,
    DuplicateGroup,
    RenameOp,
    RenameOutcome,
    RunContext,
    WalkResult,
)


class HashState(Protocol):
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for streaming hash algorithms.

    Allows plugging in a different secure hash without touching the walker.
    """

    name: str
    digest_size: int

    def new(self) -> HashState:
        """Returns a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    """Interface for hashing a whole file."""
    def compute_digest(self, path: str) -> str: ...


class TreeWalker(Protocol):
    def walk(
        self,
        root: str,
        stopped_flag: Optional[Callable[[], bool]] = None,
    ) -> WalkResult:
        """
        Recursively visit root, hashing and normalizing every audio file.

        Args:
            root: Directory to walk.
            stopped_flag: Function that returns True if the walk should stop.

        Returns:
            WalkResult with per-file outcomes and skipped directories.
        """
        ...


class Resolver(Protocol):
    def resolve(self, index: DigestIndex, context: RunContext) -> List[DuplicateGroup]: ...


class Renamer(Protocol):
    def rename_files(self, ops: List[RenameOp]) -> List[RenameOutcome]: ...
    def rename_directories(self, ops: List[RenameOp]) -> List[RenameOutcome]: ...


class Pruner(Protocol):
    def prune(self, root: str) -> List[str]: ...

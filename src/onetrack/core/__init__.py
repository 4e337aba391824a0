"""
Core cleanup engine: walker, hasher, normalizer, resolver, renamer and pruner.

This package contains the whole file-processing foundation of onetrack:
- TreeWalkerImpl: concurrent directory walk feeding the shared RunContext
- HasherImpl + Sha256AlgorithmImpl: streamed SHA-256 content hashing
- normalize_name / normalize_filename: locale-independent canonical names
- DuplicateResolver: deterministic survivor selection
- RenameExecutor: collision-safe file renames, deepest-first directory renames
- EmptyDirectoryPruner: post-order removal of empty folders
- Models: RunContext, DigestIndex, RunCounters and result types

No UI dependencies, suitable for CLI and library usage.
"""

from .models import (
    FileEntry, RenameOp, RenameKind, DeletionCandidate, DeletionReason, DuplicateGroup,
    DigestIndex, DeletionSet, RunCounters, CounterSnapshot, PathTracker, RunContext,
    RunReport, DeletionResult, ProcessingParams, OutcomeStatus, WalkResult,
    SUPPORTED_EXTENSIONS, MIN_FILE_SIZE, CHUNK_SIZE)
from .hasher import HasherImpl, Sha256AlgorithmImpl
from .normalizer import normalize_name, normalize_filename, normalize_dirname
from .walker import TreeWalkerImpl
from .resolver import DuplicateResolver
from .renamer import RenameExecutor
from .pruner import EmptyDirectoryPruner

__all__ = [
    "FileEntry",
    "RenameOp",
    "RenameKind",
    "DeletionCandidate",
    "DeletionReason",
    "DuplicateGroup",
    "DigestIndex",
    "DeletionSet",
    "RunCounters",
    "CounterSnapshot",
    "PathTracker",
    "RunContext",
    "RunReport",
    "DeletionResult",
    "ProcessingParams",
    "OutcomeStatus",
    "WalkResult",
    "SUPPORTED_EXTENSIONS",
    "MIN_FILE_SIZE",
    "CHUNK_SIZE",
    "HasherImpl",
    "Sha256AlgorithmImpl",
    "normalize_name",
    "normalize_filename",
    "normalize_dirname",
    "TreeWalkerImpl",
    "DuplicateResolver",
    "RenameExecutor",
    "EmptyDirectoryPruner",
]

"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and shared run state for scanning, deduplication and renaming.
"""

import os
import threading
import time
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple


# =============================
# Compiled-in defaults
# =============================

SUPPORTED_EXTENSIONS = (".mp3", ".flac", ".wav", ".aac", ".ogg", ".m4a")
MIN_FILE_SIZE = 31968  # bytes; smaller files are treated as junk
CHUNK_SIZE = 81920  # 80KB read buffer for hashing
PREVIEW_LIMIT = 5
PROGRESS_INTERVAL = 0.5  # seconds between progress redraws


# =============================
# Enums
# =============================

class RenameKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


class DeletionReason(Enum):
    """Why a file ended up in the deletion set."""
    TOO_SMALL = "too-small"
    DUPLICATE = "duplicate"

    @property
    def display_name(self) -> str:
        mapping = {
            DeletionReason.TOO_SMALL: "Below minimum size",
            DeletionReason.DUPLICATE: "Duplicate",
        }
        return mapping.get(self, self.value)


class OutcomeStatus(str, Enum):
    PROCESSED = "processed"
    MARKED_SMALL = "marked-small"
    RENAMED = "renamed"
    SKIPPED = "skipped"
    FAILED = "failed"


# ======================
#  Core Data Models
# ======================

@dataclass
class FileEntry:
    """A scanned audio file. Lives only for the duration of one run."""
    path: str
    size: int
    digest: Optional[str] = None
    name: Optional[str] = None
    extension: Optional[str] = None

    def __post_init__(self):
        if self.name is None:
            self.name = os.path.basename(self.path)
        if self.extension is None:
            _, ext = os.path.splitext(self.name)
            self.extension = ext.lower()

    def __repr__(self):
        return f"<FileEntry path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class RenameOp:
    """A pending (old path -> new path) move."""
    old_path: str
    new_path: str
    kind: RenameKind = RenameKind.FILE

    @property
    def depth_key(self) -> int:
        # Longer old path == deeper or equal; used to rename descendants first
        return len(self.old_path)


@dataclass(frozen=True)
class DeletionCandidate:
    path: str
    reason: DeletionReason
    size: int = 0
    survivor: Optional[str] = None


@dataclass
class DuplicateGroup:
    """Files sharing one content digest, with the chosen survivor first."""
    digest: str
    survivor: str
    duplicates: List[str] = field(default_factory=list)

    @property
    def files(self) -> List[str]:
        return [self.survivor] + self.duplicates

    def __repr__(self):
        return f"<DuplicateGroup digest={self.digest[:12]}, count={len(self.files)}>"


# =============================
# Unit-of-work results
# =============================

@dataclass(frozen=True)
class FileOutcome:
    path: str
    status: OutcomeStatus
    entry: Optional[FileEntry] = None
    reason: str = ""

    @property
    def size(self) -> int:
        return self.entry.size if self.entry else 0

    @property
    def digest(self) -> Optional[str]:
        return self.entry.digest if self.entry else None


@dataclass(frozen=True)
class DirectoryOutcome:
    path: str
    status: OutcomeStatus
    reason: str = ""


@dataclass(frozen=True)
class RenameOutcome:
    op: RenameOp
    status: OutcomeStatus
    final_path: Optional[str] = None
    reason: str = ""


@dataclass
class WalkResult:
    files: List[FileOutcome] = field(default_factory=list)
    skipped_directories: List[DirectoryOutcome] = field(default_factory=list)
    directories_visited: int = 0

    @property
    def failed_files(self) -> List[FileOutcome]:
        return [o for o in self.files if o.status == OutcomeStatus.FAILED]


# =============================
# Thread-safe shared containers
# =============================

class DigestIndex:
    """
    Maps a hex content digest to the set of paths sharing it.
    Safe for concurrent add() from many hashing workers.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._paths_by_digest: Dict[str, set] = defaultdict(set)
        self._digest_by_path: Dict[str, str] = {}

    def add(self, digest: str, path: str) -> None:
        with self._lock:
            known = self._digest_by_path.get(path)
            if known is not None and known != digest:
                raise ValueError(f"Path already indexed under another digest: {path}")
            self._digest_by_path[path] = digest
            self._paths_by_digest[digest].add(path)

    def snapshot(self) -> Dict[str, List[str]]:
        """Plain-dict copy with each path list sorted for reproducible iteration."""
        with self._lock:
            return {d: sorted(paths) for d, paths in self._paths_by_digest.items()}

    def duplicate_sets(self) -> Iterator[Tuple[str, List[str]]]:
        for digest, paths in sorted(self.snapshot().items()):
            if len(paths) > 1:
                yield digest, paths

    def __len__(self) -> int:
        with self._lock:
            return len(self._paths_by_digest)

    def __contains__(self, digest: str) -> bool:
        with self._lock:
            return digest in self._paths_by_digest


class DeletionSet:
    """Insertion-ordered, de-duplicated set of files slated for removal."""

    def __init__(self):
        self._lock = threading.Lock()
        self._items: Dict[str, DeletionCandidate] = {}

    def add(self, candidate: DeletionCandidate) -> bool:
        with self._lock:
            if candidate.path in self._items:
                return False
            self._items[candidate.path] = candidate
            return True

    def paths(self) -> List[str]:
        with self._lock:
            return list(self._items)

    def candidates(self) -> List[DeletionCandidate]:
        with self._lock:
            return list(self._items.values())

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class RenameQueue:
    """Append-only queue of RenameOps filled by concurrent workers."""

    def __init__(self, kind: RenameKind):
        self.kind = kind
        self._lock = threading.Lock()
        self._ops: List[RenameOp] = []

    def add(self, old_path: str, new_path: str) -> RenameOp:
        op = RenameOp(old_path=old_path, new_path=new_path, kind=self.kind)
        with self._lock:
            self._ops.append(op)
        return op

    def ops(self) -> List[RenameOp]:
        with self._lock:
            return list(self._ops)

    def __len__(self) -> int:
        with self._lock:
            return len(self._ops)


@dataclass(frozen=True)
class CounterSnapshot:
    files_scanned: int = 0
    duplicates_found: int = 0
    files_renamed: int = 0
    directories_renamed: int = 0
    directories_removed: int = 0
    bytes_processed: int = 0
    errors: int = 0
    elapsed: float = 0.0

    @property
    def files_per_second(self) -> float:
        return self.files_scanned / max(self.elapsed, 1.0)

    @property
    def megabytes_per_second(self) -> float:
        return self.bytes_processed / (1024 * 1024) / max(self.elapsed, 1.0)


class RunCounters:
    """
    Monotonic run counters plus an elapsed-time clock.
    Writers go through increment(); readers take a consistent snapshot().
    """

    _FIELDS = (
        "files_scanned",
        "duplicates_found",
        "files_renamed",
        "directories_renamed",
        "directories_removed",
        "bytes_processed",
        "errors",
    )

    def __init__(self):
        self._lock = threading.Lock()
        self._values: Dict[str, int] = {name: 0 for name in self._FIELDS}
        self._started_at: Optional[float] = None
        self._stopped_at: Optional[float] = None

    def start(self) -> None:
        with self._lock:
            if self._started_at is None:
                self._started_at = time.monotonic()

    def stop(self) -> None:
        with self._lock:
            if self._started_at is not None and self._stopped_at is None:
                self._stopped_at = time.monotonic()

    def increment(self, name: str, amount: int = 1) -> None:
        if name not in self._values:
            raise KeyError(f"Unknown counter: {name}")
        if amount < 0:
            raise ValueError("Counters only move forward")
        with self._lock:
            self._values[name] += amount

    def get(self, name: str) -> int:
        with self._lock:
            return self._values[name]

    @property
    def elapsed(self) -> float:
        with self._lock:
            return self._elapsed_unlocked()

    def _elapsed_unlocked(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._stopped_at if self._stopped_at is not None else time.monotonic()
        return end - self._started_at

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return CounterSnapshot(elapsed=self._elapsed_unlocked(), **self._values)


class PathTracker:
    """
    Remembers every executed move so a path recorded before renaming can be
    resolved to where the file lives now.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._file_moves: Dict[str, str] = {}
        self._directory_moves: List[Tuple[str, str]] = []

    def record_file(self, old_path: str, new_path: str) -> None:
        with self._lock:
            self._file_moves[old_path] = new_path

    def record_directory(self, old_path: str, new_path: str) -> None:
        with self._lock:
            self._directory_moves.append((old_path, new_path))

    def resolve(self, path: str) -> str:
        with self._lock:
            current = self._file_moves.get(path, path)
            # Directory moves were executed deepest-first against pre-rename
            # ancestors, so replaying them in order rewrites each prefix once.
            for old_dir, new_dir in self._directory_moves:
                prefix = old_dir.rstrip(os.sep) + os.sep
                if current.startswith(prefix):
                    current = new_dir.rstrip(os.sep) + os.sep + current[len(prefix):]
                elif current == old_dir:
                    current = new_dir
            return current


@dataclass
class RunContext:
    """Everything one run mutates. Created fresh for each invocation."""
    index: DigestIndex = field(default_factory=DigestIndex)
    file_renames: RenameQueue = field(default_factory=lambda: RenameQueue(RenameKind.FILE))
    directory_renames: RenameQueue = field(default_factory=lambda: RenameQueue(RenameKind.DIRECTORY))
    deletions: DeletionSet = field(default_factory=DeletionSet)
    counters: RunCounters = field(default_factory=RunCounters)
    tracker: PathTracker = field(default_factory=PathTracker)
    _sizes: Dict[str, int] = field(default_factory=dict, repr=False)
    _sizes_lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_size(self, path: str, size: int) -> None:
        with self._sizes_lock:
            self._sizes[path] = size

    def size_of(self, path: str) -> int:
        with self._sizes_lock:
            return self._sizes.get(path, 0)


@dataclass
class RunReport:
    """Everything the reporting layer needs after the engine has finished."""
    root_dir: str
    counters: CounterSnapshot
    groups: List[DuplicateGroup] = field(default_factory=list)
    deletions: List[DeletionCandidate] = field(default_factory=list)
    file_renames: List[RenameOutcome] = field(default_factory=list)
    directory_renames: List[RenameOutcome] = field(default_factory=list)
    removed_directories: List[str] = field(default_factory=list)
    walk: WalkResult = field(default_factory=WalkResult)

    @property
    def reclaimable_bytes(self) -> int:
        return sum(c.size for c in self.deletions)


@dataclass
class DeletionResult:
    total: int = 0
    deleted: int = 0
    bytes_freed: int = 0
    failed: List[Tuple[str, str]] = field(default_factory=list)
    deleted_files: List[str] = field(default_factory=list)
    removed_directories: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return not self.failed


"""
DTO for processing parameters with built-in validation.
Interface-agnostic: used by the CLI and by tests.
"""
from onetrack.utils.convert_utils import ConvertUtils


@dataclass
class ProcessingParams:
    """Parameters for one cleanup run with validation."""
    root_dir: str
    min_file_size: int = MIN_FILE_SIZE
    chunk_size: int = CHUNK_SIZE
    max_workers: Optional[int] = None
    extensions: List[str] = field(default_factory=lambda: list(SUPPORTED_EXTENSIONS))

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir or not str(self.root_dir).strip():
            raise ValueError("Root directory cannot be empty")

        if self.min_file_size < 0:
            raise ValueError("Minimum file size cannot be negative")

        if self.chunk_size < 1:
            raise ValueError("Chunk size must be positive")

        if self.max_workers is None:
            self.max_workers = os.cpu_count() or 1
        elif self.max_workers < 1:
            raise ValueError("Worker count must be at least 1")

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        self.extensions = normalized

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: Optional[str] = None,
            workers: Optional[int] = None,
    ) -> 'ProcessingParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        min_size = MIN_FILE_SIZE if not min_size_str else ConvertUtils.human_to_bytes(min_size_str)
        return ProcessingParams(
            root_dir=root_dir,
            min_file_size=min_size,
            max_workers=workers,
        )

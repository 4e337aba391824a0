"""
Shared fixtures for onetrack tests.
Creates isolated music trees with controlled audio-like files.
"""
import os
from pathlib import Path
from typing import Dict

import pytest

from onetrack.core.models import ProcessingParams, RunContext

TRACK_SIZE = 40000  # comfortably above MIN_FILE_SIZE


def write_track(path: Path, fill: bytes = b"A", size: int = TRACK_SIZE) -> Path:
    """Write a fake track of exactly `size` bytes, creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes((fill * (size // len(fill) + 1))[:size])
    return path


@pytest.fixture
def context() -> RunContext:
    return RunContext()


@pytest.fixture
def music_root(tmp_path) -> Path:
    root = tmp_path / "music"
    root.mkdir()
    return root


@pytest.fixture
def params_for():
    """Factory: ProcessingParams for a given root with a small worker pool."""
    def _make(root, **overrides) -> ProcessingParams:
        overrides.setdefault("max_workers", 4)
        return ProcessingParams(root_dir=str(root), **overrides)
    return _make


@pytest.fixture
def music_tree(music_root) -> Dict[str, Path]:
    """
    A small library covering every phase:
    - one duplicate pair (shallow copy and deeper copy)
    - one unique track with a messy name inside a messy folder
    - one undersized junk file
    - one non-audio file that must be ignored
    - one empty nested folder
    """
    files = {}
    files["shallow_dup"] = write_track(music_root / "song.mp3", b"A")
    files["deep_dup"] = write_track(music_root / "Rock" / "Song.mp3", b"A")
    files["messy"] = write_track(music_root / "my  album" / "weird!!name.mp3", b"B")
    files["junk"] = write_track(music_root / "Junk" / "tiny.mp3", b"C", size=100)
    files["notes"] = write_track(music_root / "notes.txt", b"D")

    empty = music_root / "Empty" / "Nested"
    empty.mkdir(parents=True)
    files["empty"] = empty

    return files


def names_under(root: Path):
    """All file paths under root, relative and with forward slashes, sorted."""
    result = []
    for dirpath, _, filenames in os.walk(root):
        for name in filenames:
            rel = Path(dirpath, name).relative_to(root)
            result.append(rel.as_posix())
    return sorted(result)

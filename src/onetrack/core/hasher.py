"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements whole-file content hashing with pluggable hash algorithms.

Files are streamed in fixed-size chunks, so memory use stays flat no matter
how large the track is.
"""

import hashlib

from onetrack.core.interfaces import Hasher, HashAlgorithm, HashState
from onetrack.core.models import CHUNK_SIZE


# Use the same way to implement and use any other hashing algorithm
class Sha256AlgorithmImpl(HashAlgorithm):
    name = "sha256"
    digest_size = 32

    def new(self) -> HashState:
        return hashlib.sha256()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    Read errors propagate as OSError; callers decide whether to skip the file.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = CHUNK_SIZE):
        if chunk_size < 1:
            raise ValueError("Chunk size must be positive")
        self.algorithm = algorithm or Sha256AlgorithmImpl()
        self.chunk_size = chunk_size

    def compute_digest(self, path: str) -> str:
        """Returns the lowercase hex digest of the file's full content."""
        state = self.algorithm.new()
        with open(path, 'rb') as f:
            while True:
                chunk = f.read(self.chunk_size)
                if not chunk:
                    break
                state.update(chunk)
        return state.hexdigest()

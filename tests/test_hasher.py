"""
Unit tests for HasherImpl with Sha256AlgorithmImpl.
Verifies streamed hashing returns the same 64-char hex digest as a one-shot SHA-256.
"""
import hashlib

import pytest

from onetrack.core.hasher import HasherImpl, Sha256AlgorithmImpl


class TestHasherImpl:
    """Test SHA-256 computation with chunk-based reading."""

    def test_matches_one_shot_sha256(self, tmp_path):
        content = b"test content " * 10000
        path = tmp_path / "track.mp3"
        path.write_bytes(content)

        digest = HasherImpl(Sha256AlgorithmImpl()).compute_digest(str(path))

        assert digest == hashlib.sha256(content).hexdigest()
        assert len(digest) == 64
        assert digest == digest.lower()

    def test_chunk_size_does_not_change_digest(self, tmp_path):
        """Reading in 7-byte or 80KB chunks must give the same result."""
        path = tmp_path / "track.flac"
        path.write_bytes(bytes(range(256)) * 500)

        small = HasherImpl(chunk_size=7).compute_digest(str(path))
        default = HasherImpl().compute_digest(str(path))

        assert small == default

    def test_same_content_produces_same_digest(self, tmp_path):
        a = tmp_path / "a.mp3"
        b = tmp_path / "sub" / "b.mp3"
        b.parent.mkdir()
        a.write_bytes(b"X" * 40000)
        b.write_bytes(b"X" * 40000)

        hasher = HasherImpl()
        assert hasher.compute_digest(str(a)) == hasher.compute_digest(str(b))

    def test_different_content_produces_different_digests(self, tmp_path):
        a = tmp_path / "a.mp3"
        b = tmp_path / "b.mp3"
        a.write_bytes(b"X" * 40000)
        b.write_bytes(b"X" * 39999 + b"Y")

        hasher = HasherImpl()
        assert hasher.compute_digest(str(a)) != hasher.compute_digest(str(b))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.wav"
        path.write_bytes(b"")

        assert HasherImpl().compute_digest(str(path)) == hashlib.sha256(b"").hexdigest()

    def test_missing_file_raises_os_error(self, tmp_path):
        """Read errors propagate so the walker can record the file as failed."""
        with pytest.raises(OSError):
            HasherImpl().compute_digest(str(tmp_path / "missing.mp3"))

    def test_rejects_non_positive_chunk_size(self):
        with pytest.raises(ValueError, match="Chunk size"):
            HasherImpl(chunk_size=0)

    def test_algorithm_metadata(self):
        algorithm = Sha256AlgorithmImpl()
        assert algorithm.name == "sha256"
        assert algorithm.digest_size == 32

"""Integration tests for digest functions."""

import hashlib
from typing import get_args

import pytest

from merkle_level.config import Algorithm, MerkleConfig
from merkle_level.digest import SUPPORTED_ALGORITHMS, HashlibDigest, get_digest
from merkle_level.reducer import DigestFailure


class TestHashlibDigest:
    """Tests for the hashlib-backed digest."""

    def test_combine_hashes_concatenation(self, digest):
        assert digest.combine(b"ab", b"cd") == hashlib.sha256(b"abcd").digest()

    def test_callable(self, digest):
        assert digest(b"ab", b"cd") == digest.combine(b"ab", b"cd")

    def test_hash_leaf(self, digest):
        assert digest.hash_leaf(b"hello") == hashlib.sha256(b"hello").digest()

    def test_no_state_between_calls(self, digest):
        """Repeated calls give the same result."""
        first = digest.combine(b"x", b"y")
        digest.combine(b"other", b"data")
        assert digest.combine(b"x", b"y") == first

    @pytest.mark.parametrize("algorithm,size", list(SUPPORTED_ALGORITHMS.items()))
    def test_digest_sizes(self, algorithm, size):
        fn = HashlibDigest(algorithm)
        assert fn.name == algorithm
        assert fn.digest_size == size
        assert len(fn.combine(b"a", b"b")) == size

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError, match="not supported"):
            HashlibDigest("md4-nope")

    def test_non_bytes_input_is_digest_failure(self, digest):
        with pytest.raises(DigestFailure):
            digest.combine("text", b"bytes")

    def test_repr(self, digest):
        assert repr(digest) == "HashlibDigest('sha256')"

    def test_supported_match_config_choices(self):
        """Every configurable algorithm has a digest, and nothing more."""
        assert tuple(SUPPORTED_ALGORITHMS) == get_args(Algorithm)
        for name in get_args(Algorithm):
            HashlibDigest(name)


class TestGetDigest:
    """Tests for the digest factory."""

    def test_default_config(self):
        fn = get_digest(MerkleConfig())
        assert isinstance(fn, HashlibDigest)
        assert fn.name == "sha256"

    def test_configured_algorithm(self):
        fn = get_digest(MerkleConfig(algorithm="blake2s"))
        assert fn.name == "blake2s"
        assert fn.digest_size == 32

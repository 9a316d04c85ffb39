"""Digest functions for combining Merkle tree blocks."""

import hashlib
from abc import ABC, abstractmethod
from typing import get_args

from .config import Algorithm, MerkleConfig
from .reducer import DigestFailure

# Algorithm name -> digest size in bytes
SUPPORTED_ALGORITHMS = {name: hashlib.new(name).digest_size for name in get_args(Algorithm)}


class DigestFunction(ABC):
    """Abstract base class for block digest functions."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the algorithm name."""
        ...

    @property
    @abstractmethod
    def digest_size(self) -> int:
        """Return the digest size in bytes."""
        ...

    @abstractmethod
    def combine(self, first: bytes, second: bytes) -> bytes:
        """
        Hash the concatenation of two blocks.

        Args:
            first: Left block (hashed first)
            second: Right block

        Returns:
            Fixed-length digest of ``first || second``
        """
        ...

    @abstractmethod
    def hash_leaf(self, data: bytes) -> bytes:
        """Hash raw data into a level-0 leaf."""
        ...

    def __call__(self, first: bytes, second: bytes) -> bytes:
        return self.combine(first, second)


class HashlibDigest(DigestFunction):
    """Digest backed by hashlib. Each call uses a fresh hash object."""

    def __init__(self, algorithm: str = "sha256"):
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Algorithm '{algorithm}' not supported. "
                f"Choose one of: {', '.join(SUPPORTED_ALGORITHMS)}"
            )
        self.algorithm = algorithm

    @property
    def name(self) -> str:
        return self.algorithm

    @property
    def digest_size(self) -> int:
        return SUPPORTED_ALGORITHMS[self.algorithm]

    def combine(self, first: bytes, second: bytes) -> bytes:
        try:
            h = hashlib.new(self.algorithm)
            h.update(first)
            h.update(second)
            return h.digest()
        except (TypeError, ValueError) as e:
            raise DigestFailure(f"{self.algorithm} failed: {e}") from e

    def hash_leaf(self, data: bytes) -> bytes:
        try:
            return hashlib.new(self.algorithm, data).digest()
        except (TypeError, ValueError) as e:
            raise DigestFailure(f"{self.algorithm} failed: {e}") from e

    def __repr__(self) -> str:
        return f"HashlibDigest({self.algorithm!r})"


def get_digest(config: MerkleConfig) -> DigestFunction:
    """
    Factory function to get the configured digest function.

    Args:
        config: Merkle configuration with algorithm settings

    Returns:
        A DigestFunction instance

    Raises:
        ValueError: If the algorithm is not supported
    """
    return HashlibDigest(config.algorithm)

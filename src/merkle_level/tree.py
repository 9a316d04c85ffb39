"""Tree orchestration: climb from leaves to a Merkle root one level at a time."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .digest import DigestFunction
from .reducer import Block, Digest, reduce_level

logger = logging.getLogger(__name__)


@dataclass
class TreeBuildStats:
    """Statistics from climbing a Merkle tree."""

    leaf_count: int = 0
    level_count: int = 0  # Including the leaf level
    digest_calls: int = 0  # Pair combinations, leaf hashing excluded


@dataclass
class MerkleRoot:
    """Result of reducing a set of leaves to a single root."""

    root: Block
    algorithm: str
    levels: list[tuple[Block, ...]] = field(default_factory=list)
    stats: TreeBuildStats = field(default_factory=TreeBuildStats)

    @property
    def hex(self) -> str:
        return self.root.hex()

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "root": self.hex,
            "algorithm": self.algorithm,
            "leaf_count": self.stats.leaf_count,
            "level_count": self.stats.level_count,
            "digest_calls": self.stats.digest_calls,
        }


def hash_leaves(items: Iterable[bytes], digest: DigestFunction) -> tuple[Block, ...]:
    """Produce level 0 by hashing each raw item into a leaf."""
    return tuple(digest.hash_leaf(item) for item in items)


def build_levels(leaves: Iterable[bytes], digest: Digest) -> list[tuple[Block, ...]]:
    """
    Reduce leaves level by level until one block remains.

    Args:
        leaves: Level-0 blocks, in order
        digest: Pair digest function

    Returns:
        All levels, leaves first and the single-block root level last

    Raises:
        ValueError: If there are no leaves
    """
    level = tuple(bytes(leaf) for leaf in leaves)
    if not level:
        raise ValueError("Cannot build a Merkle tree from zero leaves")

    levels = [level]
    while len(level) > 1:
        next_level = reduce_level(level, digest)
        logger.debug("level %d: %d -> %d blocks", len(levels), len(level), len(next_level))
        levels.append(next_level)
        level = next_level
    return levels


def compute_root(leaves: Iterable[bytes], digest: Digest) -> Block:
    """Return the Merkle root of ``leaves``. A single leaf is its own root."""
    return build_levels(leaves, digest)[-1][0]


def build_root(leaves: Iterable[bytes], digest: DigestFunction) -> MerkleRoot:
    """Climb to the root and collect statistics along the way."""
    levels = build_levels(leaves, digest)
    stats = TreeBuildStats(
        leaf_count=len(levels[0]),
        level_count=len(levels),
        digest_calls=sum(len(level) for level in levels[1:]),
    )
    logger.debug(
        "root computed from %d leaves in %d levels (%s)",
        stats.leaf_count,
        stats.level_count,
        digest.name,
    )
    return MerkleRoot(root=levels[-1][0], algorithm=digest.name, levels=levels, stats=stats)


def iter_file_chunks(path: Path, chunk_size: int) -> Iterator[bytes]:
    """Yield fixed-size chunks of a file; the last one may be shorter."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    with open(path, "rb") as f:
        yield from iter(lambda: f.read(chunk_size), b"")


def file_leaves(path: Path, digest: DigestFunction, chunk_size: int) -> tuple[Block, ...]:
    """Leaf-hash each chunk of a file."""
    return hash_leaves(iter_file_chunks(path, chunk_size), digest)


def compute_file_hash(path: Path, digest: DigestFunction) -> Block:
    """Leaf-hash a whole file's contents."""
    return digest.hash_leaf(path.read_bytes())

"""Merkle Level - Pairwise reduction of Merkle tree levels."""

__version__ = "0.1.0"

# File constants
CONFIG_FILE = ".merkle-level.json"
ENV_PREFIX = "MERKLE_LEVEL_"

"""Configuration management for Merkle Level."""

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from . import CONFIG_FILE, ENV_PREFIX

# Supported hash algorithms; digest sizes are looked up from hashlib
Algorithm = Literal[
    "sha256", "sha224", "sha384", "sha512", "sha3_256", "sha3_512", "blake2b", "blake2s", "sha1"
]


class MerkleConfig(BaseModel):
    """Configuration for Merkle Level."""

    version: int = 1
    algorithm: Algorithm = "sha256"
    chunk_size: int = Field(default=1024, ge=1)
    encoding: Literal["hex", "base64"] = "hex"


def get_config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return project_root / CONFIG_FILE


def load_config(project_root: Path) -> MerkleConfig:
    """Load configuration from the project's config file.

    Falls back to defaults if file doesn't exist.
    Environment variables can override config values.
    """
    config_path = get_config_path(project_root)

    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)
        config = MerkleConfig.model_validate(data)
    else:
        config = MerkleConfig()

    # Apply environment variable overrides
    config = _apply_env_overrides(config)

    return config


def save_config(config: MerkleConfig, project_root: Path) -> None:
    """Save configuration to the project's config file."""
    config_path = get_config_path(project_root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config.model_dump(), f, indent=2)


def create_default_config(algorithm: Algorithm = "sha256") -> MerkleConfig:
    """Create a default configuration with the specified algorithm."""
    return MerkleConfig(algorithm=algorithm)


def _apply_env_overrides(config: MerkleConfig) -> MerkleConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    # MERKLE_LEVEL_ALGORITHM
    if algorithm := os.environ.get(f"{ENV_PREFIX}ALGORITHM"):
        data["algorithm"] = algorithm

    # MERKLE_LEVEL_CHUNK_SIZE
    if chunk_size := os.environ.get(f"{ENV_PREFIX}CHUNK_SIZE"):
        data["chunk_size"] = chunk_size

    return MerkleConfig.model_validate(data)

"""Shared test fixtures for merkle-level."""

import hashlib
from pathlib import Path

import pytest
from click.testing import CliRunner

from merkle_level.config import MerkleConfig, save_config
from merkle_level.digest import HashlibDigest


@pytest.fixture
def cli_runner():
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def digest() -> HashlibDigest:
    """Default SHA-256 digest function."""
    return HashlibDigest("sha256")


@pytest.fixture
def blocks() -> dict[str, bytes]:
    """Four distinct 32-byte blocks named A-D."""
    return {name: hashlib.sha256(name.encode()).digest() for name in "ABCD"}


def setup_project(project_root: Path, config: MerkleConfig | None = None) -> MerkleConfig:
    """Write a config file into ``project_root``.

    Args:
        project_root: Directory to hold the config file
        config: Optional config to use (defaults to sha256)

    Returns:
        The config that was saved
    """
    if config is None:
        config = MerkleConfig()
    save_config(config, project_root)
    return config


@pytest.fixture
def initialized_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A temporary working directory with a default config file."""
    setup_project(tmp_path)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch):
    """Keep the caller's environment from overriding test config."""
    monkeypatch.delenv("MERKLE_LEVEL_ALGORITHM", raising=False)
    monkeypatch.delenv("MERKLE_LEVEL_CHUNK_SIZE", raising=False)

"""CLI for Merkle Level."""

import base64
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import CONFIG_FILE, __version__
from .config import MerkleConfig, create_default_config, get_config_path, load_config, save_config
from .digest import SUPPORTED_ALGORITHMS, get_digest
from .reducer import ReductionError, reduce_level
from .tree import build_root, compute_file_hash, file_leaves

console = Console()
error_console = Console(stderr=True)


def get_project_root() -> Path:
    """Get the project root directory (current working directory)."""
    return Path.cwd()


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    error_console.print(f"[red]Error:[/red] {message}")
    sys.exit(1)


def get_config(algorithm: str | None) -> MerkleConfig:
    """Load project config, letting a command-line algorithm win."""
    try:
        config = load_config(get_project_root())
        if algorithm:
            config = MerkleConfig.model_validate({**config.model_dump(), "algorithm": algorithm})
    except ValidationError as e:
        fail(f"Invalid configuration: {e.errors()[0]['msg']}")
    except json.JSONDecodeError as e:
        fail(f"Invalid configuration: {CONFIG_FILE} is not valid JSON ({e.msg})")
    except OSError as e:
        fail(f"Cannot read {CONFIG_FILE}: {e.strerror or e}")
    return config


def encode_block(block: bytes, encoding: str) -> str:
    if encoding == "base64":
        return base64.b64encode(block).decode("ascii")
    return block.hex()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


algorithm_option = click.option(
    "--algorithm",
    "-a",
    type=click.Choice(list(SUPPORTED_ALGORITHMS)),
    default=None,
    help="Hash algorithm (overrides config)",
)


@click.group()
@click.version_option(version=__version__, prog_name="merkle-level")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(verbose: bool) -> None:
    """Merkle Level - Pairwise reduction of Merkle tree levels."""
    _setup_logging(verbose)


@main.command()
@click.option(
    "--algorithm",
    "-a",
    type=click.Choice(list(SUPPORTED_ALGORITHMS)),
    default="sha256",
    help="Hash algorithm to use",
)
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(algorithm: str, force: bool) -> None:
    """Write a default config file in the current directory."""
    project_root = get_project_root()
    config_path = get_config_path(project_root)

    if config_path.exists() and not force:
        error_console.print(
            f"[yellow]Warning:[/yellow] {CONFIG_FILE} already exists. Use --force to overwrite."
        )
        sys.exit(1)

    config = create_default_config(algorithm)
    save_config(config, project_root)

    console.print(
        Panel(
            f"[green]Initialized Merkle Level[/green]\n\n"
            f"Algorithm: [bold]{algorithm}[/bold]\n"
            f"Config file: [dim]{config_path}[/dim]",
            title="merkle-level init",
        )
    )


@main.command()
def algorithms() -> None:
    """List supported hash algorithms."""
    table = Table(title="Supported Algorithms")
    table.add_column("Algorithm", style="cyan")
    table.add_column("Digest bytes", justify="right")

    for name, size in SUPPORTED_ALGORITHMS.items():
        table.add_row(name, str(size))

    console.print(table)


@main.command()
@click.argument("blocks", nargs=-1)
@algorithm_option
def level(blocks: tuple[str, ...], algorithm: str | None) -> None:
    """Reduce one level of hex-encoded BLOCKS to the next level.

    Reads one block per line from stdin when no BLOCKS are given.
    Prints the next level, one block per line.
    """
    config = get_config(algorithm)
    digest = get_digest(config)

    if not blocks:
        blocks = tuple(line.strip() for line in sys.stdin if line.strip())

    try:
        decoded = [bytes.fromhex(block) for block in blocks]
    except ValueError as e:
        fail(f"Invalid hex block: {e}")

    try:
        next_level = reduce_level(decoded, digest)
    except ReductionError as e:
        fail(str(e))

    for block in next_level:
        click.echo(encode_block(block, config.encoding))


@main.command()
@click.argument(
    "paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@algorithm_option
@click.option("--chunked", is_flag=True, help="Use chunks of a single file as leaves")
@click.option("--chunk-size", type=int, default=None, help="Chunk size in bytes (overrides config)")
@click.option("--show-levels", is_flag=True, help="Print every level of the tree")
def root(
    paths: tuple[Path, ...],
    algorithm: str | None,
    chunked: bool,
    chunk_size: int | None,
    show_levels: bool,
) -> None:
    """Compute the Merkle root of PATHS.

    Each file is one leaf, in the order given. With --chunked, a single
    file is split into fixed-size chunks and each chunk is a leaf.
    """
    config = get_config(algorithm)
    digest = get_digest(config)

    try:
        if chunked:
            if len(paths) != 1:
                fail("--chunked takes exactly one file")
            leaves = file_leaves(paths[0], digest, chunk_size or config.chunk_size)
        else:
            leaves = tuple(compute_file_hash(path, digest) for path in paths)
        result = build_root(leaves, digest)
    except (ReductionError, ValueError) as e:
        fail(str(e))

    if show_levels:
        for height, blocks in enumerate(result.levels):
            console.print(f"[bold]Level {height}[/bold] ({len(blocks)} blocks)")
            for block in blocks:
                console.print(f"  {encode_block(block, config.encoding)}")

    table = Table(title="Merkle Root")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Algorithm", result.algorithm)
    table.add_row("Leaves", str(result.stats.leaf_count))
    table.add_row("Levels", str(result.stats.level_count))
    table.add_row("Digest calls", str(result.stats.digest_calls))

    console.print(table)
    click.echo(encode_block(result.root, config.encoding))


if __name__ == "__main__":
    main()

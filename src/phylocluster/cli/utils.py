"""
Shared CLI utilities for phylocluster commands.

Progress display, quiet output, logging setup, and the config and tree
loading shared by the tree commands.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from phylocluster.core.exceptions import PhyloClusterError
from phylocluster.core.tree import PhyloTree
from phylocluster.models.config import PhyloConfig


@contextmanager
def spinner_progress(
    description: str,
    console: Console | None = None,
    quiet: bool = False,
) -> Generator[Progress, None, None]:
    """Show an indeterminate spinner while a build runs.

    Clustering reports no intermediate progress, so the task has no total.
    With quiet set the Progress is created disabled and draws nothing.
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console if not quiet else None,
        disable=quiet,
    ) as progress:
        progress.add_task(description=description, total=None)
        yield progress


class QuietConsole:
    """Drop decorative output (headers, summaries) when --quiet is given.

    Tree text and errors go straight to the wrapped Console instead.
    """

    def __init__(self, console: Console, quiet: bool = False):
        self._console = console
        self._quiet = quiet

    def print(self, *args: Any, **kwargs: Any) -> None:
        if self._quiet:
            return
        self._console.print(*args, **kwargs)


def configure_logging(verbose: bool, console: Console | None = None) -> None:
    """Route phylocluster log records through Rich; DEBUG when verbose."""
    logger = logging.getLogger("phylocluster")
    logger.handlers.clear()
    handler = RichHandler(console=console, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def load_config(config_path: Path | None, console: Console) -> PhyloConfig:
    """Load a YAML config, or the defaults when no path is given."""
    if config_path is None:
        return PhyloConfig()
    try:
        return PhyloConfig.from_yaml(config_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error loading config {config_path}: {e}[/red]")
        raise typer.Exit(code=1) from None


def load_tree(
    fasta: Path | None,
    matrix: Path | None,
    config: PhyloConfig,
    console: Console,
    quiet: bool = False,
) -> PhyloTree:
    """Build a tree from exactly one of a FASTA file or a distance matrix.

    Errors are reported on the console and end the command with exit code 1.
    """
    from phylocluster.core.builder import build, build_from_matrix
    from phylocluster.core.parsers import DistanceMatrixParser, load_sequence_items

    if (fasta is None) == (matrix is None):
        console.print("[red]Error: provide exactly one of --fasta or --matrix[/red]")
        raise typer.Exit(code=1) from None

    try:
        if fasta is not None:
            items = load_sequence_items(fasta)
            with spinner_progress(
                f"Clustering {len(items)} sequences ({config.build.metric.value})...",
                console,
                quiet,
            ):
                return build(items, config=config.build)

        distances = DistanceMatrixParser(matrix).parse()
        with spinner_progress(
            f"Clustering {len(distances)} items from distance matrix...",
            console,
            quiet,
        ):
            return build_from_matrix(distances, config=config.build)
    except (PhyloClusterError, FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from None

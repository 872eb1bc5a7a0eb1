"""
Main CLI entry point for phylocluster.

Provides subcommands:
- tree: Build UPGMA trees and query them
"""

from __future__ import annotations

import typer
from rich import print as rprint

from phylocluster import __version__

app = typer.Typer(
    name="phylocluster",
    help="UPGMA phylogenetic trees from sequences or distance matrices",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        rprint(f"phylocluster version {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Phylocluster: UPGMA phylogenetic trees from pairwise distances.
    """


# Import subcommands
from phylocluster.cli import tree

# Register subcommands
app.add_typer(tree.app, name="tree")


if __name__ == "__main__":
    app()

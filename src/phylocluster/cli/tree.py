"""
Tree commands for building and querying phylogenetic trees.

Provides subcommands:
- build: Build a UPGMA tree and print or save its renderings
- query: Answer evolutionary distance and least common ancestor queries
"""
from __future__ import annotations

import math
from pathlib import Path

import typer
from rich.console import Console

from phylocluster.cli.utils import QuietConsole, configure_logging, load_config, load_tree
from phylocluster.core.exceptions import InvalidPrintWidthError
from phylocluster.models.config import DistanceMetric

app = typer.Typer(
    name="tree",
    help="Build and query UPGMA phylogenetic trees",
    no_args_is_help=True,
)

console = Console()


def _emit(text: str, end: str = "\n") -> None:
    """Print tree text verbatim: no markup, highlighting or wrapping."""
    console.print(text, end=end, markup=False, highlight=False, soft_wrap=True)


FASTA_OPTION = typer.Option(
    None,
    "--fasta",
    "-f",
    help="FASTA file of aligned sequences",
    dir_okay=False,
)
MATRIX_OPTION = typer.Option(
    None,
    "--matrix",
    "-m",
    help="Distance matrix CSV/TSV (first column and header are item names)",
    dir_okay=False,
)
CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="YAML configuration file with build and render sections",
    dir_okay=False,
)


@app.command(name="build")
def build(
    fasta: Path | None = FASTA_OPTION,
    matrix: Path | None = MATRIX_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    metric: DistanceMetric | None = typer.Option(
        None,
        "--metric",
        help="Sequence distance metric (overrides config)",
    ),
    width: int | None = typer.Option(
        None,
        "--width",
        "-w",
        help="Indent of the deepest leaf in the indented dump (overrides config)",
    ),
    newick: Path | None = typer.Option(
        None,
        "--newick",
        "-o",
        help="Write the Newick tree to this file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress progress output",
    ),
) -> None:
    """
    Build a UPGMA tree and print it.

    Examples:

        # Tree from aligned sequences
        phylocluster tree build --fasta species.fasta

        # Tree from a distance matrix, saving the Newick string
        phylocluster tree build --matrix distances.csv --newick tree.nwk
    """
    configure_logging(verbose, console)
    out = QuietConsole(console, quiet=quiet)

    config = load_config(config_path, console)
    if metric is not None:
        config = config.model_copy(
            update={"build": config.build.model_copy(update={"metric": metric})}
        )

    out.print("\n[bold blue]Phylocluster Tree Builder[/bold blue]\n")
    tree = load_tree(fasta, matrix, config, console, quiet)
    out.print(f"[bold]Leaves:[/bold] {tree.count_leaves()}")
    out.print(f"[bold]Height:[/bold] {tree.height()}")
    out.print(f"[bold]Weighted height:[/bold] {tree.weighted_height():.5f}\n")

    try:
        dump = tree.render_indented(width, config.render)
    except InvalidPrintWidthError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from None
    newick_str = tree.render_newick(config.render)

    _emit(dump, end="")
    _emit(newick_str)

    if newick is not None:
        newick.parent.mkdir(parents=True, exist_ok=True)
        newick.write_text(newick_str + ";\n")
        out.print(f"\n[bold]Newick written to:[/bold] {newick}")


@app.command(name="query")
def query(
    fasta: Path | None = FASTA_OPTION,
    matrix: Path | None = MATRIX_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    distance: tuple[str, str] = typer.Option(
        (None, None),
        "--distance",
        "-d",
        help="Evolutionary distance between two named items",
    ),
    lca: tuple[str, str] = typer.Option(
        (None, None),
        "--lca",
        "-l",
        help="Least common ancestor of two labelled nodes",
    ),
    depth: str | None = typer.Option(
        None,
        "--depth",
        help="Depth of a labelled node",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output",
    ),
) -> None:
    """
    Query a UPGMA tree.

    Unknown names give an infinite distance, no ancestor, or depth -1.

    Examples:

        phylocluster tree query --fasta species.fasta --distance human chimp

        phylocluster tree query --matrix distances.csv --lca A C
    """
    configure_logging(verbose, console)

    if distance[0] is None and lca[0] is None and depth is None:
        console.print("[red]Error: provide --distance, --lca or --depth[/red]")
        raise typer.Exit(code=1) from None

    config = load_config(config_path, console)
    tree = load_tree(fasta, matrix, config, console, quiet=True)

    if distance[0] is not None:
        name_a, name_b = distance
        value = tree.evolutionary_distance(name_a, name_b)
        shown = "inf" if math.isinf(value) else f"{value:.5f}"
        _emit(f"distance({name_a}, {name_b}) = {shown}")

    if lca[0] is not None:
        label_a, label_b = lca
        ancestor = tree.least_common_ancestor(label_a, label_b)
        shown = ancestor.label if ancestor is not None else "not found"
        _emit(f"lca({label_a}, {label_b}) = {shown}")

    if depth is not None:
        _emit(f"depth({depth}) = {tree.depth(depth)}")

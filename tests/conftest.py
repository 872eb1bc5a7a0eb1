"""
Shared pytest fixtures for phylocluster tests.

Provides small clustering inputs with hand-checked results, built trees,
and temporary input files for unit and integration testing.
"""

from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from phylocluster.core.builder import build
from phylocluster.core.tree import PhyloTree
from tests.factories import make_distance_fn, make_items


# =============================================================================
# Three items: A and B merge first, then C
# =============================================================================


@pytest.fixture
def abc_distances() -> dict[tuple[str, str], float]:
    return {("A", "B"): 2.0, ("A", "C"): 4.0, ("B", "C"): 4.0}


@pytest.fixture
def abc_tree(abc_distances: dict[tuple[str, str], float]) -> PhyloTree:
    """Root A+B+C (weight 2.0) over A+B (weight 1.0) and C."""
    return build(make_items("A", "B", "C"), make_distance_fn(abc_distances))


# =============================================================================
# Four items: two equally tight pairs {W, X} and {Y, Z}
# =============================================================================


@pytest.fixture
def wxyz_distances() -> dict[tuple[str, str], float]:
    return {
        ("W", "X"): 1.0,
        ("Y", "Z"): 1.0,
        ("W", "Y"): 5.0,
        ("W", "Z"): 5.0,
        ("X", "Y"): 5.0,
        ("X", "Z"): 5.0,
    }


@pytest.fixture
def wxyz_tree(wxyz_distances: dict[tuple[str, str], float]) -> PhyloTree:
    """Root W+X+Y+Z (weight 2.5) over W+X and Y+Z (weight 0.5 each)."""
    return build(make_items("W", "X", "Y", "Z"), make_distance_fn(wxyz_distances))


# =============================================================================
# Files
# =============================================================================


@pytest.fixture
def abc_matrix() -> pd.DataFrame:
    names = ["A", "B", "C"]
    return pd.DataFrame(
        [[0.0, 2.0, 4.0], [2.0, 0.0, 4.0], [4.0, 4.0, 0.0]],
        index=names,
        columns=names,
    )


@pytest.fixture
def abc_matrix_csv(tmp_path: Path, abc_matrix: pd.DataFrame) -> Path:
    path = tmp_path / "distances.csv"
    abc_matrix.to_csv(path, index_label="name")
    return path


@pytest.fixture
def species_fasta(tmp_path: Path) -> Path:
    """Four aligned sequences; human and chimp differ at one site."""
    path = tmp_path / "species.fasta"
    path.write_text(
        ">gi|1|gb|human\n"
        "ACGTACGTAC\n"
        "GTACGTACGT\n"
        ">gi|2|gb|chimp\n"
        "ACGTACGTAC\n"
        "GTACGTACGA\n"
        ">gi|3|gb|mouse\n"
        "ACGTTCGAAC\n"
        "GTACCTACGA\n"
        ">gi|4|gb|fish\n"
        "TCGATCGAAG\n"
        "GTTCCTAGGA\n"
    )
    return path

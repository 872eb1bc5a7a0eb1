"""Build phylogenetic trees by agglomerative (UPGMA) clustering.

Starting from one single-leaf cluster per item, the two closest clusters
are merged repeatedly until one remains. A merge at distance d creates an
internal node whose two child edges both weigh d / 2, and the distance from
the merged cluster to every survivor is the leaf-count weighted average of
the two pre-merge distances.
"""

from __future__ import annotations

import heapq
import logging
import math
from collections.abc import Callable, Iterable
from typing import Any

import pandas as pd

from phylocluster.core.distance import DistanceTable, get_distance_function
from phylocluster.core.exceptions import (
    DistanceMatrixAsymmetryError,
    DistanceMatrixNotSquareError,
    DistanceMatrixRowColumnMismatchError,
    DistanceMatrixValueError,
    EmptyInputError,
    InvalidDistanceError,
    InvalidItemNameError,
)
from phylocluster.core.node import InternalNode, LeafNode, TreeNode
from phylocluster.core.tree import PhyloTree
from phylocluster.models.config import BuildConfig
from phylocluster.models.items import NamedItem

logger = logging.getLogger(__name__)


class ClusterBuilder:
    """
    Agglomerative cluster builder.

    Ties between equally close pairs are broken in favour of the pair whose
    (smaller label, larger label) tuple sorts first, so the resulting tree
    shape depends only on the items and their distances.

    The pair search uses a heap of candidate pairs ordered by
    (distance, smaller label, larger label). Entries that mention a label
    that has since been merged away are discarded when they reach the top,
    which selects exactly the pair a full scan of the table would.

    Example:
        >>> items = [NamedItem(name=n, payload=n) for n in "ABC"]
        >>> dist = {frozenset("AB"): 2.0, frozenset("AC"): 4.0, frozenset("BC"): 4.0}
        >>> builder = ClusterBuilder(lambda a, b: dist[frozenset((a, b))])
        >>> builder.build(items).root.label
        'A+B+C'
    """

    def __init__(
        self,
        distance_fn: Callable[[Any, Any], float],
        config: BuildConfig | None = None,
    ) -> None:
        self.distance_fn = distance_fn
        self.config = config or BuildConfig()

    def build(self, items: Iterable[NamedItem]) -> PhyloTree:
        """
        Cluster the items into a single tree.

        Args:
            items: Items with unique, non-empty names.

        Returns:
            PhyloTree over all items.

        Raises:
            EmptyInputError: If there are no items.
            InvalidItemNameError: If a name is empty, repeated, or contains
                the label separator.
            InvalidDistanceError: If the distance function returns a
                negative or non-finite value.
        """
        items = tuple(items)
        self._validate_items(items)

        forest: dict[str, TreeNode] = {
            item.name: LeafNode(item.name, item.payload) for item in items
        }
        table = self._initial_distances(items)
        root = self._agglomerate(forest, table)

        logger.info(
            f"Built tree over {root.leaf_count} items "
            f"({root.leaf_count - 1} merges)"
        )
        return PhyloTree(root, items)

    def _validate_items(self, items: tuple[NamedItem, ...]) -> None:
        if not items:
            raise EmptyInputError()

        separator = self.config.separator
        seen: set[str] = set()
        for item in items:
            if not item.name:
                raise InvalidItemNameError(item.name, "name is empty")
            if separator in item.name:
                raise InvalidItemNameError(
                    item.name, f"name contains the separator {separator!r}"
                )
            if item.name in seen:
                raise InvalidItemNameError(item.name, "name is not unique")
            seen.add(item.name)

    def _initial_distances(self, items: tuple[NamedItem, ...]) -> DistanceTable:
        table = DistanceTable()
        for item in items:
            table.add_label(item.name)

        for i, item_a in enumerate(items):
            for item_b in items[i + 1:]:
                distance = float(self.distance_fn(item_a.payload, item_b.payload))
                if not math.isfinite(distance) or distance < 0:
                    raise InvalidDistanceError(item_a.name, item_b.name, distance)
                table.set(item_a.name, item_b.name, distance)

        logger.debug(f"Computed {len(items) * (len(items) - 1) // 2} pairwise distances")
        return table

    def _agglomerate(self, forest: dict[str, TreeNode], table: DistanceTable) -> TreeNode:
        separator = self.config.separator
        heap = [(distance, a, b) for a, b, distance in table.pairs()]
        heapq.heapify(heap)

        while len(forest) > 1:
            distance, smaller, larger = heapq.heappop(heap)
            if smaller not in forest or larger not in forest:
                continue

            left = forest.pop(smaller)
            right = forest.pop(larger)
            label = f"{smaller}{separator}{larger}"
            merged = InternalNode(label, left, right, distance / 2)
            logger.debug(f"Merged {smaller!r} and {larger!r} at distance {distance:.5f}")

            left_share = left.leaf_count / merged.leaf_count
            right_share = right.leaf_count / merged.leaf_count
            to_left = table.neighbours(smaller)
            to_right = table.neighbours(larger)
            table.remove(smaller)
            table.remove(larger)
            table.add_label(label)

            for other in forest:
                new_distance = left_share * to_left[other] + right_share * to_right[other]
                table.set(label, other, new_distance)
                if label < other:
                    heapq.heappush(heap, (new_distance, label, other))
                else:
                    heapq.heappush(heap, (new_distance, other, label))

            forest[label] = merged

        (root,) = forest.values()
        return root


def build(
    items: Iterable[NamedItem],
    distance_fn: Callable[[Any, Any], float] | None = None,
    config: BuildConfig | None = None,
) -> PhyloTree:
    """
    Build a tree from named items.

    Args:
        items: Items with unique, non-empty names.
        distance_fn: Distance between two payloads. Defaults to the
            sequence metric selected in config.
        config: Build options; defaults to BuildConfig().

    Returns:
        PhyloTree over all items.
    """
    config = config or BuildConfig()
    if distance_fn is None:
        distance_fn = get_distance_function(config.metric)
    return ClusterBuilder(distance_fn, config).build(items)


def validate_distance_matrix(matrix: pd.DataFrame) -> None:
    """
    Check that a labelled distance matrix can be clustered.

    Raises:
        DistanceMatrixNotSquareError: If the matrix is not square.
        DistanceMatrixRowColumnMismatchError: If row and column labels differ.
        DistanceMatrixValueError: If off-diagonal values are missing or negative.
        DistanceMatrixAsymmetryError: If the two triangles disagree.
    """
    rows, cols = matrix.shape
    if rows != cols:
        raise DistanceMatrixNotSquareError(rows, cols)

    matrix = matrix.rename(index=str, columns=str)
    duplicated = matrix.index[matrix.index.duplicated()]
    if len(duplicated):
        raise InvalidItemNameError(duplicated[0], "name is not unique")

    row_names = set(matrix.index)
    col_names = set(matrix.columns)
    if row_names != col_names:
        raise DistanceMatrixRowColumnMismatchError(
            missing_in_rows=col_names - row_names,
            missing_in_cols=row_names - col_names,
        )

    matrix = matrix.loc[matrix.index, matrix.index]
    names = list(matrix.index)
    values = matrix.to_numpy(dtype=float)

    invalid: list[tuple[str, str, float]] = []
    for i in range(rows):
        for j in range(rows):
            if i != j and (not math.isfinite(values[i, j]) or values[i, j] < 0):
                invalid.append((names[i], names[j], float(values[i, j])))
    if invalid:
        raise DistanceMatrixValueError(invalid)

    for i in range(rows):
        for j in range(i + 1, rows):
            if not math.isclose(values[i, j], values[j, i], rel_tol=1e-9, abs_tol=1e-12):
                raise DistanceMatrixAsymmetryError(
                    names[i], names[j], float(values[i, j]), float(values[j, i])
                )


def build_from_matrix(matrix: pd.DataFrame, config: BuildConfig | None = None) -> PhyloTree:
    """
    Build a tree from a precomputed distance matrix.

    Args:
        matrix: Square DataFrame of pairwise distances whose index and
            columns are item names. The diagonal is ignored.
        config: Build options; defaults to BuildConfig().

    Returns:
        PhyloTree whose items carry their own name as payload.
    """
    validate_distance_matrix(matrix)
    if matrix.empty:
        raise EmptyInputError()

    matrix = matrix.rename(index=str, columns=str)

    items = [NamedItem(name=name, payload=name) for name in matrix.index]

    def lookup(name_a: str, name_b: str) -> float:
        return float(matrix.at[name_a, name_b])

    return ClusterBuilder(lookup, config).build(items)

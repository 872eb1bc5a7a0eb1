"""Query a built phylogenetic tree.

The module-level functions work on any node of any tree and accept None,
returning a sentinel (-1, -inf or None) instead of raising, so callers can
use them to terminate upward walks. PhyloTree wraps a root node together
with the items it was built from and answers label-based queries.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from typing import TYPE_CHECKING

from phylocluster.core.node import TreeNode

if TYPE_CHECKING:
    from phylocluster.models.config import RenderConfig
    from phylocluster.models.items import NamedItem

logger = logging.getLogger(__name__)


def node_depth(node: TreeNode | None) -> int:
    """Number of edges from the overall root to node; -1 for None."""
    if node is None:
        return -1
    depth = 0
    parent = node.parent
    while parent is not None:
        depth += 1
        parent = parent.parent
    return depth


def node_height(node: TreeNode | None) -> int:
    """Edges on the longest downward path to a leaf; -1 for None."""
    if node is None:
        return -1
    if node.is_leaf:
        return 0
    return 1 + max(node_height(node.left), node_height(node.right))


def weighted_node_height(node: TreeNode | None) -> float:
    """
    Largest sum of edge weights on any path from node down to a leaf.

    This is not necessarily the weight of the path with the most edges.
    Returns -inf for None.
    """
    if node is None:
        return -math.inf
    if node.is_leaf:
        return 0.0
    return node.edge_weight + max(
        weighted_node_height(node.left), weighted_node_height(node.right)
    )


def weighted_node_depth(node: TreeNode | None) -> float:
    """Sum of edge weights from the overall root down to node; -inf for None."""
    if node is None:
        return -math.inf
    weights = []
    parent = node.parent
    while parent is not None:
        weights.append(parent.edge_weight)
        parent = parent.parent
    # Summed from the root down, matching the renderer's accumulation order.
    depth = 0.0
    for weight in reversed(weights):
        depth += weight
    return depth


def find_by_label(root: TreeNode | None, label: str) -> TreeNode | None:
    """Depth-first search of the subtree at root for a node with the given label."""
    if root is None:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.label == label:
            return node
        if not node.is_leaf:
            stack.append(node.right)
            stack.append(node.left)
    return None


def least_common_ancestor(
    node_a: TreeNode | None, node_b: TreeNode | None
) -> TreeNode | None:
    """
    Deepest node that is an ancestor of both inputs (a node is its own ancestor).

    Walks the deeper node upward until both depths agree, then steps both
    upward together until they are the same node. Nodes are compared by
    identity, never by label.
    """
    if node_a is None or node_b is None:
        return None

    depth_a = node_depth(node_a)
    depth_b = node_depth(node_b)
    while depth_a > depth_b:
        node_a = node_a.parent
        depth_a -= 1
    while depth_b > depth_a:
        node_b = node_b.parent
        depth_b -= 1
    while node_a is not node_b:
        node_a = node_a.parent
        node_b = node_b.parent
    return node_a


def path_distance(node_a: TreeNode, node_b: TreeNode) -> float:
    """Sum of edge weights on the path between two nodes of the same tree."""
    total = 0.0
    depth_a = node_depth(node_a)
    depth_b = node_depth(node_b)
    while depth_a > depth_b:
        node_a = node_a.parent
        total += node_a.edge_weight
        depth_a -= 1
    while depth_b > depth_a:
        node_b = node_b.parent
        total += node_b.edge_weight
        depth_b -= 1
    while node_a is not node_b:
        node_a = node_a.parent
        total += node_a.edge_weight
        node_b = node_b.parent
        total += node_b.edge_weight
    return total


class PhyloTree:
    """
    A built phylogenetic tree.

    Owns the root node and the items the tree was built from. The tree is
    never modified after construction, so all queries and renderers can be
    called repeatedly and from several threads.
    """

    def __init__(self, root: TreeNode, items: tuple[NamedItem, ...] = ()) -> None:
        self._root = root
        self._items = tuple(items)

    @property
    def root(self) -> TreeNode:
        return self._root

    @property
    def items(self) -> tuple[NamedItem, ...]:
        """Items the tree was built from, in input order."""
        return self._items

    def iter_nodes(self) -> Iterator[TreeNode]:
        """Yield every node in pre-order (node, left subtree, right subtree)."""
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node
            if not node.is_leaf:
                stack.append(node.right)
                stack.append(node.left)

    def find(self, label: str) -> TreeNode | None:
        """Node with the given leaf name or merged cluster label, or None."""
        return find_by_label(self._root, label)

    def depth(self, label: str) -> int:
        """Depth of the labelled node; -1 if no such node exists."""
        return node_depth(self.find(label))

    def height(self) -> int:
        return node_height(self._root)

    def weighted_height(self) -> float:
        return weighted_node_height(self._root)

    def count_leaves(self) -> int:
        return self._root.leaf_count

    def all_leaf_names(self) -> list[str]:
        """Leaf names from left to right."""
        return [leaf.label for leaf in self._root.iter_leaves()]

    def least_common_ancestor(self, label_a: str, label_b: str) -> TreeNode | None:
        """Least common ancestor of two labelled nodes; None if either is missing."""
        return least_common_ancestor(self.find(label_a), self.find(label_b))

    def evolutionary_distance(self, name_a: str, name_b: str) -> float:
        """
        Sum of edge weights on the path between two labelled nodes.

        Returns inf if either label is not in the tree.
        """
        node_a = self.find(name_a)
        node_b = self.find(name_b)
        if node_a is None or node_b is None:
            logger.debug(f"No distance between {name_a!r} and {name_b!r}: label not found")
            return math.inf
        return path_distance(node_a, node_b)

    def render_indented(
        self, print_width: int | None = None, config: RenderConfig | None = None
    ) -> str:
        """Indented dump of the tree; see phylocluster.core.render.render_indented."""
        from phylocluster.core.render import render_indented

        return render_indented(self._root, print_width, config)

    def render_newick(self, config: RenderConfig | None = None) -> str:
        """Newick-like string of the tree; see phylocluster.core.render.render_newick."""
        from phylocluster.core.render import render_newick

        return render_newick(self._root, config)

    def __str__(self) -> str:
        return self.render_indented()

    def __len__(self) -> int:
        return self._root.leaf_count

"""
Binary tree nodes for agglomerative clustering.

A node is either a leaf, wrapping one named item, or an internal node
created by merging two clusters. Both edges leaving an internal node carry
the same weight. The parent link is set once, when the node is merged,
and is used only for walking upward.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from phylocluster.core.exceptions import InvalidOperationError


class TreeNode:
    """Common interface of leaf and internal nodes."""

    __slots__ = ("_parent",)

    def __init__(self) -> None:
        self._parent: InternalNode | None = None

    @property
    def label(self) -> str:
        raise NotImplementedError

    @property
    def is_leaf(self) -> bool:
        raise NotImplementedError

    @property
    def leaf_count(self) -> int:
        raise NotImplementedError

    @property
    def parent(self) -> InternalNode | None:
        """Parent node, or None for the root."""
        return self._parent

    def _attach(self, parent: InternalNode) -> None:
        if self._parent is not None:
            raise InvalidOperationError("attach", self.label)
        self._parent = parent

    @property
    def left(self) -> TreeNode:
        raise InvalidOperationError("left", self.label)

    @property
    def right(self) -> TreeNode:
        raise InvalidOperationError("right", self.label)

    @property
    def edge_weight(self) -> float:
        raise InvalidOperationError("edge_weight", self.label)

    @property
    def payload(self) -> Any:
        raise InvalidOperationError("payload", self.label)

    def iter_leaves(self) -> Iterator[LeafNode]:
        """Yield the leaves of this subtree from left to right."""
        stack: list[TreeNode] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, LeafNode):
                yield node
            else:
                stack.append(node.right)
                stack.append(node.left)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.label!r})"


class LeafNode(TreeNode):
    """A single item at the bottom of the tree."""

    __slots__ = ("_name", "_payload")

    def __init__(self, name: str, payload: Any = None) -> None:
        super().__init__()
        self._name = name
        self._payload = payload

    @property
    def label(self) -> str:
        return self._name

    @property
    def name(self) -> str:
        return self._name

    @property
    def payload(self) -> Any:
        return self._payload

    @property
    def is_leaf(self) -> bool:
        return True

    @property
    def leaf_count(self) -> int:
        return 1


class InternalNode(TreeNode):
    """
    Cluster formed by merging two child clusters.

    ``edge_weight`` is the branch length from this node to either child,
    i.e. half of the distance at which the two children were merged.
    Creating the node attaches it as the parent of both children.
    """

    __slots__ = ("_label", "_left", "_right", "_edge_weight", "_leaf_count")

    def __init__(
        self,
        label: str,
        left: TreeNode,
        right: TreeNode,
        edge_weight: float,
    ) -> None:
        super().__init__()
        self._label = label
        self._left = left
        self._right = right
        self._edge_weight = float(edge_weight)
        self._leaf_count = left.leaf_count + right.leaf_count
        left._attach(self)
        right._attach(self)

    @property
    def label(self) -> str:
        return self._label

    @property
    def left(self) -> TreeNode:
        return self._left

    @property
    def right(self) -> TreeNode:
        return self._right

    @property
    def edge_weight(self) -> float:
        return self._edge_weight

    @property
    def is_leaf(self) -> bool:
        return False

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

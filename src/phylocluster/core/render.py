"""Render a phylogenetic tree as text.

Two forms are produced, both read-only views of the tree:

- an indented dump, one line per node in reverse in-order (right subtree,
  node, left subtree), indented in proportion to each node's weighted depth;
- a Newick-like parenthetical string with branch lengths.
"""

from __future__ import annotations

import re

from phylocluster.core.exceptions import InvalidPrintWidthError
from phylocluster.core.node import TreeNode
from phylocluster.models.config import RenderConfig


# Characters that may appear in a Newick label without quoting.
_UNQUOTED_LABEL = re.compile(r"[^\s()\[\]':;,]+")


def _check_width(print_width: object) -> int:
    if isinstance(print_width, bool) or not isinstance(print_width, int) or print_width <= 0:
        raise InvalidPrintWidthError(print_width)  # type: ignore[arg-type]
    return print_width


def _indent(print_width: int, weighted_depth: float, max_depth: float) -> int:
    # A tree with zero weighted height (single leaf, all-zero distances) is flat.
    if max_depth <= 0.0:
        return 0
    return int(print_width * (weighted_depth / max_depth))


def render_indented(
    root: TreeNode,
    print_width: int | None = None,
    config: RenderConfig | None = None,
) -> str:
    """
    Render the tree as an indented dump.

    Each line is indented by ``floor(print_width * weighted_depth / weighted_height)``
    fill characters, where weighted_depth is the sum of edge weights from the
    root to the node and weighted_height is that of the whole tree. Leaves show
    their name; internal nodes show ``[NONTERM w.ww]`` with their edge weight.

    Args:
        root: Root of the tree to render.
        print_width: Indent of the deepest node. Defaults to config.print_width.
        config: Rendering options; defaults to RenderConfig().

    Returns:
        The dump, one newline-terminated line per node.

    Raises:
        InvalidPrintWidthError: If print_width is not a positive integer.
    """
    config = config or RenderConfig()
    width = _check_width(config.print_width if print_width is None else print_width)

    rows: list[tuple[TreeNode, float]] = []
    stack: list[tuple[TreeNode, float, bool]] = [(root, 0.0, False)]
    while stack:
        node, depth, expanded = stack.pop()
        if not node.is_leaf and not expanded:
            child_depth = depth + node.edge_weight
            stack.append((node.left, child_depth, False))
            stack.append((node, depth, True))
            stack.append((node.right, child_depth, False))
            continue
        rows.append((node, depth))

    # Same sums as the rows, so the deepest row is indented by exactly width.
    max_depth = max(depth for _, depth in rows)

    lines: list[str] = []
    for node, depth in rows:
        padding = config.fill_char * _indent(width, depth, max_depth)
        if node.is_leaf:
            lines.append(f"{padding}{node.label}\n")
        else:
            weight = f"{node.edge_weight:.{config.weight_decimals}f}"
            lines.append(f"{padding}[{config.internal_marker} {weight}]\n")
    return "".join(lines)


def newick_label(name: str) -> str:
    """
    Quote a leaf name for Newick output when it holds delimiter characters.

    Quoted names are wrapped in single quotes with embedded quotes doubled.

    Example:
        >>> newick_label("human")
        'human'
        >>> newick_label("y,2")
        "'y,2'"
    """
    if _UNQUOTED_LABEL.fullmatch(name):
        return name
    return "'" + name.replace("'", "''") + "'"


def render_newick(root: TreeNode, config: RenderConfig | None = None) -> str:
    """
    Render the tree as a Newick-like string.

    Internal nodes render as ``(right,left):w`` where w is the node's own edge
    weight, leaves as ``name:w`` where w is the weight of the edge from their
    parent. Names holding Newick delimiters are single-quoted. The root
    carries no trailing weight and no terminating ``;``. A single-leaf tree
    renders as the bare leaf name.
    """
    config = config or RenderConfig()
    decimals = config.newick_decimals

    def subtree(node: TreeNode) -> str:
        if node.is_leaf:
            return f"{newick_label(node.label)}:{node.parent.edge_weight:.{decimals}f}"
        return f"({subtree(node.right)},{subtree(node.left)}):{node.edge_weight:.{decimals}f}"

    if root.is_leaf:
        return newick_label(root.label)
    return f"({subtree(root.right)},{subtree(root.left)})"

"""
Core algorithms for agglomerative tree building and tree queries.

This module contains the cluster builder, the tree node types, the
query and rendering functions, and the input parsers.
"""

from phylocluster.core.builder import ClusterBuilder, build, build_from_matrix
from phylocluster.core.node import InternalNode, LeafNode, TreeNode
from phylocluster.core.parsers import DistanceMatrixParser, load_sequence_items
from phylocluster.core.tree import PhyloTree

__all__ = [
    "ClusterBuilder",
    "DistanceMatrixParser",
    "InternalNode",
    "LeafNode",
    "PhyloTree",
    "TreeNode",
    "build",
    "build_from_matrix",
    "load_sequence_items",
]

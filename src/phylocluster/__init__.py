"""
Phylocluster: UPGMA phylogenetic trees from pairwise distances.

Builds strictly binary trees over named items (typically sequences) by
agglomerative clustering, answers depth, height, least common ancestor and
evolutionary distance queries, and renders trees as an indented dump or a
Newick-like string.
"""

__version__ = "0.1.0"
__author__ = "Phylocluster Team"

from phylocluster.core.builder import ClusterBuilder, build, build_from_matrix
from phylocluster.core.tree import PhyloTree
from phylocluster.models.items import NamedItem

__all__ = [
    "ClusterBuilder",
    "NamedItem",
    "PhyloTree",
    "__version__",
    "build",
    "build_from_matrix",
]

"""
CLI commands for phylocluster.

Provides the command-line interface for building and querying trees.
"""

__all__ = ["main", "tree"]

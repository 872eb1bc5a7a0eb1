"""
Pydantic data models for phylocluster.

Provides the input item model and build/render configuration.
"""

from phylocluster.models.config import (
    BuildConfig,
    DistanceMetric,
    PhyloConfig,
    RenderConfig,
)
from phylocluster.models.items import NamedItem

__all__ = [
    "BuildConfig",
    "DistanceMetric",
    "NamedItem",
    "PhyloConfig",
    "RenderConfig",
]

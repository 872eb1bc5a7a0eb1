"""
Pydantic configuration models for phylocluster.

These models define how trees are built (cluster label separator, sequence
distance metric) and rendered (indent width and characters, number
formatting). Configuration can be loaded from YAML files or CLI arguments.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class DistanceMetric(str, Enum):
    """Distance between two aligned sequences."""

    HAMMING = "hamming"
    P_DISTANCE = "p_distance"
    JUKES_CANTOR = "jukes_cantor"


class BuildConfig(BaseModel):
    """Configuration for agglomerative tree building."""

    separator: str = Field(
        default="+",
        min_length=1,
        description=(
            "Marker joining two child labels into a merged cluster label. "
            "Item names may not contain it."
        ),
    )
    metric: DistanceMetric = Field(
        default=DistanceMetric.HAMMING,
        description="Distance metric used between sequence payloads.",
    )

    model_config = {"frozen": True}


class RenderConfig(BaseModel):
    """Configuration for the indented and Newick renderings."""

    print_width: int = Field(
        default=80,
        gt=0,
        description="Indent, in fill characters, of the deepest leaf in the indented dump.",
    )
    fill_char: str = Field(
        default=".",
        min_length=1,
        max_length=1,
        description="Character used for indentation.",
    )
    internal_marker: str = Field(
        default="NONTERM",
        description="Text shown for internal nodes in the indented dump.",
    )
    weight_decimals: int = Field(
        default=2,
        ge=0,
        description="Decimal places of edge weights in the indented dump.",
    )
    newick_decimals: int = Field(
        default=5,
        ge=0,
        description="Decimal places of branch lengths in the Newick form.",
    )

    model_config = {"frozen": True}


class PhyloConfig(BaseModel):
    """Top-level configuration combining build and render settings."""

    build: BuildConfig = Field(default_factory=BuildConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> PhyloConfig:
        """
        Load configuration from a YAML file.

        The file has optional ``build`` and ``render`` sections. Unknown
        top-level keys are ignored with a warning.

        Args:
            path: Path to YAML configuration file.

        Returns:
            PhyloConfig populated from YAML values merged with defaults.

        Raises:
            FileNotFoundError: If the YAML file does not exist.
            ValueError: If the YAML is not a mapping or holds invalid values.
        """
        import yaml

        raw = yaml.safe_load(path.read_text())
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            msg = f"YAML config must be a mapping, got {type(raw).__name__}"
            raise ValueError(msg)

        unknown = set(raw) - set(cls.model_fields)
        if unknown:
            logger.warning(f"Ignoring unknown config sections: {', '.join(sorted(unknown))}")

        sections: dict[str, Any] = {key: raw[key] or {} for key in cls.model_fields if key in raw}
        return cls(**sections)

    def to_yaml_str(self) -> str:
        """Serialize configuration to a YAML string."""
        import yaml

        data = self.model_dump(mode="json")
        return yaml.dump(data, default_flow_style=False, sort_keys=False)

    def to_yaml(self, path: Path) -> None:
        """Write configuration to a YAML file."""
        path.write_text(self.to_yaml_str())

    model_config = {"frozen": True}

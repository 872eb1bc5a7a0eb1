"""
Input item model for tree building.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class NamedItem(BaseModel):
    """A named item with an opaque payload, e.g. a sequence."""

    name: str = Field(min_length=1, description="Unique item name")
    payload: Any = Field(default=None, description="Opaque value passed to the distance function")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

"""Small Qt-independent helpers shared by the plot and view layers."""

from .geometry import Point, Vector, clamp

__all__ = ["Point", "Vector", "clamp"]

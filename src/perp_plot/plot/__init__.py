"""Qt-independent plot geometry and view control used by the perp_plot widget."""

from ..models import PlotState, Sample
from .curve import (
    NO_BOUNDS,
    Bounds,
    CurveGeometry,
    NoBounds,
    base_point,
    build_curve_geometry,
    ordered_samples,
    sample_point,
    world_bounds,
)
from .view import (
    HoverState,
    PanState,
    PointerButton,
    ViewController,
    ViewTransform,
    find_hover,
    fit_transform,
)

__all__ = [
    "PlotState",
    "Sample",
    "Bounds",
    "NoBounds",
    "NO_BOUNDS",
    "CurveGeometry",
    "base_point",
    "sample_point",
    "ordered_samples",
    "world_bounds",
    "build_curve_geometry",
    "ViewTransform",
    "fit_transform",
    "HoverState",
    "find_hover",
    "PanState",
    "PointerButton",
    "ViewController",
]

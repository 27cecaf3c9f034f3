"""Baseline sampling, world bounds and curve geometry for the perpendicular plot.

All functions here are pure: they read a :class:`~perp_plot.models.PlotState`
and never modify it. Geometry is rebuilt from scratch on every paint.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..models import PlotState, Sample
from ..utils.geometry import Point, add, length, normalized, perp_left, scale, sub

MIN_BASELINE_LENGTH = 1e-9


def base_point(start: Point, end: Point, t: float) -> Point:
    """Linear interpolation along ``start``→``end``; extrapolates outside [0, 1]."""
    return add(start, scale(sub(end, start), t))


def sample_point(
    start: Point, end: Point, t: float, value: float, value_scale: float
) -> Point:
    """Offset ``base_point(t)`` along the left normal by ``value * value_scale``.

    A baseline shorter than ``MIN_BASELINE_LENGTH`` has no usable direction, in
    which case ``start`` is returned for every sample.
    """
    line = sub(end, start)
    if length(line) < MIN_BASELINE_LENGTH:
        return start
    normal = perp_left(normalized(line))
    return add(base_point(start, end, t), scale(normal, value * value_scale))


def ordered_samples(samples: Sequence[Sample]) -> List[Sample]:
    """Samples sorted by ascending ``t``; equal ``t`` keeps input order."""
    return sorted(samples, key=lambda s: s.t)


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned box in world space."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return (
            self.min_x + self.width / 2.0,
            self.min_y + self.height / 2.0,
        )


@dataclass(frozen=True)
class NoBounds:
    """No finite geometry to frame."""


NO_BOUNDS = NoBounds()
WorldBounds = Union[Bounds, NoBounds]


def world_points(state: PlotState) -> np.ndarray:
    """Baseline endpoints followed by every sample point, as an ``(N, 2)`` array."""
    pts = [state.start, state.end]
    pts.extend(
        sample_point(state.start, state.end, s.t, s.value, state.value_scale)
        for s in state.samples
    )
    return np.asarray(pts, dtype=np.float64).reshape(-1, 2)


def world_bounds(state: PlotState) -> WorldBounds:
    """Bounding box of the baseline and curve, ignoring non-finite points."""
    pts = world_points(state)
    valid = pts[np.all(np.isfinite(pts), axis=1)]
    if valid.shape[0] == 0:
        return NO_BOUNDS
    lo = valid.min(axis=0)
    hi = valid.max(axis=0)
    return Bounds(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))


@dataclass(frozen=True)
class CurveGeometry:
    """Point sequences for one paint of the plot, in world coordinates."""

    base_points: Tuple[Point, ...]
    curve_points: Tuple[Point, ...]
    baseline: Optional[Tuple[Point, Point]]

    @property
    def has_curve(self) -> bool:
        return len(self.curve_points) >= 2

    @property
    def area_polygon(self) -> List[Point]:
        """Closed outline: baseline points forward, then curve points backward."""
        if not self.has_curve:
            return []
        return list(self.base_points) + list(reversed(self.curve_points))

    @property
    def curve_polyline(self) -> List[Point]:
        if not self.has_curve:
            return []
        return list(self.curve_points)


def build_curve_geometry(state: PlotState) -> CurveGeometry:
    """Base and curve points for ``state``, with samples stably sorted by ``t``."""
    samples = ordered_samples(state.samples)
    base_pts = tuple(base_point(state.start, state.end, s.t) for s in samples)
    curve_pts = tuple(
        sample_point(state.start, state.end, s.t, s.value, state.value_scale)
        for s in samples
    )
    baseline = None if state.start == state.end else (state.start, state.end)
    return CurveGeometry(
        base_points=base_pts, curve_points=curve_pts, baseline=baseline
    )


__all__ = [
    "MIN_BASELINE_LENGTH",
    "base_point",
    "sample_point",
    "ordered_samples",
    "Bounds",
    "NoBounds",
    "NO_BOUNDS",
    "WorldBounds",
    "world_points",
    "world_bounds",
    "CurveGeometry",
    "build_curve_geometry",
]

"""Geometry helpers used throughout the plot and view layers."""

import math
from typing import Tuple

Point = Tuple[float, float]
Vector = Tuple[float, float]


def add(p: Point, v: Vector) -> Point:
    return (p[0] + v[0], p[1] + v[1])


def sub(a: Point, b: Point) -> Vector:
    """Return the vector pointing from ``b`` to ``a``."""
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vector, k: float) -> Vector:
    return (v[0] * k, v[1] * k)


def length(v: Vector) -> float:
    return math.hypot(v[0], v[1])


def normalized(v: Vector) -> Vector:
    """Return ``v`` scaled to unit length; the zero vector is returned as-is."""
    n = length(v)
    if n == 0.0:
        return (0.0, 0.0)
    return (v[0] / n, v[1] / n)


def perp_left(v: Vector) -> Vector:
    """Rotate ``v`` by 90° counter-clockwise: ``(x, y) -> (-y, x)``."""
    return (-v[1], v[0])


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp ``value`` to the inclusive range ``[lo, hi]``."""
    return max(lo, min(hi, value))


__all__ = [
    "Point",
    "Vector",
    "add",
    "sub",
    "scale",
    "length",
    "normalized",
    "perp_left",
    "clamp",
]

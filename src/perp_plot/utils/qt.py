"""Qt helper utilities."""

from typing import Iterable

from PySide6 import QtCore, QtGui

from ..plot.view import ViewTransform
from .geometry import Point


def to_qtransform(t: ViewTransform) -> QtGui.QTransform:
    """Convert a :class:`ViewTransform` into the equivalent ``QTransform``."""
    return QtGui.QTransform(t.m11, t.m12, t.m21, t.m22, t.dx, t.dy)


def to_qpointf(p: Point) -> QtCore.QPointF:
    return QtCore.QPointF(float(p[0]), float(p[1]))


def from_qpointf(p: QtCore.QPointF) -> Point:
    return (float(p.x()), float(p.y()))


def to_qpolygonf(points: Iterable[Point]) -> QtGui.QPolygonF:
    return QtGui.QPolygonF([to_qpointf(p) for p in points])


def qcolor(spec: str, alpha: int = 255) -> QtGui.QColor:
    """Parse a colour name or ``#rrggbb`` string; invalid specs fall back to black."""
    color = QtGui.QColor(spec)
    if not color.isValid():
        color = QtGui.QColor(0, 0, 0)
    color.setAlpha(int(alpha))
    return color


__all__ = ["to_qtransform", "to_qpointf", "from_qpointf", "to_qpolygonf", "qcolor"]

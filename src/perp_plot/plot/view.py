"""World-to-screen transform and the pan/zoom/hover controller.

Nothing in this module depends on Qt. The widget in :mod:`perp_plot.app`
forwards its input events here and paints with :attr:`ViewController.transform`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

import logging
import math

import numpy as np

from ..models import InteractionParams, PlotState, Sample
from ..utils.geometry import Point
from .curve import Bounds, WorldBounds, ordered_samples, sample_point, world_bounds

logger = logging.getLogger(__name__)

MIN_WORLD_EXTENT = 1e-6
SINGULAR_DET = 1e-12


@dataclass(frozen=True)
class ViewTransform:
    """2x3 affine map, laid out like ``QTransform(m11, m12, m21, m22, dx, dy)``.

    ``x' = m11*x + m21*y + dx`` and ``y' = m12*x + m22*y + dy``.
    """

    m11: float = 1.0
    m12: float = 0.0
    m21: float = 0.0
    m22: float = 1.0
    dx: float = 0.0
    dy: float = 0.0

    @classmethod
    def identity(cls) -> "ViewTransform":
        return cls()

    @property
    def determinant(self) -> float:
        return self.m11 * self.m22 - self.m12 * self.m21

    def is_invertible(self) -> bool:
        det = self.determinant
        return math.isfinite(det) and abs(det) > SINGULAR_DET

    def map(self, p: Point) -> Point:
        x, y = p
        return (
            self.m11 * x + self.m21 * y + self.dx,
            self.m12 * x + self.m22 * y + self.dy,
        )

    def map_points(self, pts: np.ndarray) -> np.ndarray:
        """Map an ``(N, 2)`` array of points in one go."""
        pts = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
        linear = np.array([[self.m11, self.m12], [self.m21, self.m22]])
        return pts @ linear + np.array([self.dx, self.dy])

    def inverted(self) -> Optional["ViewTransform"]:
        if not self.is_invertible():
            return None
        det = self.determinant
        i11 = self.m22 / det
        i12 = -self.m12 / det
        i21 = -self.m21 / det
        i22 = self.m11 / det
        return ViewTransform(
            i11,
            i12,
            i21,
            i22,
            -(self.dx * i11 + self.dy * i21),
            -(self.dx * i12 + self.dy * i22),
        )

    def then(self, other: "ViewTransform") -> "ViewTransform":
        """Compose: apply ``self`` first, then ``other``."""
        return ViewTransform(
            self.m11 * other.m11 + self.m12 * other.m21,
            self.m11 * other.m12 + self.m12 * other.m22,
            self.m21 * other.m11 + self.m22 * other.m21,
            self.m21 * other.m12 + self.m22 * other.m22,
            self.dx * other.m11 + self.dy * other.m21 + other.dx,
            self.dx * other.m12 + self.dy * other.m22 + other.dy,
        )

    def translated(self, dx: float, dy: float) -> "ViewTransform":
        """Shift the output by ``(dx, dy)`` screen units."""
        return ViewTransform(
            self.m11, self.m12, self.m21, self.m22, self.dx + dx, self.dy + dy
        )

    def scaled_about(self, world_point: Point, factor: float) -> "ViewTransform":
        """Uniform zoom by ``factor`` that leaves ``world_point`` where it maps now."""
        wx, wy = world_point
        about = ViewTransform(
            factor, 0.0, 0.0, factor, wx * (1.0 - factor), wy * (1.0 - factor)
        )
        return about.then(self)


def fit_transform(
    bounds: WorldBounds, width: float, height: float, margin_frac: float = 0.1
) -> ViewTransform:
    """Uniform scale, Y flipped, with ``bounds`` centred in the viewport.

    Falls back to identity for an empty viewport or missing bounds.
    """
    if width <= 0 or height <= 0 or not isinstance(bounds, Bounds):
        return ViewTransform.identity()

    world_w = bounds.width if bounds.width >= MIN_WORLD_EXTENT else 1.0
    world_h = bounds.height if bounds.height >= MIN_WORLD_EXTENT else 1.0
    usable_w = width * (1.0 - 2.0 * margin_frac)
    usable_h = height * (1.0 - 2.0 * margin_frac)
    s = min(usable_w / world_w, usable_h / world_h)

    cx, cy = bounds.center
    # -s on Y puts world "up" at the top of the screen, hence +cy below
    return ViewTransform(s, 0.0, 0.0, -s, width / 2.0 - cx * s, height / 2.0 + cy * s)


# ------------------------------- Hover ----------------------------------------


@dataclass(frozen=True)
class HoverState:
    """The sample under the cursor and where it sits on screen."""

    index: int  # position in t-order
    t: float
    value: float
    screen_point: Point

    def tooltip_text(self) -> str:
        return f"t = {self.t:.3f}\nvalue = {self.value:.3f}"


def find_hover(
    state: PlotState,
    transform: ViewTransform,
    cursor: Point,
    radius_px: float,
) -> Optional[HoverState]:
    """Nearest sample within ``radius_px`` of ``cursor`` in screen space."""
    samples: Sequence[Sample] = ordered_samples(state.samples)
    if not samples:
        return None
    world = np.array(
        [
            sample_point(state.start, state.end, s.t, s.value, state.value_scale)
            for s in samples
        ],
        dtype=np.float64,
    )
    screen = transform.map_points(world)
    d2 = np.sum((screen - np.asarray(cursor, dtype=np.float64)) ** 2, axis=1)
    d2 = np.where(np.isfinite(d2), d2, np.inf)
    idx = int(np.argmin(d2))
    if not d2[idx] <= radius_px * radius_px:
        return None
    hit = samples[idx]
    return HoverState(
        index=idx,
        t=hit.t,
        value=hit.value,
        screen_point=(float(screen[idx, 0]), float(screen[idx, 1])),
    )


# ------------------------------ Controller ------------------------------------


class PanState(Enum):
    IDLE = "idle"
    PANNING = "panning"


class PointerButton(Enum):
    PRIMARY = "primary"
    MIDDLE = "middle"
    OTHER = "other"


class ViewController:
    """Owns the view transform and hover state; driven by pointer events.

    ``request_redraw`` schedules a repaint on the host and may be called any
    number of times per event.
    """

    def __init__(
        self,
        state: Optional[PlotState] = None,
        params: Optional[InteractionParams] = None,
        request_redraw: Optional[Callable[[], None]] = None,
    ) -> None:
        self.state = state if state is not None else PlotState()
        self.params = params if params is not None else InteractionParams()
        self._request_redraw = request_redraw or (lambda: None)

        self._transform = ViewTransform.identity()
        self._pan_state = PanState.IDLE
        self._last_pos: Point = (0.0, 0.0)
        self._hover: Optional[HoverState] = None
        self._width = 0.0
        self._height = 0.0
        self._laid_out = False

    # ----------------------------- Properties ---------------------------------

    @property
    def transform(self) -> ViewTransform:
        return self._transform

    @property
    def pan_state(self) -> PanState:
        return self._pan_state

    @property
    def hover(self) -> Optional[HoverState]:
        return self._hover

    @property
    def viewport_size(self) -> tuple[float, float]:
        return (self._width, self._height)

    def set_viewport(self, width: float, height: float) -> None:
        self._width = float(width)
        self._height = float(height)

    def set_state(self, state: PlotState) -> None:
        self.state = state
        self._hover = None
        self._request_redraw()

    def set_show_area(self, enabled: bool) -> None:
        self.params.show_area = bool(enabled)
        self._request_redraw()

    def set_show_hover(self, enabled: bool) -> None:
        self.params.show_hover = bool(enabled)
        if not enabled:
            self._set_hover(None)

    def _set_transform(self, transform: ViewTransform) -> None:
        self._transform = transform
        self._request_redraw()

    # ----------------------------- Zoom to fit --------------------------------

    def on_first_layout(self) -> None:
        """Fit once when the host first has a size."""
        if self._laid_out:
            return
        self._laid_out = True
        self.zoom_to_fit()

    def zoom_to_fit(self) -> None:
        if self._width <= 0 or self._height <= 0:
            logger.debug(
                "Viewport %sx%s is empty; using identity", self._width, self._height
            )
            self._transform = ViewTransform.identity()
            return

        bounds = world_bounds(self.state)
        if not isinstance(bounds, Bounds):
            logger.debug("No finite geometry to fit; using identity")
            self._set_transform(ViewTransform.identity())
            return

        fitted = fit_transform(
            bounds, self._width, self._height, self.params.fit_margin_frac
        )
        logger.debug("Zoom to fit %s -> scale %.4g", bounds, fitted.m11)
        self._set_transform(fitted)

    # ----------------------------- Interaction --------------------------------

    def wheel(self, pos: Point, delta: float) -> bool:
        """Zoom about ``pos``; returns False when nothing changed."""
        if delta == 0:
            return False
        factor = self.params.zoom_step if delta > 0 else 1.0 / self.params.zoom_step

        inverse = self._transform.inverted()
        if inverse is None:
            logger.debug("View transform is singular; ignoring wheel zoom")
            return False
        world = inverse.map(pos)
        self._set_transform(self._transform.scaled_about(world, factor))
        return True

    def press(self, button: PointerButton, pos: Point, click_count: int = 1) -> bool:
        """Handle a button press; returns True when pointer capture should begin."""
        if button is PointerButton.MIDDLE and click_count == 2:
            self.zoom_to_fit()
            return False

        if button is PointerButton.PRIMARY:
            self._pan_state = PanState.PANNING
            self._last_pos = pos
            logger.debug("Pan started at %s", pos)
            return True
        return False

    def move(self, pos: Point, primary_held: bool) -> None:
        if self._pan_state is PanState.PANNING and primary_held:
            ddx = pos[0] - self._last_pos[0]
            ddy = pos[1] - self._last_pos[1]
            self._last_pos = pos
            self._set_transform(self._transform.translated(ddx, ddy))

        if self.params.show_hover:
            self._set_hover(
                find_hover(
                    self.state, self._transform, pos, self.params.hover_radius_px
                )
            )

    def release(self, button: PointerButton, pos: Optional[Point] = None) -> bool:
        """Handle a button release; returns True when pointer capture should end."""
        if button is not PointerButton.PRIMARY:
            return False
        was_panning = self._pan_state is PanState.PANNING
        self._pan_state = PanState.IDLE
        if was_panning:
            logger.debug("Pan finished at %s", pos)
        return True

    def capture_lost(self) -> None:
        if self._pan_state is PanState.PANNING:
            logger.debug("Pointer capture lost while panning")
        self._pan_state = PanState.IDLE

    def leave(self) -> None:
        self._set_hover(None)

    def _set_hover(self, hover: Optional[HoverState]) -> None:
        if hover == self._hover:
            return
        self._hover = hover
        self._request_redraw()


__all__ = [
    "ViewTransform",
    "fit_transform",
    "HoverState",
    "find_hover",
    "PanState",
    "PointerButton",
    "ViewController",
]

"""Dataclasses describing plot data and configuration for perp_plot."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Tuple, Union

import json

from .utils.geometry import Point, clamp


@dataclass(frozen=True)
class Sample:
    """A value offset perpendicular to the baseline at parameter ``t``."""

    t: float  # position along the baseline, 0 = start, 1 = end
    value: float  # offset before ``PlotState.value_scale`` is applied

    @staticmethod
    def coerce(item: Union["Sample", Tuple[float, float]]) -> "Sample":
        if isinstance(item, Sample):
            return item
        try:
            t, value = item
            return Sample(float(t), float(value))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Expected a (t, value) pair, got {item!r}") from exc


SampleLike = Union[Sample, Tuple[float, float]]


def _coerce_point(p: Iterable[float]) -> Point:
    x, y = p
    return (float(x), float(y))


@dataclass
class PlotState:
    """Baseline, samples and value scale rendered by the plot widget."""

    start: Point = (0.0, 0.0)
    end: Point = (0.0, 0.0)
    samples: List[Sample] = field(default_factory=list)
    value_scale: float = 1.0

    def __post_init__(self) -> None:
        self.start = _coerce_point(self.start)
        self.end = _coerce_point(self.end)
        self.samples = [Sample.coerce(s) for s in self.samples]
        self.value_scale = float(self.value_scale)


EXAMPLE_SAMPLES: Tuple[Tuple[float, float], ...] = (
    (0.0, 1.0),
    (0.1, 0.2),
    (0.2, -0.2),
    (0.3, 0.5),
    (0.4, 0.0),
    (0.5, -0.5),
    (0.6, -1.0),
    (0.7, -0.3),
    (0.8, 0.4),
    (0.9, 0.8),
    (1.0, 0.0),
)


def example_plot_state() -> PlotState:
    """The demo plot: a steep baseline with eleven samples."""
    return PlotState(
        start=(0.0, 0.0),
        end=(1.0, 20.0),
        samples=list(EXAMPLE_SAMPLES),  # type: ignore[arg-type]
        value_scale=0.4,
    )


# ------------------------------ Configuration ---------------------------------


@dataclass
class PlotStyle:
    """Colours and pen widths used when painting the plot."""

    background: str = "#ffffff"
    baseline_color: str = "#808080"
    curve_color: str = "#0000ff"
    area_color: str = "#0000ff"
    area_alpha: int = 60
    baseline_width_px: float = 1.0
    curve_width_px: float = 2.0
    hover_color: str = "#ff8c00"
    hover_radius_px: float = 5.0


@dataclass
class InteractionParams:
    """Pan/zoom/hover tuning and the optional rendering capabilities."""

    zoom_step: float = 1.1
    fit_margin_frac: float = 0.1
    hover_radius_px: float = 10.0
    show_area: bool = True
    show_hover: bool = True


@dataclass
class AppConfig:
    """Persisted configuration for the application."""

    style: PlotStyle = field(default_factory=PlotStyle)
    interaction: InteractionParams = field(default_factory=InteractionParams)

    def to_json(self) -> str:
        return json.dumps(asdict(self), indent=2)

    @staticmethod
    def from_json(text: str) -> "AppConfig":
        data: Dict[str, Any] = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Config root must be a JSON object")
        s = data.get("style", {})
        i = data.get("interaction", {})
        if not isinstance(s, dict) or not isinstance(i, dict):
            raise ValueError("Config sections must be JSON objects")
        try:
            return AppConfig._from_sections(s, i)
        except (OverflowError, TypeError) as exc:  # int(Infinity), float([])
            raise ValueError(f"Bad config value: {exc}") from exc

    @staticmethod
    def _from_sections(s: Dict[str, Any], i: Dict[str, Any]) -> "AppConfig":
        d_style = PlotStyle()
        d_inter = InteractionParams()
        return AppConfig(
            style=PlotStyle(
                background=str(s.get("background", d_style.background)),
                baseline_color=str(s.get("baseline_color", d_style.baseline_color)),
                curve_color=str(s.get("curve_color", d_style.curve_color)),
                area_color=str(s.get("area_color", d_style.area_color)),
                area_alpha=int(
                    clamp(int(s.get("area_alpha", d_style.area_alpha)), 0, 255)
                ),
                baseline_width_px=max(
                    0.0, float(s.get("baseline_width_px", d_style.baseline_width_px))
                ),
                curve_width_px=max(
                    0.0, float(s.get("curve_width_px", d_style.curve_width_px))
                ),
                hover_color=str(s.get("hover_color", d_style.hover_color)),
                hover_radius_px=max(
                    0.0, float(s.get("hover_radius_px", d_style.hover_radius_px))
                ),
            ),
            interaction=InteractionParams(
                zoom_step=max(1.01, float(i.get("zoom_step", d_inter.zoom_step))),
                fit_margin_frac=clamp(
                    float(i.get("fit_margin_frac", d_inter.fit_margin_frac)),
                    0.0,
                    0.49,
                ),
                hover_radius_px=max(
                    0.0, float(i.get("hover_radius_px", d_inter.hover_radius_px))
                ),
                show_area=bool(i.get("show_area", d_inter.show_area)),
                show_hover=bool(i.get("show_hover", d_inter.show_hover)),
            ),
        )


__all__ = [
    "Sample",
    "SampleLike",
    "PlotState",
    "EXAMPLE_SAMPLES",
    "example_plot_state",
    "PlotStyle",
    "InteractionParams",
    "AppConfig",
]

"""Smoke tests for the Qt widget, window and config I/O (headless)."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

QtCore = pytest.importorskip("PySide6.QtCore")
QtGui = pytest.importorskip("PySide6.QtGui")

from perp_plot.app import (  # noqa: E402
    PerpPlotWidget,
    PlotWindow,
    load_config,
    save_config,
)
from perp_plot.models import AppConfig, PlotState, example_plot_state  # noqa: E402
from perp_plot.plot import (  # noqa: E402
    PanState,
    ViewTransform,
    fit_transform,
    world_bounds,
)
from perp_plot.utils.qt import to_qtransform  # noqa: E402


def _mouse_event(kind, pos, button, buttons):
    local = QtCore.QPointF(*pos)
    return QtGui.QMouseEvent(
        kind, local, local, button, buttons, QtCore.Qt.KeyboardModifier.NoModifier
    )


@pytest.fixture
def widget(qapp):
    w = PerpPlotWidget(example_plot_state())
    w.resize(400, 400)
    w.show()
    qapp.processEvents()
    yield w
    w.close()


def test_first_layout_fits_content(widget) -> None:
    expected = fit_transform(
        world_bounds(widget.plot_state), widget.width(), widget.height()
    )
    assert widget.controller.transform == expected
    assert widget.controller.transform != ViewTransform.identity()


def test_to_qtransform_maps_like_view_transform() -> None:
    t = ViewTransform(1.5, 0.25, -0.5, 2.0, 40.0, -12.0)
    mapped = to_qtransform(t).map(QtCore.QPointF(3.0, 4.0))
    assert (mapped.x(), mapped.y()) == pytest.approx(t.map((3.0, 4.0)))


def test_widget_renders_with_and_without_area(widget) -> None:
    assert not widget.grab().isNull()
    widget.set_show_area(False)
    assert widget.controller.params.show_area is False
    assert not widget.grab().isNull()


def test_widget_renders_degenerate_state(widget) -> None:
    widget.set_plot_state(PlotState(start=(1.0, 1.0), end=(1.0, 1.0)), fit=True)
    assert widget.controller.transform.m11 > 0
    assert not widget.grab().isNull()


def test_set_plot_state_with_fit_reframes(widget) -> None:
    state = PlotState(start=(0.0, 0.0), end=(10.0, 0.0), samples=[(0, 1), (1, 2)])
    widget.set_plot_state(state, fit=True)
    assert widget.plot_state is state
    assert widget.controller.transform == fit_transform(
        world_bounds(state), widget.width(), widget.height()
    )


def test_mouse_pan_and_hover_signal(widget) -> None:
    seen = []
    widget.hoverChanged.connect(seen.append)
    before = widget.controller.transform
    left = QtCore.Qt.MouseButton.LeftButton
    none = QtCore.Qt.MouseButton.NoButton

    widget.mousePressEvent(
        _mouse_event(QtCore.QEvent.Type.MouseButtonPress, (100, 100), left, left)
    )
    assert widget.controller.pan_state is PanState.PANNING
    widget.mouseMoveEvent(
        _mouse_event(QtCore.QEvent.Type.MouseMove, (120, 90), none, left)
    )
    widget.mouseReleaseEvent(
        _mouse_event(QtCore.QEvent.Type.MouseButtonRelease, (120, 90), left, none)
    )
    assert widget.controller.pan_state is PanState.IDLE
    after = widget.controller.transform
    assert after.dx - before.dx == pytest.approx(20.0)
    assert after.dy - before.dy == pytest.approx(-10.0)

    # t=0.4 has value 0, so its sample sits on the baseline
    sx, sy = after.map((0.4, 8.0))
    widget.mouseMoveEvent(
        _mouse_event(QtCore.QEvent.Type.MouseMove, (sx, sy), none, none)
    )
    assert widget.controller.hover is not None
    assert seen and seen[-1] is widget.controller.hover
    assert not widget.grab().isNull()


def test_move_without_button_ends_unseen_pan(widget) -> None:
    before = widget.controller.transform
    left = QtCore.Qt.MouseButton.LeftButton
    none = QtCore.Qt.MouseButton.NoButton

    widget.mousePressEvent(
        _mouse_event(QtCore.QEvent.Type.MouseButtonPress, (100, 100), left, left)
    )
    assert widget.controller.pan_state is PanState.PANNING
    # The release went to another window, so the next move has no buttons held
    widget.mouseMoveEvent(
        _mouse_event(QtCore.QEvent.Type.MouseMove, (150, 160), none, none)
    )
    assert widget.controller.pan_state is PanState.IDLE
    assert widget.controller.transform == before

    widget.mouseMoveEvent(
        _mouse_event(QtCore.QEvent.Type.MouseMove, (170, 180), none, left)
    )
    assert widget.controller.transform == before


def test_focus_out_ends_pan(widget) -> None:
    left = QtCore.Qt.MouseButton.LeftButton
    widget.mousePressEvent(
        _mouse_event(QtCore.QEvent.Type.MouseButtonPress, (100, 100), left, left)
    )
    assert widget.controller.pan_state is PanState.PANNING
    widget.focusOutEvent(QtGui.QFocusEvent(QtCore.QEvent.Type.FocusOut))
    assert widget.controller.pan_state is PanState.IDLE


def test_window_toggles_persist_config(qapp, tmp_path: Path) -> None:
    path = tmp_path / "config.json"
    cfg = AppConfig()
    window = PlotWindow(cfg, example_plot_state(), "1.2.3", config_path=path)
    try:
        assert "1.2.3" in window.windowTitle()
        window.area_action.setChecked(False)
        window.hover_action.setChecked(False)
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["interaction"]["show_area"] is False
        assert saved["interaction"]["show_hover"] is False
        assert window.plot.controller.params.show_hover is False
    finally:
        window.close()


def test_load_config_defaults_and_warnings(tmp_path: Path, caplog) -> None:
    assert load_config(tmp_path / "missing.json") == AppConfig()

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="perp_plot.app"):
        assert load_config(broken) == AppConfig()
    assert "Ignoring unreadable config" in caplog.text


def test_save_config_round_trip_and_failure(tmp_path: Path, caplog) -> None:
    path = tmp_path / "cfg.json"
    cfg = AppConfig()
    cfg.style.area_alpha = 99
    save_config(cfg, path)
    assert load_config(path) == cfg

    with caplog.at_level(logging.WARNING, logger="perp_plot.app"):
        save_config(cfg, tmp_path)
    assert "Could not save config" in caplog.text


@pytest.mark.parametrize(
    "text",
    [
        '{"style": null}',
        '{"interaction": 5}',
        '{"style": {"area_alpha": Infinity}}',
        '{"interaction": {"zoom_step": [1]}}',
    ],
)
def test_load_config_falls_back_on_bad_sections(
    tmp_path: Path, caplog, text: str
) -> None:
    path = tmp_path / "config.json"
    path.write_text(text, encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="perp_plot.app"):
        assert load_config(path) == AppConfig()
    assert "Ignoring unreadable config" in caplog.text

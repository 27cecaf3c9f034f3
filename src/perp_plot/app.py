"""Qt application entry point for the perp_plot viewer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import logging
import sys

from PySide6 import QtCore, QtGui, QtWidgets

from . import __version__ as APP_VERSION
from .models import AppConfig, PlotState, example_plot_state
from .plot import (
    HoverState,
    PanState,
    PointerButton,
    ViewController,
    build_curve_geometry,
)
from .utils.qt import from_qpointf, qcolor, to_qpointf, to_qpolygonf, to_qtransform

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".perp_plot_config.json"
STATUS_HINT = "Drag to pan, scroll to zoom, double middle-click to fit."


# ------------------------------- Plot Widget ----------------------------------


def _pointer_button(button: QtCore.Qt.MouseButton) -> PointerButton:
    if button == QtCore.Qt.MouseButton.LeftButton:
        return PointerButton.PRIMARY
    if button == QtCore.Qt.MouseButton.MiddleButton:
        return PointerButton.MIDDLE
    return PointerButton.OTHER


class PerpPlotWidget(QtWidgets.QWidget):
    """Draws a baseline and a curve offset perpendicular to it, with pan/zoom."""

    hoverChanged = QtCore.Signal(object)  # HoverState | None

    def __init__(
        self,
        state: Optional[PlotState] = None,
        cfg: Optional[AppConfig] = None,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._cfg = cfg if cfg is not None else AppConfig()
        self._controller = ViewController(state, self._cfg.interaction, self.update)
        self._shown_hover: Optional[HoverState] = None

        self.setMouseTracking(True)
        self.setFocusPolicy(QtCore.Qt.FocusPolicy.StrongFocus)
        self.setMinimumSize(160, 160)
        self.setSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding,
        )

    # ----------------------------- Properties ---------------------------------

    @property
    def controller(self) -> ViewController:
        return self._controller

    @property
    def plot_state(self) -> PlotState:
        return self._controller.state

    def set_plot_state(self, state: PlotState, fit: bool = False) -> None:
        self._controller.set_state(state)
        self._sync_hover(QtGui.QCursor.pos())
        if fit:
            self.zoom_to_fit()

    def zoom_to_fit(self) -> None:
        self._controller.set_viewport(self.width(), self.height())
        self._controller.zoom_to_fit()

    def set_show_area(self, enabled: bool) -> None:
        self._controller.set_show_area(enabled)

    def set_show_hover(self, enabled: bool) -> None:
        self._controller.set_show_hover(enabled)
        self._sync_hover(QtGui.QCursor.pos())

    # ----------------------------- Layout -------------------------------------

    def resizeEvent(self, e: QtGui.QResizeEvent) -> None:
        size = e.size()
        self._controller.set_viewport(size.width(), size.height())
        if size.width() > 0 and size.height() > 0:
            self._controller.on_first_layout()
        super().resizeEvent(e)

    # ----------------------------- Interaction --------------------------------

    def wheelEvent(self, e: QtGui.QWheelEvent) -> None:
        self._controller.wheel(from_qpointf(e.position()), e.angleDelta().y())
        e.accept()

    def mousePressEvent(self, e: QtGui.QMouseEvent) -> None:
        self._press(e, click_count=1)

    def mouseDoubleClickEvent(self, e: QtGui.QMouseEvent) -> None:
        self._press(e, click_count=2)

    def _press(self, e: QtGui.QMouseEvent, click_count: int) -> None:
        capture = self._controller.press(
            _pointer_button(e.button()), from_qpointf(e.position()), click_count
        )
        if capture:
            self.grabMouse()
        e.accept()

    def mouseMoveEvent(self, e: QtGui.QMouseEvent) -> None:
        held = bool(e.buttons() & QtCore.Qt.MouseButton.LeftButton)
        if not held:
            # Release happened where we never saw it
            self._end_capture()
        self._controller.move(from_qpointf(e.position()), held)
        self._sync_hover(e.globalPosition().toPoint())

    def mouseReleaseEvent(self, e: QtGui.QMouseEvent) -> None:
        pos = from_qpointf(e.position())
        if self._controller.release(_pointer_button(e.button()), pos):
            self.releaseMouse()
        e.accept()

    def leaveEvent(self, e: QtCore.QEvent) -> None:
        self._controller.leave()
        self._sync_hover(QtGui.QCursor.pos())
        super().leaveEvent(e)

    def focusOutEvent(self, e: QtGui.QFocusEvent) -> None:
        self._end_capture()
        super().focusOutEvent(e)

    def _end_capture(self) -> None:
        if self._controller.pan_state is PanState.PANNING:
            self._controller.capture_lost()
            self.releaseMouse()

    def _sync_hover(self, global_pos: QtCore.QPoint) -> None:
        hover = self._controller.hover
        if hover == self._shown_hover:
            return
        self._shown_hover = hover
        if hover is None:
            QtWidgets.QToolTip.hideText()
        else:
            QtWidgets.QToolTip.showText(global_pos, hover.tooltip_text(), self)
        self.hoverChanged.emit(hover)

    # ----------------------------- Painting -----------------------------------

    def paintEvent(self, e: QtGui.QPaintEvent) -> None:
        style = self._cfg.style
        painter = QtGui.QPainter(self)
        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        painter.fillRect(self.rect(), qcolor(style.background))

        geom = build_curve_geometry(self._controller.state)

        painter.save()
        painter.setTransform(to_qtransform(self._controller.transform))

        if self._controller.params.show_area and geom.has_curve:
            painter.setPen(QtCore.Qt.PenStyle.NoPen)
            painter.setBrush(QtGui.QBrush(qcolor(style.area_color, style.area_alpha)))
            painter.drawPolygon(to_qpolygonf(geom.area_polygon))

        # Cosmetic pens keep a constant pixel width at any zoom
        if geom.baseline is not None:
            base_pen = QtGui.QPen(qcolor(style.baseline_color))
            base_pen.setWidthF(style.baseline_width_px)
            base_pen.setCosmetic(True)
            painter.setPen(base_pen)
            start, end = geom.baseline
            painter.drawLine(to_qpointf(start), to_qpointf(end))

        if geom.has_curve:
            curve_pen = QtGui.QPen(qcolor(style.curve_color))
            curve_pen.setWidthF(style.curve_width_px)
            curve_pen.setCosmetic(True)
            painter.setPen(curve_pen)
            painter.setBrush(QtCore.Qt.BrushStyle.NoBrush)
            painter.drawPolyline(to_qpolygonf(geom.curve_polyline))

        painter.restore()

        # Hover marker is drawn in screen space
        hover = self._controller.hover
        if hover is not None:
            r = style.hover_radius_px
            painter.setPen(QtGui.QPen(qcolor(style.hover_color), 1.5))
            painter.setBrush(QtGui.QBrush(qcolor(style.hover_color, 120)))
            painter.drawEllipse(to_qpointf(hover.screen_point), r, r)


# ------------------------------- Main Window ----------------------------------


class PlotWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        cfg: AppConfig,
        state: PlotState,
        app_version: str = "",
        config_path: Optional[Path] = None,
    ) -> None:
        super().__init__(None)
        self.cfg = cfg
        self._config_path = config_path
        self._app_version = app_version or "unknown"
        self.setWindowTitle(f"perp_plot {self._app_version} — Perpendicular Plot")

        self.plot = PerpPlotWidget(state, cfg, self)
        self.setCentralWidget(self.plot)

        toolbar = self.addToolBar("View")
        toolbar.setMovable(False)

        self.fit_action = QtGui.QAction("Zoom to Fit", self)
        self.fit_action.setToolTip("Frame the baseline and curve (double middle-click)")
        self.fit_action.triggered.connect(self.plot.zoom_to_fit)
        toolbar.addAction(self.fit_action)

        self.area_action = QtGui.QAction("Fill Area", self)
        self.area_action.setCheckable(True)
        self.area_action.setChecked(cfg.interaction.show_area)
        self.area_action.toggled.connect(self._on_area_toggle)
        toolbar.addAction(self.area_action)

        self.hover_action = QtGui.QAction("Hover", self)
        self.hover_action.setCheckable(True)
        self.hover_action.setChecked(cfg.interaction.show_hover)
        self.hover_action.toggled.connect(self._on_hover_toggle)
        toolbar.addAction(self.hover_action)

        self.plot.hoverChanged.connect(self._on_hover_changed)
        self.statusBar().showMessage(STATUS_HINT)
        self.resize(640, 640)

    # ---------------------------- Event Handlers ------------------------------

    def _on_area_toggle(self, enabled: bool) -> None:
        self.plot.set_show_area(enabled)
        save_config(self.cfg, self._config_path)

    def _on_hover_toggle(self, enabled: bool) -> None:
        self.plot.set_show_hover(enabled)
        save_config(self.cfg, self._config_path)

    def _on_hover_changed(self, hover: Optional[HoverState]) -> None:
        if hover is None:
            self.statusBar().showMessage(STATUS_HINT)
        else:
            self.statusBar().showMessage(
                f"Sample {hover.index}: t = {hover.t:.3f}, value = {hover.value:.3f}"
            )


# ---------------------------------- Config ------------------------------------


def config_path() -> Path:
    return Path.home() / CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> AppConfig:
    p = path if path is not None else config_path()
    if not p.exists():
        return AppConfig()
    try:
        return AppConfig.from_json(p.read_text(encoding="utf-8"))
    except (OSError, ValueError, TypeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", p, exc)
        return AppConfig()


def save_config(cfg: AppConfig, path: Optional[Path] = None) -> None:
    p = path if path is not None else config_path()
    try:
        p.write_text(cfg.to_json(), encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not save config to %s: %s", p, exc)


# ---------------------------------- Main --------------------------------------


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName("perp_plot")
    app.setApplicationVersion(APP_VERSION)

    cfg = load_config()
    window = PlotWindow(cfg, example_plot_state(), app.applicationVersion())
    window.show()
    ret = app.exec()

    save_config(cfg)
    sys.exit(ret)


if __name__ == "__main__":
    main()

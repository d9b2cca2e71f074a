"""Interactive field canvas driving the path editor once per frame."""

from __future__ import annotations

import logging
import time
from typing import Optional, Tuple

import pyqtgraph as pg
from PySide6.QtCore import QPointF, Qt, QTimer, Signal

from ...core.editor import PathEditor, PointerInput
from ...core.render import SceneBuilder
from .scene_painter import ScenePainter, field_outline

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 16
CLICK_SLOP_PX = 3.0


class PathCanvas(pg.PlotWidget):
    """Plot widget showing the field, forwarding pointer state to a :class:`PathEditor`.

    The canvas owns no path state. It converts Qt mouse events from scene to
    field coordinates, collects the button edges between frames and hands them
    to :meth:`PathEditor.tick` from a timer, then paints the resulting scene.

    Signals:
        programChanged: Emitted with the new program text after any path change
    """

    programChanged = Signal(str)

    def __init__(self, editor: PathEditor, parent=None):
        super().__init__(parent=parent)
        self.editor = editor
        self.builder = SceneBuilder(editor.config)

        plot_item = self.getPlotItem()
        plot_item.invertY(True)
        plot_item.setAspectLocked(True, ratio=1.0)
        plot_item.hideButtons()
        plot_item.setMenuEnabled(False)
        plot_item.vb.setMouseEnabled(x=False, y=False)
        self.setMouseTracking(True)

        self._outline = plot_item.plot(pen=pg.mkPen((120, 120, 120), width=1))
        self.painter = ScenePainter(plot_item)
        self.fit_field()

        self._position: Optional[Tuple[float, float]] = None
        self._press_position: Optional[Tuple[float, float]] = None
        self._press_screen: Optional[QPointF] = None
        self._pressed = False
        self._released = False
        self._clicked = False
        self._held = False

        editor.add_listener(self.programChanged.emit)

        self._timer = QTimer(self)
        self._timer.setInterval(FRAME_INTERVAL_MS)
        self._timer.timeout.connect(self._on_frame)
        self._timer.start()

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------
    def fit_field(self) -> None:
        """Frame the whole field and redraw its outline."""
        width, height = self.editor.field_size
        outline = field_outline(width, height)
        self._outline.setData(outline[:, 0], outline[:, 1])
        self.getPlotItem().vb.setRange(xRange=(0, width), yRange=(0, height), padding=0.02)

    def _to_field(self, event) -> Optional[Tuple[float, float]]:
        vb = self.getPlotItem().vb
        scene_pos = self.mapToScene(event.position().toPoint())
        data_pos = vb.mapSceneToView(scene_pos)
        return (float(data_pos.x()), float(data_pos.y()))

    # ------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------
    def mousePressEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._position = self._to_field(event)
            self._press_position = self._position
            self._press_screen = event.position()
            self._pressed = True
            self._held = True
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        self._position = self._to_field(event)
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.MouseButton.LeftButton:
            self._position = self._to_field(event)
            self._released = True
            self._held = False
            if self._press_screen is not None:
                moved = event.position() - self._press_screen
                self._clicked = abs(moved.x()) <= CLICK_SLOP_PX and abs(moved.y()) <= CLICK_SLOP_PX
            self._press_screen = None
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        if not self._held:
            self._position = None
        super().leaveEvent(event)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------
    def _on_frame(self) -> None:
        pointer = PointerInput(
            position=self._position,
            press_position=self._press_position,
            pressed=self._pressed,
            released=self._released,
            clicked=self._clicked,
            held=self._held,
        )
        self._pressed = self._released = self._clicked = False
        self._press_position = None

        now = time.monotonic()
        result = self.editor.tick(pointer, now)
        scene = self.builder.build(
            self.editor.path, result, self.editor.mode, pointer.position, now, self.editor.ratio
        )
        self.painter.paint(scene)

    def stop(self) -> None:
        self._timer.stop()

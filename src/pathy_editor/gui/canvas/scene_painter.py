"""Draws render primitives onto a pyqtgraph plot item."""

from __future__ import annotations

from typing import List

import numpy as np
import pyqtgraph as pg

from ...core.render import CURVE_COLOR, RenderScene


class ScenePainter:
    """Maps a :class:`RenderScene` to persistent pyqtgraph items.

    Items are created once and updated in place every frame:
    - one curve item for the sampled path
    - a pool of line items for the control lines
    - one scatter item holding every handle circle

    Attributes:
        plot_item: PyQtGraph plot item the items live on
    """

    def __init__(self, plot_item: pg.PlotItem):
        """Initialize the painter.

        Args:
            plot_item: The PyQtGraph plot item to draw on
        """
        self.plot_item = plot_item
        self._curve = pg.PlotDataItem(pen=pg.mkPen(CURVE_COLOR, width=2))
        self._curve.setZValue(1)
        self.plot_item.addItem(self._curve)
        self._lines: List[pg.PlotDataItem] = []
        self._circles = pg.ScatterPlotItem(pxMode=True)
        self._circles.setZValue(3)
        self.plot_item.addItem(self._circles)

    def paint(self, scene: RenderScene) -> None:
        """Update every item to match ``scene``.

        Args:
            scene: Primitives produced by the scene builder for this frame
        """
        if len(scene.curve_points):
            self._curve.setData(scene.curve_points[:, 0], scene.curve_points[:, 1])
        else:
            self._curve.setData([], [])

        self._ensure_line_pool(len(scene.lines))
        for item, line in zip(self._lines, scene.lines):
            item.setPen(pg.mkPen(line.color, width=line.width))
            item.setData([line.start[0], line.end[0]], [line.start[1], line.end[1]])
            item.setVisible(True)
        for item in self._lines[len(scene.lines):]:
            item.setVisible(False)

        spots = []
        for circle in scene.circles:
            spots.append(
                {
                    "pos": circle.center,
                    "size": 2.0 * circle.radius,
                    "pen": pg.mkPen(circle.color, width=circle.width),
                    "brush": pg.mkBrush(circle.color) if circle.filled else pg.mkBrush(0, 0, 0, 0),
                    "symbol": "o",
                }
            )
        self._circles.setData(spots)

    def _ensure_line_pool(self, count: int) -> None:
        while len(self._lines) < count:
            item = pg.PlotDataItem()
            item.setZValue(2)
            self.plot_item.addItem(item)
            self._lines.append(item)


def field_outline(width: float, height: float) -> np.ndarray:
    """Closed rectangle around the field, for the boundary item."""
    return np.array([[0.0, 0.0], [width, 0.0], [width, height], [0.0, height], [0.0, 0.0]])

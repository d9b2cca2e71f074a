"""Render primitives for the editor canvas.

The core never draws. :class:`SceneBuilder` turns the post-edit path and the
tick result into plain geometry which the GUI's painter maps to pyqtgraph
items. Positions are in field coordinates; radii and widths are in display
units (pixels at the configured scale).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Tuple

import numpy as np

from ..config import EditorConfig
from .constraints import control_line_offset
from .editor import EditMode, TickResult
from .handle import HandleSlot, Vec2
from .path import Path
from .sampler import flatten

Color = Tuple[int, int, int]

YELLOW: Color = (255, 255, 0)
RED: Color = (255, 0, 0)
CURVE_COLOR: Color = (255, 255, 255)
STROKE_WIDTH = 2.0


def lerp_color(start: Color, end: Color, amount: float) -> Color:
    amount = min(max(amount, 0.0), 1.0)
    return tuple(int(round(s + (e - s) * amount)) for s, e in zip(start, end))  # type: ignore[return-value]


@dataclass(frozen=True)
class LinePrimitive:
    start: Vec2
    end: Vec2
    color: Color
    width: float = STROKE_WIDTH


@dataclass(frozen=True)
class CirclePrimitive:
    center: Vec2
    radius: float
    color: Color
    filled: bool
    width: float = STROKE_WIDTH


@dataclass
class RenderScene:
    curve_points: np.ndarray = field(default_factory=lambda: np.empty((0, 2)))
    lines: List[LinePrimitive] = field(default_factory=list)
    circles: List[CirclePrimitive] = field(default_factory=list)


@dataclass
class _Transition:
    value: float
    time: float


class HoverAnimator:
    """Time-based 0..1 transitions keyed by an arbitrary hashable key.

    Each call to :meth:`value` moves the stored value towards 1 when ``active``
    and towards 0 otherwise, at a rate that covers the full range in
    ``duration`` seconds.
    """

    def __init__(self, duration: float = 0.1) -> None:
        self.duration = float(duration)
        self._state: Dict[Hashable, _Transition] = {}

    def value(self, key: Hashable, active: bool, now: float) -> float:
        target = 1.0 if active else 0.0
        state = self._state.get(key)
        if state is None:
            # First sighting starts at rest
            state = _Transition(0.0, now)
            self._state[key] = state
        if self.duration <= 0:
            state.value = target
        else:
            step = (now - state.time) / self.duration
            if state.value < target:
                state.value = min(state.value + step, target)
            else:
                state.value = max(state.value - step, target)
        state.time = now
        return state.value

    def forget(self, live_ids: set) -> None:
        for key in [key for key in self._state if key[0] not in live_ids]:
            del self._state[key]

    def reset(self) -> None:
        self._state.clear()


class SceneBuilder:
    """Builds a :class:`RenderScene` from editor state."""

    def __init__(self, config: Optional[EditorConfig] = None) -> None:
        self.config = config or EditorConfig()
        self.animator = HoverAnimator(self.config.handles.hover_animation_s)

    def build(
        self,
        path: Path,
        result: TickResult,
        mode: EditMode,
        pointer: Optional[Vec2],
        now: float,
        ratio: Optional[float] = None,
    ) -> RenderScene:
        ratio = self.config.field.ratio if ratio is None else ratio
        rest = self.config.handles.radius
        hover = self.config.handles.hover_radius
        scene = RenderScene(curve_points=flatten(path, result.samples))

        hovered_index = None
        if result.hovered is not None:
            hovered_index = path.index_of(result.hovered.anchor_id)

        for idx, anchor in enumerate(path):
            if mode is EditMode.TRIM:
                doomed = hovered_index is not None and idx >= hovered_index
            elif mode is EditMode.DELETE:
                doomed = idx == hovered_index
            else:
                doomed = False
            color = lerp_color(YELLOW, RED, self.animator.value((anchor.id, "color"), doomed, now))

            radii = {}
            for slot, handle in anchor.handles():
                active = mode.emphasizes_hover and (handle.hovered or handle.drag_locked)
                amount = self.animator.value((anchor.id, slot), active, now)
                radii[slot] = rest + (hover - rest) * amount

            primary = anchor.primary.pos
            for slot in (HandleSlot.CONTROL_A, HandleSlot.CONTROL_B):
                target = anchor.handle(slot).pos
                ox, oy = control_line_offset(primary, target, (radii[slot] + 1.0) / ratio)
                scene.lines.append(LinePrimitive(primary, (target[0] - ox, target[1] - oy), color))

            for slot, handle in anchor.handles():
                scene.circles.append(
                    CirclePrimitive(handle.pos, radii[slot], color, filled=slot is HandleSlot.PRIMARY)
                )

        if mode is EditMode.CREATE and pointer is not None and result.hovered is None:
            scene.circles.append(CirclePrimitive(pointer, rest, YELLOW, filled=False))

        if mode is EditMode.INSERT and result.curve_hit is not None:
            scene.circles.append(CirclePrimitive(result.curve_hit.position, rest, YELLOW, filled=True))

        self.animator.forget(set(path.ids))
        return scene

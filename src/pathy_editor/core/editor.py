"""
Per-tick editing state machine.

The collaborator (the Qt canvas, or a test) calls :meth:`PathEditor.tick` once
per frame with the pointer state in field coordinates. Each tick runs hit
testing, drag propagation, sampling, the click edit of the current mode and
program regeneration, in that order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import EditorConfig
from .constraints import ConstraintPropagator
from .handle import AnchorPoint, HandleRef, Vec2
from .hit_test import HitTester
from .path import Path
from .sampler import CurveHit, CurveSampler, SegmentSamples, bezier_point, closest_sample
from . import serializer

logger = logging.getLogger(__name__)


class EditMode(str, Enum):
    DEFAULT = "default"
    CREATE = "create"
    INSERT = "insert"
    DELETE = "delete"
    TRIM = "trim"

    @property
    def emphasizes_hover(self) -> bool:
        """Whether hovered handles grow; structural modes keep them at rest size."""
        return self not in (EditMode.INSERT, EditMode.DELETE, EditMode.TRIM)


@dataclass(frozen=True)
class PointerInput:
    """Pointer state for one tick, already mapped to field coordinates.

    Attributes:
        position: Pointer position, or None when the pointer is off the canvas
        pressed: The button went down this tick
        released: The button went up this tick
        clicked: A press and release without meaningful movement ended this tick
        held: The button is down
        press_position: Where the button went down, if the pointer moved before
            this tick ran. Defaults to ``position``.
    """

    position: Optional[Vec2] = None
    pressed: bool = False
    released: bool = False
    clicked: bool = False
    held: bool = False
    press_position: Optional[Vec2] = None

    @property
    def press_at(self) -> Optional[Vec2]:
        return self.position if self.press_position is None else self.press_position


@dataclass
class TickResult:
    hovered: Optional[HandleRef]
    curve_hit: Optional[CurveHit]
    changed: bool
    samples: List[SegmentSamples]
    program: str


@dataclass
class TickContext:
    """What the mode handlers see of the current tick."""

    pointer: PointerInput
    hovered: Optional[HandleRef]
    curve_hit: Optional[CurveHit]


# ----------------------------------------------------------------------
# Mode handlers
# ----------------------------------------------------------------------
ClickHandler = Callable[["PathEditor", TickContext], bool]
DragHandler = Callable[["PathEditor", TickContext], bool]


@dataclass(frozen=True)
class ModeHandler:
    on_click: ClickHandler
    on_drag_start: DragHandler
    on_drag_move: DragHandler
    on_drag_end: DragHandler


def _ignore(editor: "PathEditor", ctx: TickContext) -> bool:
    return False


def _create_click(editor: "PathEditor", ctx: TickContext) -> bool:
    pos = ctx.pointer.position
    if ctx.hovered is not None or pos is None:
        return False
    if not editor.in_field(pos):
        logger.debug("Ignoring create click outside the field at %s", pos)
        return False

    x, y = pos
    path = editor.path
    if path.is_empty():
        ox, oy = editor.config.create.default_control_offset
        anchor = AnchorPoint.create(pos, (x + ox, y + oy), (x - ox, y - oy))
    else:
        prev = path[-1].control_b
        control_a = ((prev.x + x) / 2.0, (prev.y + y) / 2.0)
        control_b = (2.0 * x - control_a[0], 2.0 * y - control_a[1])
        anchor = AnchorPoint.create(pos, control_a, control_b)

    path.append(anchor)
    logger.debug("Created anchor %s at %s", anchor.id, anchor)
    return True


def _insert_click(editor: "PathEditor", ctx: TickContext) -> bool:
    hit = ctx.curve_hit
    if hit is None:
        return False
    path = editor.path
    if hit.segment_index + 1 >= len(path):
        return False

    a = path[hit.segment_index]
    b = path[hit.segment_index + 1]
    x, y = hit.position
    control_b = bezier_point(a, b, hit.t + editor.config.sampling.insert_tangent_dt)
    control_a = (2.0 * x - control_b[0], 2.0 * y - control_b[1])
    anchor = AnchorPoint.create(hit.position, control_a, control_b, settled=True)
    ConstraintPropagator.enforce(anchor)

    path.insert(hit.segment_index + 1, anchor)
    logger.debug("Inserted anchor %s into segment %d at t=%.3f", anchor.id, hit.segment_index, hit.t)
    return True


def _delete_click(editor: "PathEditor", ctx: TickContext) -> bool:
    index = editor.hovered_index(ctx.hovered)
    if index is None:
        return False
    removed = editor.path.remove_at(index)
    logger.debug("Deleted anchor %s at index %d", removed.id, index)
    return True


def _trim_click(editor: "PathEditor", ctx: TickContext) -> bool:
    index = editor.hovered_index(ctx.hovered)
    if index is None:
        return False
    removed = editor.path.truncate(index)
    logger.debug("Trimmed %d anchors from index %d", len(removed), index)
    return True


def _drag_start(editor: "PathEditor", ctx: TickContext) -> bool:
    if ctx.hovered is None:
        return False
    resolved = editor.path.resolve(ctx.hovered)
    if resolved is None:
        return False
    _, handle = resolved
    handle.drag_locked = True
    editor.path.dragged = ctx.hovered
    logger.debug("Drag started on %s of %s", ctx.hovered.slot.value, ctx.hovered.anchor_id)
    return False


def _drag_move(editor: "PathEditor", ctx: TickContext) -> bool:
    ref = editor.path.dragged
    pos = ctx.pointer.position
    last = editor.last_position
    if ref is None or pos is None or last is None:
        return False
    resolved = editor.path.resolve(ref)
    if resolved is None:
        editor.path.dragged = None
        return False

    delta = (pos[0] - last[0], pos[1] - last[1])
    if delta == (0.0, 0.0):
        return False
    anchor, handle = resolved
    handle.offset(*delta)
    ConstraintPropagator.apply(anchor, ref.slot, delta)
    return True


def _drag_end(editor: "PathEditor", ctx: TickContext) -> bool:
    editor.release_drag()
    return False


_DRAGGABLE = dict(on_drag_start=_drag_start, on_drag_move=_drag_move, on_drag_end=_drag_end)
_FIXED = dict(on_drag_start=_ignore, on_drag_move=_ignore, on_drag_end=_drag_end)

MODE_HANDLERS: Dict[EditMode, ModeHandler] = {
    EditMode.DEFAULT: ModeHandler(on_click=_ignore, **_DRAGGABLE),
    EditMode.CREATE: ModeHandler(on_click=_create_click, **_DRAGGABLE),
    EditMode.INSERT: ModeHandler(on_click=_insert_click, **_DRAGGABLE),
    EditMode.DELETE: ModeHandler(on_click=_delete_click, **_FIXED),
    EditMode.TRIM: ModeHandler(on_click=_trim_click, **_FIXED),
}


# ----------------------------------------------------------------------
# Editor
# ----------------------------------------------------------------------
class PathEditor:
    """Owns the path and applies one tick of pointer input at a time."""

    def __init__(self, config: Optional[EditorConfig] = None, path: Optional[Path] = None) -> None:
        self.config = config or EditorConfig()
        self.path = path if path is not None else Path()
        self.mode = EditMode.DEFAULT
        self.hit_tester = HitTester(self.config.handles.hit_radius)
        self.sampler = CurveSampler(
            samples_per_unit=self.config.sampling.samples_per_unit,
            draw_in_s=self.config.sampling.draw_in_s,
        )
        self.last_position: Optional[Vec2] = None
        self._listeners: List[Callable[[str], None]] = []
        self.program = serializer.to_program(self.path, self.config.program.step)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def ratio(self) -> float:
        return self.config.field.ratio

    @property
    def field_size(self) -> Vec2:
        return (self.config.field.width, self.config.field.height)

    def in_field(self, pos: Vec2) -> bool:
        width, height = self.field_size
        return 0.0 <= pos[0] <= width and 0.0 <= pos[1] <= height

    def hovered_index(self, ref: Optional[HandleRef]) -> Optional[int]:
        if ref is None:
            return None
        return self.path.index_of(ref.anchor_id)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def add_listener(self, callback: Callable[[str], None]) -> None:
        """Register ``callback(program)`` to run whenever the path changes."""
        self._listeners.append(callback)

    def _changed(self) -> None:
        self.program = serializer.to_program(self.path, self.config.program.step)
        for callback in self._listeners:
            callback(self.program)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def set_mode(self, mode: EditMode) -> EditMode:
        """Switch to ``mode``; selecting the active mode again returns to DEFAULT."""
        new_mode = EditMode.DEFAULT if mode == self.mode else EditMode(mode)
        if new_mode != self.mode:
            self.release_drag()
            logger.debug("Edit mode %s -> %s", self.mode.value, new_mode.value)
        self.mode = new_mode
        return self.mode

    def release_drag(self) -> None:
        ref = self.path.dragged
        if ref is None:
            return
        resolved = self.path.resolve(ref)
        if resolved is not None:
            resolved[1].drag_locked = False
        self.path.dragged = None
        logger.debug("Drag released on %s of %s", ref.slot.value, ref.anchor_id)

    def clear(self) -> None:
        self.release_drag()
        self.path.clear()
        self.sampler.reset()
        logger.debug("Path cleared")
        self._changed()

    def set_field_size(self, width: float, height: Optional[float] = None) -> bool:
        """Change the field dimensions; only allowed while the path is empty."""
        if not self.path.is_empty():
            logger.debug("Field size is locked while the path has anchors")
            return False
        field_conf = self.config.field.model_copy(
            update={"width": float(width), "height": float(width if height is None else height)}
        )
        if field_conf.width <= 0 or field_conf.height <= 0:
            raise ValueError("Field dimensions must be positive")
        self.config = self.config.model_copy(update={"field": field_conf})
        return True

    def load_records(self, records: Sequence[Any]) -> bool:
        """Replace the path with ``records``; a malformed set leaves it untouched."""
        try:
            path = serializer.from_records(records)
        except serializer.PathLoadError as exc:
            logger.warning("Rejected path records: %s", exc)
            return False
        self.release_drag()
        self.path = path
        self.sampler.reset()
        self.last_position = None
        logger.debug("Loaded %d anchors", len(path))
        self._changed()
        return True

    def load_json(self, text: str) -> bool:
        try:
            records = serializer.loads_records(text)
        except serializer.PathLoadError as exc:
            logger.warning("Rejected path JSON: %s", exc)
            return False
        return self.load_records(records)

    def records(self) -> List[serializer.PersistedRecord]:
        return serializer.to_records(self.path)

    def to_json(self) -> str:
        return serializer.dumps_records(self.records())

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def tick(self, pointer: PointerInput, now: float) -> TickResult:
        """
        Apply one frame of pointer input.

        Parameters
        ----------
        pointer:
            Pointer state for this frame in field coordinates.
        now:
            Monotonic time in seconds; drives the draw-in animation.

        Returns
        -------
        TickResult
            The hovered handle, the curve hit (INSERT mode only), whether the
            path changed, the display samples of the post-edit path and the
            current program text.
        """
        handler = MODE_HANDLERS[self.mode]
        ratio = self.ratio
        changed = False

        hovered = self.hit_tester.resolve(self.path, pointer.position, ratio)
        ctx = TickContext(pointer=pointer, hovered=hovered, curve_hit=None)

        if pointer.pressed:
            press_hit = hovered
            if pointer.press_at != pointer.position:
                # Lock what was under the button, then restore hover at the pointer
                press_hit = self.hit_tester.resolve(self.path, pointer.press_at, ratio)
                self.hit_tester.resolve(self.path, pointer.position, ratio)
            handler.on_drag_start(self, TickContext(pointer=pointer, hovered=press_hit, curve_hit=None))
            self.last_position = pointer.press_at
        if self.path.dragged is not None and pointer.held:
            changed |= handler.on_drag_move(self, ctx)
        if pointer.released:
            handler.on_drag_end(self, ctx)

        samples = self.sampler.sample_path(self.path, ratio, now)
        if self.mode is EditMode.INSERT:
            ctx.curve_hit = closest_sample(
                samples, pointer.position, ratio, self.config.handles.hit_radius
            )

        if pointer.clicked and handler.on_click(self, ctx):
            changed = True
            samples = self.sampler.sample_path(self.path, ratio, now)

        if changed:
            self._changed()
        self.last_position = pointer.position

        return TickResult(
            hovered=hovered,
            curve_hit=ctx.curve_hit,
            changed=changed,
            samples=samples,
            program=self.program,
        )

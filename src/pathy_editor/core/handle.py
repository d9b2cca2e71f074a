"""Handles and anchor points: the entities the path is built from."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Tuple

Vec2 = Tuple[float, float]


class HandleSlot(str, Enum):
    """The three handle slots owned by every anchor, in hit-test order."""

    PRIMARY = "primary"
    CONTROL_A = "control_a"
    CONTROL_B = "control_b"


@dataclass(frozen=True)
class HandleRef:
    """Identity of a handle: the owning anchor's id plus the slot.

    The editor never keeps a second reference to a ``Handle`` object; it keeps
    one of these and looks the handle up through the path when it needs it.
    """

    anchor_id: uuid.UUID
    slot: HandleSlot


@dataclass
class Handle:
    """A single draggable point with transient interaction flags."""

    x: float
    y: float
    hovered: bool = False
    drag_locked: bool = False

    @property
    def pos(self) -> Vec2:
        return (self.x, self.y)

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def offset(self, dx: float, dy: float) -> None:
        """Offsets the handle by ``(dx, dy)``."""
        self.x += dx
        self.y += dy


@dataclass
class AnchorPoint:
    """One path vertex: a primary handle plus its two control handles.

    Attributes:
        primary: The point the curve passes through
        control_a: Control handle shaping the curve entering this anchor
        control_b: Control handle shaping the curve leaving this anchor
        id: Stable identity, also the key for animation state
        broken: When True the controls may form a cusp instead of mirroring
        sample_count_settled: True once the draw-in animation of the segment
            ending at this anchor has finished
        last_primary_pos: Primary position as of the previous propagation
    """

    primary: Handle
    control_a: Handle
    control_b: Handle
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    broken: bool = False
    sample_count_settled: bool = False
    last_primary_pos: Vec2 = (0.0, 0.0)

    def __post_init__(self) -> None:
        self.last_primary_pos = self.primary.pos

    @classmethod
    def create(
        cls,
        pos: Vec2,
        control_a: Vec2,
        control_b: Vec2,
        *,
        anchor_id: uuid.UUID | None = None,
        broken: bool = False,
        settled: bool = False,
    ) -> "AnchorPoint":
        return cls(
            primary=Handle(float(pos[0]), float(pos[1])),
            control_a=Handle(float(control_a[0]), float(control_a[1])),
            control_b=Handle(float(control_b[0]), float(control_b[1])),
            id=anchor_id or uuid.uuid4(),
            broken=broken,
            sample_count_settled=settled,
        )

    def handle(self, slot: HandleSlot) -> Handle:
        if slot is HandleSlot.PRIMARY:
            return self.primary
        if slot is HandleSlot.CONTROL_A:
            return self.control_a
        return self.control_b

    def handles(self) -> Iterator[Tuple[HandleSlot, Handle]]:
        """Yield ``(slot, handle)`` pairs in hit-test order."""
        yield HandleSlot.PRIMARY, self.primary
        yield HandleSlot.CONTROL_A, self.control_a
        yield HandleSlot.CONTROL_B, self.control_b

    def ref(self, slot: HandleSlot) -> HandleRef:
        return HandleRef(self.id, slot)

    @property
    def is_hovered(self) -> bool:
        return any(handle.hovered for _, handle in self.handles())

    def __str__(self) -> str:
        return f"({self.primary.x}, {self.primary.y})"

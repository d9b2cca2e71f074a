"""Continuity constraint between an anchor and its two control handles."""

from __future__ import annotations

import math

from .handle import AnchorPoint, HandleSlot, Vec2

# Magnitudes below this are treated as a zero-length vector.
ZERO_LENGTH_EPS = 1e-6


def mirror(center: Vec2, point: Vec2) -> Vec2:
    """Point reflection of ``point`` through ``center``."""
    return (2.0 * center[0] - point[0], 2.0 * center[1] - point[1])


def control_line_offset(origin: Vec2, target: Vec2, length: float) -> Vec2:
    """Vector of ``length`` pointing from ``origin`` towards ``target``.

    Used to stop control lines at the edge of the hollow control circles. A
    zero-length control vector has no direction, so no offset is applied.
    """
    dx = target[0] - origin[0]
    dy = target[1] - origin[1]
    mag = math.hypot(dx, dy)
    if mag < ZERO_LENGTH_EPS:
        return (0.0, 0.0)
    return (length * dx / mag, length * dy / mag)


class ConstraintPropagator:
    """Keeps an anchor's control handles consistent after one of its handles moved."""

    @staticmethod
    def apply(anchor: AnchorPoint, slot: HandleSlot, delta: Vec2) -> None:
        """Propagate an edit of ``slot`` that moved it by ``delta``.

        Dragging the primary handle moves the whole local frame rigidly. The
        controls follow the primary's displacement since ``last_primary_pos``,
        which is ``delta`` for a single drag step and also picks up any primary
        move made since the previous propagation. Dragging a control of an
        unbroken anchor mirrors the other control through the primary. Broken
        anchors let the controls move independently.
        """
        if slot is HandleSlot.PRIMARY:
            dx = anchor.primary.x - anchor.last_primary_pos[0]
            dy = anchor.primary.y - anchor.last_primary_pos[1]
            anchor.control_a.offset(dx, dy)
            anchor.control_b.offset(dx, dy)
            anchor.last_primary_pos = anchor.primary.pos
        elif slot is HandleSlot.CONTROL_A and not anchor.broken:
            anchor.control_b.move_to(*mirror(anchor.primary.pos, anchor.control_a.pos))
        elif slot is HandleSlot.CONTROL_B and not anchor.broken:
            anchor.control_a.move_to(*mirror(anchor.primary.pos, anchor.control_b.pos))

        ConstraintPropagator.enforce(anchor)

    @staticmethod
    def enforce(anchor: AnchorPoint) -> None:
        """Re-derive ``control_b`` from ``control_a`` on unbroken anchors.

        ``control_a`` is the authoritative tangent reference, so this also
        absorbs floating point drift accumulated over many incremental drags.
        """
        if anchor.broken:
            return
        anchor.control_b.move_to(*mirror(anchor.primary.pos, anchor.control_a.pos))

    @staticmethod
    def is_continuous(anchor: AnchorPoint, tolerance: float = 1e-4) -> bool:
        if anchor.broken:
            return True
        mx, my = mirror(anchor.primary.pos, anchor.control_a.pos)
        return abs(anchor.control_b.x - mx) <= tolerance and abs(anchor.control_b.y - my) <= tolerance

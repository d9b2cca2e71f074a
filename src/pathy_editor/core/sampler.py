"""Curve evaluation, display sampling and draw-in easing."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from .handle import AnchorPoint, Vec2
from .path import Path

logger = logging.getLogger(__name__)


def bezier_point(a: AnchorPoint, b: AnchorPoint, t: float) -> Vec2:
    """Evaluate the segment from ``a`` to ``b`` at parameter ``t``.

    The segment uses ``a.primary``, ``a.control_b``, ``b.control_a`` and
    ``b.primary`` as its four Bernstein control points. ``t`` is not clamped.
    """
    if t == 0.0:
        return a.primary.pos
    if t == 1.0:
        return b.primary.pos
    u = 1.0 - t
    w0 = u * u * u
    w1 = 3.0 * u * u * t
    w2 = 3.0 * u * t * t
    w3 = t * t * t
    x = w0 * a.primary.x + w1 * a.control_b.x + w2 * b.control_a.x + w3 * b.primary.x
    y = w0 * a.primary.y + w1 * a.control_b.y + w2 * b.control_a.y + w3 * b.primary.y
    return (x, y)


def bezier_points(a: AnchorPoint, b: AnchorPoint, ts: Sequence[float]) -> np.ndarray:
    """Vectorised :func:`bezier_point`; returns an ``(len(ts), 2)`` array."""
    t_values = np.asarray(ts, dtype=np.float64)
    start = np.array(a.primary.pos, dtype=np.float64)
    control1 = np.array(a.control_b.pos, dtype=np.float64)
    control2 = np.array(b.control_a.pos, dtype=np.float64)
    end = np.array(b.primary.pos, dtype=np.float64)
    positions = (
        (1 - t_values)[:, None] ** 3 * start
        + 3 * (1 - t_values)[:, None] ** 2 * t_values[:, None] * control1
        + 3 * (1 - t_values)[:, None] * t_values[:, None] ** 2 * control2
        + t_values[:, None] ** 3 * end
    )
    return positions


@dataclass
class SampleEasing:
    """Linear animation of a segment's displayed sample count."""

    start_time: float
    start_value: float
    target_value: float
    duration: float

    def eased_value(self, now: float) -> float:
        if self.duration <= 0:
            return self.target_value
        progress = (now - self.start_time) / self.duration
        progress = min(max(progress, 0.0), 1.0)
        return self.start_value + (self.target_value - self.start_value) * progress


@dataclass
class SegmentSamples:
    """Display samples of one segment.

    ``ts`` and ``points`` hold the intermediate samples only; the end points of
    the segment are the anchors' primaries.
    """

    index: int
    ts: np.ndarray
    points: np.ndarray


@dataclass(frozen=True)
class CurveHit:
    segment_index: int
    t: float
    position: Vec2


class CurveSampler:
    """Produces display samples for every segment of a path.

    The number of samples drawn for a segment eases in from zero when the
    segment first appears. Easing state lives in a side table keyed by the id of
    the segment's destination anchor, and is dropped once the anchor is pinned
    as settled.
    """

    def __init__(self, samples_per_unit: float = 1.0, draw_in_s: float = 0.5) -> None:
        self.samples_per_unit = float(samples_per_unit)
        self.draw_in_s = float(draw_in_s)
        self._easings: Dict[uuid.UUID, SampleEasing] = {}

    def target_count(self, a: AnchorPoint, b: AnchorPoint, ratio: float) -> int:
        dist = math.hypot(b.primary.x - a.primary.x, b.primary.y - a.primary.y)
        return max(int(math.floor(dist * ratio * self.samples_per_unit)), 0)

    def displayed_count(self, b: AnchorPoint, target: int, now: float) -> int:
        """Sample count to draw for the segment ending at ``b`` at time ``now``."""
        if b.sample_count_settled:
            return target

        easing = self._easings.get(b.id)
        if easing is None:
            easing = SampleEasing(now, 0.0, float(target), self.draw_in_s)
            self._easings[b.id] = easing
        elif easing.target_value != target:
            # Retarget from the current animated value
            easing = SampleEasing(now, easing.eased_value(now), float(target), self.draw_in_s)
            self._easings[b.id] = easing

        value = easing.eased_value(now)
        if value >= easing.target_value:
            b.sample_count_settled = True
            del self._easings[b.id]
            logger.debug("Segment ending at %s settled at %d samples", b.id, target)
            return target
        return int(math.floor(value))

    def sample_segment(self, index: int, a: AnchorPoint, b: AnchorPoint, count: int) -> SegmentSamples:
        if count <= 0:
            return SegmentSamples(index, np.empty(0), np.empty((0, 2)))
        ts = np.arange(1, count + 1, dtype=np.float64) / (count + 1)
        return SegmentSamples(index, ts, bezier_points(a, b, ts))

    def sample_path(self, path: Path, ratio: float, now: float) -> List[SegmentSamples]:
        """Sample every segment of ``path`` for display at time ``now``."""
        samples = []
        for idx, a, b in path.segments():
            target = self.target_count(a, b, ratio)
            count = self.displayed_count(b, target, now)
            samples.append(self.sample_segment(idx, a, b, count))
        self.prune(path)
        return samples

    def prune(self, path: Path) -> None:
        live = set(path.ids)
        for anchor_id in [key for key in self._easings if key not in live]:
            del self._easings[anchor_id]

    def reset(self) -> None:
        self._easings.clear()

    def easing_for(self, anchor_id: uuid.UUID) -> Optional[SampleEasing]:
        return self._easings.get(anchor_id)


def closest_sample(
    samples: Sequence[SegmentSamples],
    pointer: Optional[Vec2],
    ratio: float,
    radius: float,
) -> Optional[CurveHit]:
    """Brute-force nearest displayed sample to ``pointer`` within ``radius``.

    ``radius`` is in display units. Returns ``None`` when there is no pointer or
    no sample is close enough.
    """
    if pointer is None:
        return None

    best: Optional[CurveHit] = None
    best_dist = radius * radius
    target = np.asarray(pointer, dtype=np.float64)
    for segment in samples:
        if len(segment.ts) == 0:
            continue
        deltas = (segment.points - target) * ratio
        dists = np.einsum("ij,ij->i", deltas, deltas)
        i = int(np.argmin(dists))
        if dists[i] < best_dist:
            best_dist = float(dists[i])
            point = segment.points[i]
            best = CurveHit(segment.index, float(segment.ts[i]), (float(point[0]), float(point[1])))
    return best


def flatten(path: Path, samples: Sequence[SegmentSamples]) -> np.ndarray:
    """Join primaries and intermediate samples into one ``(N, 2)`` polyline."""
    if len(path) < 2:
        return np.empty((0, 2))
    chunks = [np.array([path[0].primary.pos], dtype=np.float64)]
    for segment in samples:
        chunks.append(segment.points)
        chunks.append(np.array([path[segment.index + 1].primary.pos], dtype=np.float64))
    return np.vstack(chunks)

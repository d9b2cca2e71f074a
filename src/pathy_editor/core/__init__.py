"""Path model, editing state machine and code generation."""

from .handle import AnchorPoint, Handle, HandleRef, HandleSlot
from .path import Path
from .hit_test import HitTester
from .constraints import ConstraintPropagator, control_line_offset
from .sampler import CurveHit, CurveSampler, SampleEasing, SegmentSamples, bezier_point, bezier_points, closest_sample
from .editor import MODE_HANDLERS, EditMode, ModeHandler, PathEditor, PointerInput, TickResult
from .serializer import (
    PathLoadError,
    PersistedRecord,
    dumps_records,
    from_records,
    loads_records,
    to_program,
    to_records,
)
from .render import CirclePrimitive, HoverAnimator, LinePrimitive, RenderScene, SceneBuilder

__all__ = [
    "AnchorPoint",
    "Handle",
    "HandleRef",
    "HandleSlot",
    "Path",
    "HitTester",
    "ConstraintPropagator",
    "control_line_offset",
    "CurveHit",
    "CurveSampler",
    "SampleEasing",
    "SegmentSamples",
    "bezier_point",
    "bezier_points",
    "closest_sample",
    "MODE_HANDLERS",
    "EditMode",
    "ModeHandler",
    "PathEditor",
    "PointerInput",
    "TickResult",
    "PathLoadError",
    "PersistedRecord",
    "dumps_records",
    "from_records",
    "loads_records",
    "to_program",
    "to_records",
    "CirclePrimitive",
    "HoverAnimator",
    "LinePrimitive",
    "RenderScene",
    "SceneBuilder",
]

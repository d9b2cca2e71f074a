"""
Persistence records and motion-program generation for paths.

Two output forms exist: a list of :class:`PersistedRecord` (round-trippable
through JSON text) and the generated motion program consumed by the robot
code.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Iterable, List, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, confloat, field_validator

from .constraints import ConstraintPropagator
from .handle import AnchorPoint
from .path import Path

logger = logging.getLogger(__name__)


FiniteFloat = confloat(allow_inf_nan=False)

PROGRAM_PROLOGUE = "std::vector<wolflib::Moment> path = wolf.solve({\n"
PROGRAM_INDENT = "    "


class PathLoadError(ValueError):
    """Raised when a persisted record set cannot be turned into a path."""


class Point2(BaseModel):
    x: FiniteFloat
    y: FiniteFloat

    @field_validator("x", "y", mode="before")
    @classmethod
    def _require_number(cls, value: Any) -> Any:
        # bool is an int subclass and strings would be coerced in lax mode
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Coordinate must be a number, got {value!r}")
        return value


class PersistedRecord(BaseModel):
    """Serialized form of one anchor.

    Only position, both controls, id and the broken flag survive persistence;
    interaction and animation state is rebuilt on load.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    pos: Point2
    control_a: Point2 = Field(..., alias="controlA")
    control_b: Point2 = Field(..., alias="controlB")
    id: uuid.UUID
    broken: bool = Field(default=False, description="Controls may form a cusp")

    @classmethod
    def from_anchor(cls, anchor: AnchorPoint) -> "PersistedRecord":
        return cls(
            pos=Point2(x=anchor.primary.x, y=anchor.primary.y),
            control_a=Point2(x=anchor.control_a.x, y=anchor.control_a.y),
            control_b=Point2(x=anchor.control_b.x, y=anchor.control_b.y),
            id=anchor.id,
            broken=anchor.broken,
        )

    def to_anchor(self) -> AnchorPoint:
        return AnchorPoint.create(
            (self.pos.x, self.pos.y),
            (self.control_a.x, self.control_a.y),
            (self.control_b.x, self.control_b.y),
            anchor_id=self.id,
            broken=self.broken,
            settled=True,
        )


_RECORD_LIST = TypeAdapter(List[PersistedRecord])


# ----------------------------------------------------------------------
# Records
# ----------------------------------------------------------------------
def to_records(path: Path) -> List[PersistedRecord]:
    return [PersistedRecord.from_anchor(anchor) for anchor in path]


def validate_records(raw: Any) -> List[PersistedRecord]:
    """Validate raw decoded data (a list of mappings) into records.

    Raises
    ------
    PathLoadError
        If the data is not a list of well formed records.
    """
    if isinstance(raw, list) and all(isinstance(item, PersistedRecord) for item in raw):
        return list(raw)
    try:
        return _RECORD_LIST.validate_python(raw)
    except ValidationError as exc:
        raise PathLoadError(f"Malformed path records: {exc}") from exc


def from_records(records: Iterable[Any]) -> Path:
    """
    Rebuild a path from persisted records.

    Unbroken anchors have ``control_b`` re-derived from ``control_a``, so a
    hand-edited record cannot load with a kinked tangent. Paths saved by the
    editor already satisfy this and round trip exactly. Reloaded anchors are
    marked settled and render fully built without the draw-in animation.

    Parameters
    ----------
    records:
        ``PersistedRecord`` instances or plain mappings in the persisted layout.

    Returns
    -------
    Path
        A fresh path; nothing is hovered or dragged.

    Raises
    ------
    PathLoadError
        If any record is malformed or two records share an id. No partial
        path is ever returned.
    """
    validated = validate_records(list(records))

    seen = set()
    for record in validated:
        if record.id in seen:
            raise PathLoadError(f"Duplicate anchor id {record.id}")
        seen.add(record.id)

    anchors = [record.to_anchor() for record in validated]
    for anchor in anchors:
        ConstraintPropagator.enforce(anchor)
    return Path(anchors)


def dumps_records(records: Sequence[PersistedRecord], indent: int | None = 2) -> str:
    payload = [record.model_dump(mode="json", by_alias=True) for record in records]
    return json.dumps(payload, indent=indent)


def loads_records(text: str) -> List[PersistedRecord]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PathLoadError(f"Invalid JSON: {exc}") from exc
    if not isinstance(raw, list):
        raise PathLoadError("Path JSON must be an array of records")
    return validate_records(raw)


# ----------------------------------------------------------------------
# Motion program
# ----------------------------------------------------------------------
def _pair(x: float, y: float) -> str:
    return f"{{{x:.3f}_in, {y:.3f}_in}}"


def format_segment(a: AnchorPoint, b: AnchorPoint) -> str:
    pairs = (
        _pair(a.primary.x, a.primary.y),
        _pair(a.control_b.x, a.control_b.y),
        _pair(b.control_a.x, b.control_a.y),
        _pair(b.primary.x, b.primary.y),
    )
    return PROGRAM_INDENT + "{" + ", ".join(pairs) + "}"


def to_program(path: Path, step: float = 1.0) -> str:
    """Generate the motion program for ``path``.

    Paths with fewer than two anchors produce the empty-collection form of the
    same statement.
    """
    if len(path) < 2:
        return f"std::vector<wolflib::Moment> path = wolf.solve({{}}, {step:g});"
    body = ",\n".join(format_segment(a, b) for _, a, b in path.segments())
    return f"{PROGRAM_PROLOGUE}{body}\n}}, {step:g});"

"""
Configuration models and loader for the path editor.

Every value has a default matching the stock 140.5 in field drawn at 720 px,
so a YAML file only needs to list the values it overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

import yaml
from pydantic import BaseModel, Field, confloat, conint, model_validator


PositiveFloat = confloat(gt=0)
NonNegativeFloat = confloat(ge=0)


class FieldConfig(BaseModel):
    """Physical field dimensions and their on-screen scale."""

    width: PositiveFloat = Field(default=140.5, description="Field width in inches")
    height: PositiveFloat = Field(default=140.5, description="Field height in inches")
    scale_px: conint(gt=0) = Field(
        default=720, description="On-screen size of the field width in pixels"
    )

    @property
    def ratio(self) -> float:
        """Display units per field unit."""
        return self.scale_px / self.width


class HandleConfig(BaseModel):
    """Handle geometry in display units."""

    radius: PositiveFloat = Field(default=5.0, description="Resting handle circle radius")
    hover_radius: PositiveFloat = Field(default=8.0, description="Handle radius while hovered")
    hit_radius: PositiveFloat = Field(
        default=5.0, description="Pointer distance under which a handle counts as hovered"
    )
    hover_animation_s: NonNegativeFloat = Field(
        default=0.1, description="Time for the radius to grow or shrink on hover"
    )

    @model_validator(mode="after")
    def _check_hover_radius(self) -> "HandleConfig":
        if self.hover_radius < self.radius:
            raise ValueError("hover_radius must not be smaller than radius")
        return self


class SamplingConfig(BaseModel):
    """Curve display sampling."""

    samples_per_unit: PositiveFloat = Field(
        default=1.0, description="Samples drawn per display unit of anchor distance"
    )
    draw_in_s: NonNegativeFloat = Field(
        default=0.5, description="Duration of the draw-in animation of a new segment"
    )
    insert_tangent_dt: PositiveFloat = Field(
        default=0.1,
        description="Parameter offset used to derive the tangent of an inserted anchor",
    )


class CreateConfig(BaseModel):
    default_control_offset: Tuple[float, float] = Field(
        default=(20.0, 10.0),
        description="Offset of control_a from the first anchor of a path, in field units",
    )


class ProgramConfig(BaseModel):
    step: PositiveFloat = Field(default=1.0, description="Step value passed to the path solver")


class EditorConfig(BaseModel):
    field: FieldConfig = Field(default_factory=FieldConfig)
    handles: HandleConfig = Field(default_factory=HandleConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    create: CreateConfig = Field(default_factory=CreateConfig)
    program: ProgramConfig = Field(default_factory=ProgramConfig)


def load_editor_config(path: Union[str, Path]) -> EditorConfig:
    """
    Load and validate editor configuration from a YAML file.

    Parameters
    ----------
    path:
        Path to the YAML configuration file.

    Returns
    -------
    EditorConfig
        Parsed configuration; sections missing from the file keep their defaults.
    """

    config_path = Path(path).expanduser().resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        raw_data = yaml.safe_load(handle) or {}

    return EditorConfig.model_validate(raw_data)

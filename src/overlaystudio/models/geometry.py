"""Geometry value objects shared by the editor, the engine and the renderer.

Positions stored on overlays and video placements are always composition-space
pixels. Display-space values only exist transiently inside the editor, where
they are converted at the boundary by ``overlaystudio.editor.coordinates``.
"""

from __future__ import annotations

import math
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

# "x,y" with optional whitespace; integers or decimals, optionally negative
POSITION_PATTERN = re.compile(
    r"^\s*(?P<x>-?\d+(?:\.\d+)?)\s*,\s*(?P<y>-?\d+(?:\.\d+)?)\s*$"
)


class CompositionValidationError(ValueError):
    """Raised when composition input is malformed and must not be applied."""


class Point(BaseModel):
    """A 2D point or offset."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)

    def __add__(self, other: Point) -> Point:
        return Point(x=self.x + other.x, y=self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(x=self.x - other.x, y=self.y - other.y)


class Size(BaseModel):
    """A free-form size, e.g. the on-screen box of the editing viewport."""

    model_config = ConfigDict(frozen=True)

    width: float = Field(..., ge=0, allow_inf_nan=False)
    height: float = Field(..., ge=0, allow_inf_nan=False)


class FrameSize(BaseModel):
    """Pixel dimensions of a composition or a placed video.

    Both dimensions must be positive and even: H.264 encodes 4:2:0 chroma
    and rejects odd frame sizes.
    """

    model_config = ConfigDict(frozen=True)

    width: int = Field(..., gt=0, description="Width in pixels (even)")
    height: int = Field(..., gt=0, description="Height in pixels (even)")

    @field_validator("width", "height")
    @classmethod
    def validate_even(cls, v: int) -> int:
        if v % 2:
            raise ValueError(f"Dimension must be even for H.264 output, got {v}")
        return v

    @property
    def aspect(self) -> float:
        """Height divided by width."""
        return self.height / self.width

    @classmethod
    def coerce(cls, width: float, height: float) -> FrameSize:
        """Round arbitrary dimensions and force them to even values.

        Odd values lose one pixel, matching the editor's aspect-ratio rule.
        Dimensions below 2 pixels are raised to 2.
        """
        return cls(width=force_even(width), height=force_even(height))


class ScaleFactor(BaseModel):
    """Display pixels per composition pixel, independently per axis."""

    model_config = ConfigDict(frozen=True)

    x: float = Field(..., gt=0, allow_inf_nan=False)
    y: float = Field(..., gt=0, allow_inf_nan=False)


def round_half_up(value: float) -> int:
    """Round like the browser's ``Math.round`` (halves go up, not to even)."""
    return math.floor(value + 0.5)


def force_even(value: float) -> int:
    """Round to the nearest pixel and drop one pixel if the result is odd."""
    rounded = max(round_half_up(value), 2)
    return rounded if rounded % 2 == 0 else rounded - 1


def parse_position(value: str) -> Point:
    """Parse the legacy ``"x,y"`` position string.

    Raises:
        CompositionValidationError: If the string is not two comma-separated
            finite numbers.
    """
    if not isinstance(value, str):
        raise CompositionValidationError(
            f"Position must be an 'x,y' string, got {type(value).__name__}"
        )
    match = POSITION_PATTERN.match(value)
    if match is None:
        raise CompositionValidationError(f"Malformed position {value!r}; expected 'x,y'")
    return Point(x=float(match.group("x")), y=float(match.group("y")))


def format_position(point: Point) -> str:
    """Serialize a point to the legacy ``"x,y"`` string with integer pixels."""
    return f"{round_half_up(point.x)},{round_half_up(point.y)}"


def clamp_point(point: Point, bounds: FrameSize) -> Point:
    """Clamp a point into ``[0, width] x [0, height]``."""
    return Point(
        x=min(max(0.0, point.x), float(bounds.width)),
        y=min(max(0.0, point.y), float(bounds.height)),
    )

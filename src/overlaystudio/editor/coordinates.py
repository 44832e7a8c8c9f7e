"""Conversion between display (viewport) space and composition space.

The editing viewport shows the composition scaled to fit the screen, with
independent horizontal and vertical factors. Pointer input arrives in display
pixels; everything stored is in composition pixels.
"""

from __future__ import annotations

from dataclasses import dataclass

from overlaystudio.models.geometry import (
    CompositionValidationError,
    FrameSize,
    Point,
    ScaleFactor,
    Size,
)

IDENTITY_SCALE = ScaleFactor(x=1.0, y=1.0)


def compute_scale(container: Size, composition: FrameSize) -> ScaleFactor:
    """Scale of a viewport ``container`` showing ``composition``.

    Raises:
        CompositionValidationError: If the container has a zero dimension
            (e.g. it is not laid out yet).
    """
    if container.width <= 0 or container.height <= 0:
        raise CompositionValidationError(
            f"Viewport has no area ({container.width}x{container.height}); "
            "scale is undefined"
        )
    return ScaleFactor(
        x=container.width / composition.width,
        y=container.height / composition.height,
    )


def to_display(point: Point, scale: ScaleFactor) -> Point:
    return Point(x=point.x * scale.x, y=point.y * scale.y)


def to_composition(point: Point, scale: ScaleFactor) -> Point:
    return Point(x=point.x / scale.x, y=point.y / scale.y)


def size_to_display(size: Size | FrameSize, scale: ScaleFactor) -> Size:
    return Size(width=size.width * scale.x, height=size.height * scale.y)


def size_to_composition(size: Size, scale: ScaleFactor) -> Size:
    return Size(width=size.width / scale.x, height=size.height / scale.y)


@dataclass(frozen=True)
class CoordinateTransform:
    """A scale snapshot with the conversions bound to it.

    Rebuild it whenever the viewport or the composition size changes;
    mixing conversions from two snapshots breaks the round trip.
    """

    scale: ScaleFactor = IDENTITY_SCALE

    @classmethod
    def for_viewport(cls, container: Size, composition: FrameSize) -> CoordinateTransform:
        return cls(scale=compute_scale(container, composition))

    def to_display(self, point: Point) -> Point:
        return to_display(point, self.scale)

    def to_composition(self, point: Point) -> Point:
        return to_composition(point, self.scale)

    def size_to_display(self, size: Size | FrameSize) -> Size:
        return size_to_display(size, self.scale)

    def size_to_composition(self, size: Size) -> Size:
        return size_to_composition(size, self.scale)

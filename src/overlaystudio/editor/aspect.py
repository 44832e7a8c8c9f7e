"""Aspect-ratio rules for resizing the composition canvas."""

from __future__ import annotations

import math
import re

from overlaystudio.models.geometry import (
    CompositionValidationError,
    FrameSize,
    force_even,
)

ASPECT_RATIOS: tuple[str, ...] = ("16:9", "4:3", "1:1", "3:4", "9:16")

_RATIO_PATTERN = re.compile(r"^\s*(\d+)\s*:\s*(\d+)\s*$")


def parse_aspect_ratio(ratio: str) -> tuple[int, int]:
    """Parse ``"W:H"`` into positive integers.

    Raises:
        CompositionValidationError: If the ratio is malformed or has a zero term.
    """
    match = _RATIO_PATTERN.match(ratio)
    if match is None:
        raise CompositionValidationError(f"Malformed aspect ratio {ratio!r}; expected 'W:H'")
    width, height = int(match.group(1)), int(match.group(2))
    if width == 0 or height == 0:
        raise CompositionValidationError(f"Aspect ratio {ratio!r} has a zero term")
    return width, height


def calculate_aspect_ratio(width: int, height: int) -> str:
    """Reduce pixel dimensions to a ``"W:H"`` ratio, e.g. 1920x1080 -> ``"16:9"``."""
    if width <= 0 or height <= 0:
        raise CompositionValidationError(f"Invalid dimensions {width}x{height}")
    divisor = math.gcd(width, height)
    return f"{width // divisor}:{height // divisor}"


def available_aspect_ratios(video_ratio: str | None = None) -> tuple[str, ...]:
    """Selectable ratios, with the video's own ratio first if it is not a preset."""
    if video_ratio is None or video_ratio in ASPECT_RATIOS:
        return ASPECT_RATIOS
    return (video_ratio, *ASPECT_RATIOS)


def resize_to_aspect_ratio(width: float, ratio: str) -> FrameSize:
    """Keep the current width and derive the height from ``ratio``.

    Both dimensions are rounded and then forced even; an odd width loses one
    pixel before the height is derived from it.
    """
    ratio_w, ratio_h = parse_aspect_ratio(ratio)
    even_width = force_even(width)
    return FrameSize(width=even_width, height=force_even(even_width * ratio_h / ratio_w))

"""Data models for Overlay Studio."""

from .composition import (
    DEFAULT_DURATION_IN_FRAMES,
    FPS,
    Composition,
    VideoPlacement,
    frames_for_duration,
)
from .geometry import (
    CompositionValidationError,
    FrameSize,
    Point,
    ScaleFactor,
    Size,
    format_position,
    parse_position,
)
from .overlay import (
    Overlay,
    create_overlay,
    move_overlay,
    place_overlay,
    remove_overlay,
    replace_overlay,
    set_text,
    set_window,
)
from .wire import ExportRequest, WireOverlay

__all__ = [
    # Geometry
    "CompositionValidationError",
    "FrameSize",
    "Point",
    "ScaleFactor",
    "Size",
    "format_position",
    "parse_position",
    # Overlays
    "Overlay",
    "create_overlay",
    "move_overlay",
    "place_overlay",
    "remove_overlay",
    "replace_overlay",
    "set_text",
    "set_window",
    # Composition
    "DEFAULT_DURATION_IN_FRAMES",
    "FPS",
    "Composition",
    "VideoPlacement",
    "frames_for_duration",
    # Wire format
    "ExportRequest",
    "WireOverlay",
]

"""Editing surface: coordinate mapping, aspect ratios and the edit session."""

from .aspect import (
    ASPECT_RATIOS,
    available_aspect_ratios,
    calculate_aspect_ratio,
    parse_aspect_ratio,
    resize_to_aspect_ratio,
)
from .coordinates import (
    IDENTITY_SCALE,
    CoordinateTransform,
    compute_scale,
    size_to_composition,
    size_to_display,
    to_composition,
    to_display,
)
from .session import (
    Dragging,
    EditSession,
    EditState,
    Idle,
    IllegalTransitionError,
    Resizing,
    Target,
    TextEditing,
)

__all__ = [
    "ASPECT_RATIOS",
    "IDENTITY_SCALE",
    "CoordinateTransform",
    "Dragging",
    "EditSession",
    "EditState",
    "Idle",
    "IllegalTransitionError",
    "Resizing",
    "Target",
    "TextEditing",
    "available_aspect_ratios",
    "calculate_aspect_ratio",
    "compute_scale",
    "parse_aspect_ratio",
    "resize_to_aspect_ratio",
    "size_to_composition",
    "size_to_display",
    "to_composition",
    "to_display",
]

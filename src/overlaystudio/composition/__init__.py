"""Composition engine: per-frame state of a composition."""

from .animator import OverlayAnimator, WordAnimation
from .engine import (
    CompositionEngine,
    FrameOutOfRangeError,
    FrameState,
    OverlayLayer,
    VideoLayer,
    WordState,
)
from .spring import SpringConfig, interpolate, measure_spring, spring, spring_calculation

__all__ = [
    "CompositionEngine",
    "FrameOutOfRangeError",
    "FrameState",
    "OverlayAnimator",
    "OverlayLayer",
    "SpringConfig",
    "VideoLayer",
    "WordAnimation",
    "WordState",
    "interpolate",
    "measure_spring",
    "spring",
    "spring_calculation",
]

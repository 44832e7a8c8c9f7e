"""Frame-indexed compositing of a video and its text overlays.

``CompositionEngine.render_frame`` is the single read path shared by the
preview and the headless renderer. It has no state besides the composition
it was built from, so frames can be evaluated in any order or in parallel.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from overlaystudio.models.composition import Composition
from overlaystudio.models.geometry import FrameSize, Point
from overlaystudio.models.overlay import Overlay

from .animator import OverlayAnimator

logger = logging.getLogger(__name__)


class FrameOutOfRangeError(ValueError):
    """Raised when a frame outside ``[0, duration_in_frames)`` is requested."""


@dataclass(frozen=True)
class WordState:
    text: str
    index: int
    opacity: float
    offset_y: float


@dataclass(frozen=True)
class VideoLayer:
    source: str
    position: Point
    size: FrameSize
    source_time: float
    fps: int


@dataclass(frozen=True)
class OverlayLayer:
    overlay_id: str
    text: str
    position: Point
    local_frame: int
    words: tuple[WordState, ...]


@dataclass(frozen=True)
class FrameState:
    """Everything visible in one frame, in paint order."""

    frame_index: int
    size: FrameSize
    video: VideoLayer | None
    overlays: tuple[OverlayLayer, ...]


class CompositionEngine:
    """Produces the visual state of any frame of a composition.

    Args:
        composition: Snapshot to draw. Never mutated.
        animator: Word animation model; the default must match the preview.
    """

    def __init__(
        self,
        composition: Composition,
        animator: OverlayAnimator | None = None,
    ) -> None:
        self.composition = composition
        self.animator = animator or OverlayAnimator()

    @property
    def duration_in_frames(self) -> int:
        return self.composition.duration_in_frames

    def visible_overlays(self, frame_index: int) -> tuple[Overlay, ...]:
        """Overlays whose visibility window contains ``frame_index``, in paint order."""
        self._check_frame(frame_index)
        duration = self.composition.duration_in_frames
        return tuple(
            o for o in self.composition.overlays if o.is_visible(frame_index, duration)
        )

    def render_frame(self, frame_index: int) -> FrameState:
        """Compute the state of frame ``frame_index``.

        Raises:
            FrameOutOfRangeError: If the frame is outside the composition.
        """
        overlays = self.visible_overlays(frame_index)
        return FrameState(
            frame_index=frame_index,
            size=self.composition.size,
            video=self._video_layer(frame_index),
            overlays=tuple(self._overlay_layer(o, frame_index) for o in overlays),
        )

    def iter_frames(self, start: int = 0, stop: int | None = None) -> Iterator[FrameState]:
        stop = self.duration_in_frames if stop is None else stop
        for frame_index in range(start, stop):
            yield self.render_frame(frame_index)

    def _check_frame(self, frame_index: int) -> None:
        if not 0 <= frame_index < self.composition.duration_in_frames:
            raise FrameOutOfRangeError(
                f"Frame {frame_index} is outside composition of "
                f"{self.composition.duration_in_frames} frames"
            )

    def _video_layer(self, frame_index: int) -> VideoLayer | None:
        if not self.composition.source:
            return None
        placement = self.composition.video
        return VideoLayer(
            source=self.composition.source,
            position=placement.position,
            size=placement.size,
            source_time=frame_index / self.composition.fps,
            fps=self.composition.fps,
        )

    def _overlay_layer(self, overlay: Overlay, frame_index: int) -> OverlayLayer:
        start, _ = overlay.window(self.composition.duration_in_frames)
        # Each overlay animates on its own clock, starting when it appears
        local_frame = frame_index - start
        return OverlayLayer(
            overlay_id=overlay.id,
            text=overlay.text,
            position=overlay.position,
            local_frame=local_frame,
            words=tuple(
                self._word_state(word, index, local_frame)
                for index, word in overlay.word_slots
            ),
        )

    def _word_state(self, word: str, index: int, local_frame: int) -> WordState:
        anim = self.animator.animate_word(local_frame, index, self.composition.fps)
        return WordState(text=word, index=index, opacity=anim.opacity, offset_y=anim.offset_y)

"""Text overlay entity and its pure mutation rules."""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .geometry import FrameSize, Point, ScaleFactor, clamp_point

DEFAULT_OVERLAY_TEXT = "New Text"
DEFAULT_OVERLAY_POSITION = Point(x=50, y=50)


class Overlay(BaseModel):
    """One positioned, optionally time-windowed text element."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique overlay identifier")
    text: str = Field(default="", description="Overlay text; words animate independently")
    position: Point = Field(..., description="Top-left corner in composition pixels")
    start_frame: int | None = Field(
        default=None, ge=0, description="First visible frame (inclusive)"
    )
    end_frame: int | None = Field(
        default=None, ge=1, description="First frame no longer visible (exclusive)"
    )

    @model_validator(mode="after")
    def validate_window(self) -> Overlay:
        if (
            self.start_frame is not None
            and self.end_frame is not None
            and self.end_frame <= self.start_frame
        ):
            raise ValueError(
                f"end_frame ({self.end_frame}) must be greater than "
                f"start_frame ({self.start_frame})"
            )
        return self

    def window(self, duration_in_frames: int) -> tuple[int, int]:
        """Resolve the visibility window against a composition duration."""
        start = self.start_frame if self.start_frame is not None else 0
        end = self.end_frame if self.end_frame is not None else duration_in_frames
        return start, end

    def is_visible(self, frame_index: int, duration_in_frames: int) -> bool:
        start, end = self.window(duration_in_frames)
        return start <= frame_index < end

    @property
    def word_slots(self) -> list[tuple[int, str]]:
        """Words paired with their stagger index.

        The index counts space-separated slots, empty ones included, so
        "a  b" staggers "b" as the third word. Tabs and newlines split a
        slot into several words that share its index.
        """
        return [
            (index, word)
            for index, chunk in enumerate(self.text.split(" "))
            for word in chunk.split()
        ]

    @property
    def words(self) -> list[str]:
        return [word for _, word in self.word_slots]


def new_overlay_id() -> str:
    return uuid.uuid4().hex


def create_overlay(
    text: str = DEFAULT_OVERLAY_TEXT,
    position: Point = DEFAULT_OVERLAY_POSITION,
    *,
    start_frame: int | None = None,
    end_frame: int | None = None,
) -> Overlay:
    """Create an overlay with a fresh unique id."""
    return Overlay(
        id=new_overlay_id(),
        text=text,
        position=position,
        start_frame=start_frame,
        end_frame=end_frame,
    )


def move_overlay(
    overlay: Overlay, delta: Point, scale: ScaleFactor, bounds: FrameSize
) -> Overlay:
    """Translate by a display-space delta, clamped to the composition.

    Args:
        overlay: Overlay to move.
        delta: Pointer movement in display pixels.
        scale: Display-per-composition scale snapshot the delta was measured in.
        bounds: Composition size the position is clamped into.

    Returns:
        A new overlay; the input is unchanged.
    """
    moved = Point(
        x=overlay.position.x + delta.x / scale.x,
        y=overlay.position.y + delta.y / scale.y,
    )
    return place_overlay(overlay, moved, bounds)


def place_overlay(overlay: Overlay, position: Point, bounds: FrameSize) -> Overlay:
    """Set an absolute composition-space position, clamped to ``bounds``."""
    return overlay.model_copy(update={"position": clamp_point(position, bounds)})


def set_text(overlay: Overlay, text: str) -> Overlay:
    return overlay.model_copy(update={"text": text})


def set_window(
    overlay: Overlay, start_frame: int | None, end_frame: int | None
) -> Overlay:
    """Replace the visibility window, re-running validation.

    ``model_copy`` skips validators, so the overlay is rebuilt instead.
    """
    data = overlay.model_dump()
    data.update(start_frame=start_frame, end_frame=end_frame)
    return Overlay.model_validate(data)


def remove_overlay(overlays: tuple[Overlay, ...], overlay_id: str) -> tuple[Overlay, ...]:
    """Return ``overlays`` without the overlay with ``overlay_id``.

    Raises:
        KeyError: If no overlay has that id.
    """
    remaining = tuple(o for o in overlays if o.id != overlay_id)
    if len(remaining) == len(overlays):
        raise KeyError(overlay_id)
    return remaining


def replace_overlay(overlays: tuple[Overlay, ...], updated: Overlay) -> tuple[Overlay, ...]:
    """Swap in ``updated`` at the position of the overlay sharing its id."""
    if not any(o.id == updated.id for o in overlays):
        raise KeyError(updated.id)
    return tuple(updated if o.id == updated.id else o for o in overlays)

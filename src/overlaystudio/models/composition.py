"""Composition aggregate: the unit that is both previewed and exported."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .geometry import FrameSize, Point, clamp_point, round_half_up
from .overlay import Overlay

if TYPE_CHECKING:
    from overlaystudio.media.probe import MediaInfo

# Every timing value (windows, animation loops) is counted in frames at this rate
FPS = 30

# Used before upload metadata resolves; export always re-derives from the media
DEFAULT_DURATION_IN_FRAMES = 30 * FPS
DEFAULT_SIZE = FrameSize(width=1280, height=720)


def frames_for_duration(duration_seconds: float, fps: int = FPS) -> int:
    """Convert a probed media duration to a frame count (half-up rounding)."""
    return max(1, round_half_up(duration_seconds * fps))


class VideoPlacement(BaseModel):
    """Where the source video sits inside the composition."""

    model_config = ConfigDict(frozen=True)

    position: Point = Field(default=Point(x=0, y=0), description="Top-left in composition pixels")
    size: FrameSize = Field(..., description="Displayed video size in composition pixels")


class Composition(BaseModel):
    """Immutable snapshot of everything needed to draw any frame.

    ``overlays`` is in paint order: later overlays are drawn on top.
    ``version`` increases with every committed edit so holders of an older
    snapshot can tell it is stale.
    """

    model_config = ConfigDict(frozen=True)

    version: int = Field(default=1, ge=1)
    source: str | None = Field(
        default=None, description="Source video URL or path; None before upload"
    )
    size: FrameSize = Field(default=DEFAULT_SIZE)
    video: VideoPlacement = Field(default=VideoPlacement(size=DEFAULT_SIZE))
    overlays: tuple[Overlay, ...] = Field(default=())
    fps: int = Field(default=FPS)
    duration_in_frames: int = Field(default=DEFAULT_DURATION_IN_FRAMES, gt=0)

    @field_validator("fps")
    @classmethod
    def validate_fps(cls, v: int) -> int:
        if v != FPS:
            raise ValueError(f"Compositions run at a fixed {FPS} fps, got {v}")
        return v

    @field_validator("overlays")
    @classmethod
    def validate_unique_ids(cls, v: tuple[Overlay, ...]) -> tuple[Overlay, ...]:
        ids = [o.id for o in v]
        if len(ids) != len(set(ids)):
            raise ValueError("Overlay ids must be unique")
        return v

    @classmethod
    def from_media(cls, media: MediaInfo) -> Composition:
        """Create a composition that exactly frames freshly uploaded media."""
        size = FrameSize.coerce(media.width, media.height)
        return cls(
            source=media.url,
            size=size,
            video=VideoPlacement(size=size),
            duration_in_frames=frames_for_duration(media.duration_seconds),
        )

    @property
    def duration_seconds(self) -> float:
        return self.duration_in_frames / self.fps

    def get_overlay(self, overlay_id: str) -> Overlay | None:
        for overlay in self.overlays:
            if overlay.id == overlay_id:
                return overlay
        return None

    def evolve(self, **changes: object) -> Composition:
        """Return a validated copy with ``changes`` applied and the version bumped."""
        data = self.model_dump()
        data.update(changes)
        data["version"] = self.version + 1
        return Composition.model_validate(data)

    def with_size(self, size: FrameSize) -> Composition:
        """Resize the canvas, re-clamping overlays so none ends up off-canvas."""
        overlays = tuple(
            o.model_copy(update={"position": clamp_point(o.position, size)})
            for o in self.overlays
        )
        video = self.video.model_copy(
            update={"position": clamp_point(self.video.position, size)}
        )
        return self.evolve(size=size, overlays=overlays, video=video)

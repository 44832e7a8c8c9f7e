"""Export-boundary JSON format.

The browser client posts camelCase documents with positions encoded as
``"x,y"`` strings. That encoding is confined to this module: parsing turns it
into structured points immediately, and ``from_composition`` writes it back.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .composition import DEFAULT_DURATION_IN_FRAMES, Composition, VideoPlacement
from .geometry import FrameSize, format_position, parse_position
from .overlay import Overlay, new_overlay_id


class WireOverlay(BaseModel):
    """A text overlay as sent by the client."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | int | None = Field(default=None)
    text: str = Field(default="")
    position: str = Field(..., description="'x,y' in composition pixels")
    start_frame: int | None = Field(default=None, alias="startFrame")
    end_frame: int | None = Field(default=None, alias="endFrame")

    @field_validator("position")
    @classmethod
    def validate_position(cls, v: str) -> str:
        parse_position(v)
        return v

    def to_overlay(self) -> Overlay:
        return Overlay(
            id=str(self.id) if self.id is not None else new_overlay_id(),
            text=self.text,
            position=parse_position(self.position),
            start_frame=self.start_frame,
            end_frame=self.end_frame,
        )

    @classmethod
    def from_overlay(cls, overlay: Overlay) -> WireOverlay:
        return cls(
            id=overlay.id,
            text=overlay.text,
            position=format_position(overlay.position),
            start_frame=overlay.start_frame,
            end_frame=overlay.end_frame,
        )


class ExportRequest(BaseModel):
    """Document accepted by the export boundary."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    video_data: str = Field(..., min_length=1, alias="videoData")
    video_position: str = Field(default="0,0", alias="videoPosition")
    text_overlays: list[WireOverlay] = Field(default_factory=list, alias="textOverlays")
    composition_size: FrameSize = Field(..., alias="compositionSize")
    video_size: FrameSize = Field(..., alias="videoSize")

    @field_validator("video_position")
    @classmethod
    def validate_video_position(cls, v: str) -> str:
        parse_position(v)
        return v

    def to_composition(
        self, duration_in_frames: int = DEFAULT_DURATION_IN_FRAMES
    ) -> Composition:
        """Build the structured composition this request describes.

        The request carries no duration; callers pass the probed one or accept
        the placeholder, which the renderer replaces anyway.
        """
        return Composition(
            source=self.video_data,
            size=self.composition_size,
            video=VideoPlacement(
                position=parse_position(self.video_position),
                size=self.video_size,
            ),
            overlays=tuple(o.to_overlay() for o in self.text_overlays),
            duration_in_frames=duration_in_frames,
        )

    @classmethod
    def from_composition(cls, composition: Composition) -> ExportRequest:
        """Serialize a composition into the boundary format."""
        if not composition.source:
            raise ValueError("Composition has no source video to export")
        return cls(
            video_data=composition.source,
            video_position=format_position(composition.video.position),
            text_overlays=[WireOverlay.from_overlay(o) for o in composition.overlays],
            composition_size=composition.size,
            video_size=composition.video.size,
        )

    def to_wire(self) -> dict[str, object]:
        """Dump with camelCase keys, omitting absent window bounds."""
        return self.model_dump(by_alias=True, exclude_none=True)

"""Pydantic settings models for Overlay Studio configuration."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from overlaystudio.editor.aspect import ASPECT_RATIOS, parse_aspect_ratio
from overlaystudio.models.geometry import Point, parse_position


class EditorSettings(BaseSettings):
    """Interactive editing defaults."""

    model_config = SettingsConfigDict(extra="ignore")

    min_resize_px: int = Field(
        default=20,
        ge=2,
        description="Smallest width the video box can be resized to, in pixels",
    )
    default_overlay_text: str = Field(
        default="New Text",
        description="Text of newly added overlays",
    )
    default_overlay_position: str = Field(
        default="50,50",
        description="Position of newly added overlays as 'x,y' composition pixels",
    )
    aspect_ratios: list[str] = Field(
        default_factory=lambda: list(ASPECT_RATIOS),
        description="Aspect ratios offered for the composition canvas",
    )

    @field_validator("default_overlay_position")
    @classmethod
    def validate_position(cls, v: str) -> str:
        parse_position(v)
        return v

    @field_validator("aspect_ratios")
    @classmethod
    def validate_aspect_ratios(cls, v: list[str]) -> list[str]:
        for ratio in v:
            parse_aspect_ratio(ratio)
        return v

    @property
    def overlay_position(self) -> Point:
        return parse_position(self.default_overlay_position)


class RenderSettings(BaseSettings):
    """Frame painting and encoding settings."""

    model_config = SettingsConfigDict(extra="ignore")

    codec: str = Field(default="libx264", description="ffmpeg video codec")
    preset: Literal[
        "ultrafast", "superfast", "veryfast", "faster", "fast",
        "medium", "slow", "slower", "veryslow",
    ] = Field(default="medium", description="x264 encoding preset")
    threads: int = Field(default=4, ge=1, le=64, description="Encoder threads")
    font_path: str = Field(
        default="",
        description="TrueType font for overlay text; empty searches system fonts",
    )
    font_size: int = Field(default=24, ge=6, le=400, description="Overlay font size in pixels")


class MediaSettings(BaseSettings):
    """Where uploaded media is stored."""

    model_config = SettingsConfigDict(extra="ignore")

    media_root: str = Field(
        default="public",
        description="Directory media URLs such as /video-1.mp4 resolve against",
    )


class ExportSettings(BaseSettings):
    """Export pipeline settings."""

    model_config = SettingsConfigDict(extra="ignore")

    work_dir: str = Field(
        default="build/exports",
        description="Directory for per-export composition snapshots",
    )
    output_dir: str = Field(
        default="out",
        description="Directory the renderer writes encoded videos to",
    )
    renderer: Literal["subprocess", "inprocess"] = Field(
        default="subprocess",
        description="Run the renderer as a child process or in a worker thread",
    )
    renderer_command: list[str] = Field(
        default_factory=list,
        description="Renderer command prefix; empty means 'python -m overlaystudio render'",
    )
    timeout_seconds: float | None = Field(
        default=600.0,
        gt=0,
        description="Kill the renderer after this many seconds; null disables the limit",
    )
    keep_output: bool = Field(
        default=False,
        description="Keep the encoded file in output_dir after it has been read",
    )


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    editor: EditorSettings = Field(default_factory=EditorSettings)
    render: RenderSettings = Field(default_factory=RenderSettings)
    media: MediaSettings = Field(default_factory=MediaSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    def get_config_problems(self) -> list[str]:
        """Return human-readable problems that would make an export fail."""
        problems = []
        if self.render.font_path and not Path(self.render.font_path).exists():
            problems.append(f"render.font_path does not exist: {self.render.font_path}")
        if not Path(self.media.media_root).is_dir():
            problems.append(f"media.media_root does not exist: {self.media.media_root}")
        return problems

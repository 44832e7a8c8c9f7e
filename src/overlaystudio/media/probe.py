"""Upload boundary: storing source media and reading its metadata.

Uploaded files live under a media root and are addressed by root-relative
URLs such as ``/video-1718000000000.mp4``. Both the editor and the renderer
resolve those URLs through ``resolve_media_path``.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path

from moviepy import VideoFileClip
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class MediaProbeFailure(Exception):
    """Raised when media cannot be opened or lacks usable metadata."""


class MediaInfo(BaseModel):
    """Metadata of a stored source video."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Media-root-relative URL, e.g. /video-1.mp4")
    width: int = Field(..., gt=0, description="Intrinsic width in pixels")
    height: int = Field(..., gt=0, description="Intrinsic height in pixels")
    duration_seconds: float = Field(..., gt=0, description="Duration in seconds")


def resolve_media_path(url: str, media_root: Path | str) -> Path:
    """Map a media URL to a file under ``media_root``.

    Raises:
        MediaProbeFailure: If the URL points outside the media root.
    """
    root = Path(media_root).resolve()
    path = (root / url.lstrip("/")).resolve()
    if not path.is_relative_to(root):
        raise MediaProbeFailure(f"Media URL escapes the media root: {url}")
    return path


def probe_media(path: Path | str, url: str | None = None) -> MediaInfo:
    """Read dimensions and duration of a video file.

    Args:
        path: Video file to inspect.
        url: URL to record in the result. Defaults to ``/<file name>``.

    Returns:
        The probed ``MediaInfo``.

    Raises:
        MediaProbeFailure: If the file is missing, unreadable, or reports no
            positive duration or size.
    """
    path = Path(path)
    if not path.exists():
        raise MediaProbeFailure(f"Media file not found: {path}")

    try:
        clip = VideoFileClip(str(path), audio=False)
    except Exception as exc:
        raise MediaProbeFailure(f"Failed to open media {path}: {exc}") from exc

    try:
        width, height = clip.size
        duration = clip.duration
    finally:
        clip.close()

    if not duration or duration <= 0 or width <= 0 or height <= 0:
        raise MediaProbeFailure(
            f"Media {path} has no usable metadata "
            f"(size={width}x{height}, duration={duration})"
        )

    logger.debug("Probed %s: %dx%d, %.3fs", path, width, height, duration)
    return MediaInfo(
        url=url or f"/{path.name}",
        width=int(width),
        height=int(height),
        duration_seconds=float(duration),
    )


def import_media(source: Path | str, media_root: Path | str) -> MediaInfo:
    """Copy a video into the media root under a unique name and probe it.

    The copy is named ``video-<milliseconds><suffix>``; it is removed again
    if probing fails.
    """
    source = Path(source)
    if not source.is_file():
        raise MediaProbeFailure(f"Media file not found: {source}")

    root = Path(media_root)
    root.mkdir(parents=True, exist_ok=True)
    filename = f"video-{int(time.time() * 1000)}{source.suffix}"
    target = root / filename
    shutil.copyfile(source, target)
    logger.info("Stored upload %s as %s", source, target)

    try:
        return probe_media(target, url=f"/{filename}")
    except MediaProbeFailure:
        target.unlink(missing_ok=True)
        raise

"""Headless renderer: encodes a composition snapshot to H.264.

The renderer never trusts the duration stored in the snapshot. It probes the
source video itself and re-derives ``duration_in_frames`` at 30 fps, then
draws every frame through the same ``CompositionEngine`` the preview uses.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import numpy as np
from moviepy import VideoClip, VideoFileClip

from overlaystudio.composition.engine import CompositionEngine
from overlaystudio.config.settings import RenderSettings
from overlaystudio.export.protocol import RenderRequest, RenderResponse
from overlaystudio.media.probe import MediaInfo, probe_media, resolve_media_path
from overlaystudio.models.composition import Composition, frames_for_duration

from .painter import FramePainter

logger = logging.getLogger(__name__)

Probe = Callable[[Path], MediaInfo]


class CompositionError(Exception):
    """Raised when a composition cannot be rendered or encoded."""


class Renderer:
    """Renders ``RenderRequest`` snapshots to video files.

    Args:
        settings: Encoder and font settings.
        media_root: Directory that ``composition.source`` URLs resolve against
            when the request carries no explicit source path.
        probe: Media probe used to re-derive the duration.
    """

    def __init__(
        self,
        settings: RenderSettings | None = None,
        media_root: Path | str = "public",
        probe: Probe = probe_media,
    ) -> None:
        self.settings = settings or RenderSettings()
        self.media_root = Path(media_root)
        self._probe = probe

    def resolve_source(self, request: RenderRequest) -> Path:
        """Locate the source video of ``request``.

        Raises:
            CompositionError: If the composition has no source.
        """
        if request.source_path:
            return Path(request.source_path)
        source = request.composition.source
        if not source:
            raise CompositionError("Composition has no source video")
        return resolve_media_path(source, self.media_root)

    def prepare_composition(self, request: RenderRequest) -> tuple[Composition, Path]:
        """Return the snapshot with its duration re-derived from the source.

        Returns:
            Tuple of (composition to render, source video path).
        """
        source_path = self.resolve_source(request)
        info = self._probe(source_path)
        duration = frames_for_duration(info.duration_seconds, request.composition.fps)
        logger.info(
            "Source %s: %.3fs -> %d frames", source_path, info.duration_seconds, duration
        )
        composition = request.composition.model_copy(update={"duration_in_frames": duration})
        return composition, source_path

    def render(self, request: RenderRequest) -> RenderResponse:
        """Render every frame of ``request`` and encode it.

        Fonts and encoder options come from ``request.render`` when the
        snapshot carries them and from this renderer's settings otherwise.

        Returns:
            Where the video was written and how many frames it has.

        Raises:
            CompositionError: If the source cannot be read or encoding fails.
            MediaProbeFailure: If the source cannot be probed.
        """
        composition, source_path = self.prepare_composition(request)
        settings = request.render or self.settings
        output_path = Path(request.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        engine = CompositionEngine(composition)
        painter = FramePainter(
            font_size=settings.font_size, font_path=settings.font_path
        )

        try:
            source = VideoFileClip(str(source_path), audio=False)
        except Exception as exc:
            raise CompositionError(f"Failed to load source video {source_path}: {exc}") from exc

        rendered: set[int] = set()
        last_frame = composition.duration_in_frames - 1

        def frame_function(t: float) -> np.ndarray:
            # moviepy asks by time; snap to the frame grid
            index = min(int(round(t * composition.fps)), last_frame)
            rendered.add(index)
            return painter.paint(engine.render_frame(index), source)

        logger.info(
            "Encoding %s (%dx%d, %d frames, %s)",
            output_path,
            composition.size.width,
            composition.size.height,
            composition.duration_in_frames,
            settings.codec,
        )
        clip = None
        try:
            clip = VideoClip(
                frame_function=frame_function,
                duration=composition.duration_in_frames / composition.fps,
            ).with_fps(composition.fps)
            clip.write_videofile(
                str(output_path),
                codec=settings.codec,
                fps=composition.fps,
                audio=False,
                preset=settings.preset,
                threads=settings.threads,
                logger=None,  # Suppress moviepy progress bar (we use Rich)
            )
        except Exception as exc:
            raise CompositionError(f"Failed to encode video: {exc}") from exc
        finally:
            if clip is not None:
                clip.close()
            source.close()

        if not output_path.exists():
            raise CompositionError(f"Encoder produced no file at {output_path}")

        logger.info("Rendered %s", output_path)
        return RenderResponse(
            output_path=str(output_path),
            duration_in_frames=composition.duration_in_frames,
            frames_rendered=len(rendered),
        )

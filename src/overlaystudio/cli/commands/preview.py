"""Preview command: draw a single composition frame to an image."""

import typer
from moviepy import VideoFileClip
from PIL import Image

from overlaystudio.cli.ui.console import print_error, print_success
from overlaystudio.composition.engine import CompositionEngine, FrameOutOfRangeError
from overlaystudio.config import load_settings
from overlaystudio.media.probe import MediaProbeFailure, probe_media, resolve_media_path
from overlaystudio.models.composition import frames_for_duration
from overlaystudio.render.painter import FramePainter

from .common import apply_aspect_ratio, read_request


def preview(
    request_file: str = typer.Argument(..., help="Export request JSON file."),
    frame: int = typer.Option(0, "--frame", "-f", help="Frame index to draw."),
    output: str = typer.Option(
        "preview.png",
        "--output",
        "-o",
        help="Image file to write.",
    ),
    aspect_ratio: str | None = typer.Option(
        None,
        "--aspect-ratio",
        "-a",
        help="Resize the canvas to this ratio (e.g. 4:3) before drawing.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """Draw one frame exactly as the export would, without encoding a video."""
    settings = load_settings(config_file)
    request = apply_aspect_ratio(read_request(request_file), aspect_ratio, settings)

    try:
        source_path = resolve_media_path(request.video_data, settings.media.media_root)
        info = probe_media(source_path, url=request.video_data)
    except MediaProbeFailure as exc:
        print_error(str(exc))
        raise typer.Exit(code=1)

    composition = request.to_composition(frames_for_duration(info.duration_seconds))
    engine = CompositionEngine(composition)

    try:
        state = engine.render_frame(frame)
    except FrameOutOfRangeError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1)

    painter = FramePainter(
        font_size=settings.render.font_size, font_path=settings.render.font_path
    )
    source = VideoFileClip(str(source_path), audio=False)
    try:
        image = Image.fromarray(painter.paint(state, source))
    finally:
        source.close()

    image.save(output)
    print_success(
        f"Frame {frame} of {composition.duration_in_frames} "
        f"({len(state.overlays)} overlays visible) written to {output}"
    )

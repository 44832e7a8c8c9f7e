"""Export command: render an export request to an MP4 file."""

import asyncio
from pathlib import Path

import typer
from rich.markup import escape

from overlaystudio.cli.ui.console import (
    console,
    print_error,
    print_header,
    print_info,
    print_muted,
    print_success,
    print_warning,
)
from overlaystudio.cli.ui.progress import spinner
from overlaystudio.config import load_settings
from overlaystudio.export.base import ExportTimeout, RenderProcessFailure
from overlaystudio.export.pipeline import ExportPipeline
from overlaystudio.media.probe import MediaProbeFailure

from .common import apply_aspect_ratio, read_request


def export(
    request_file: str = typer.Argument(..., help="Export request JSON file."),
    output: str = typer.Option(
        "",
        "--output",
        "-o",
        help="Where to save the MP4. Defaults to the generated video_<token>.mp4 name.",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Seconds before the renderer is killed. Overrides config.",
    ),
    aspect_ratio: str | None = typer.Option(
        None,
        "--aspect-ratio",
        "-a",
        help="Resize the canvas to this ratio (e.g. 4:3) before rendering.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """Render a composition with its animated text overlays to H.264 video.

    The composition is frozen into a snapshot and rendered by a separate
    renderer process; its duration always follows the source video.
    """
    settings = load_settings(config_file)
    request = apply_aspect_ratio(read_request(request_file), aspect_ratio, settings)
    pipeline = ExportPipeline(settings)

    print_header("Export")
    print_info(f"Source: {request.video_data}")
    print_info(
        f"Canvas: {request.composition_size.width}x{request.composition_size.height}, "
        f"{len(request.text_overlays)} overlays"
    )

    try:
        with spinner("Rendering video..."):
            result = asyncio.run(pipeline.export(request, timeout=timeout))
    except ExportTimeout as exc:
        print_error(str(exc))
        print_muted("Raise export.timeout_seconds or pass --timeout.")
        raise typer.Exit(code=1)
    except RenderProcessFailure as exc:
        print_error(f"Render failed: {exc}")
        if exc.stderr:
            print_muted(escape(exc.stderr.strip()))
        raise typer.Exit(code=1)
    except MediaProbeFailure as exc:
        print_error(str(exc))
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        console.print("\n")
        print_warning("Export interrupted.")
        raise typer.Exit(code=0)

    output_path = Path(output) if output else Path(result.filename)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.payload)
    print_success(
        f"Exported {result.duration_in_frames} frames "
        f"({len(result.payload) / 1_000_000:.1f} MB) to {output_path}"
    )

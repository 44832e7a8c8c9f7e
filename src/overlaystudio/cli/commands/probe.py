"""Probe command: store a source video and print its starting export request."""

import json

import typer

from overlaystudio.cli.ui.console import err_console, print_error
from overlaystudio.config import load_settings
from overlaystudio.editor.aspect import available_aspect_ratios, calculate_aspect_ratio
from overlaystudio.media.probe import MediaProbeFailure, import_media, probe_media
from overlaystudio.models.composition import Composition
from overlaystudio.models.wire import ExportRequest


def probe(
    media: str = typer.Argument(..., help="Video file to inspect."),
    store: bool = typer.Option(
        True,
        "--store/--no-store",
        help="Copy the video into the media root like an upload does.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """Read a video's size and duration and print an export request for it.

    The request on stdout frames the whole video with no overlays; save it
    to a file and edit it to feed 'overlaystudio preview' and
    'overlaystudio export'.
    """
    settings = load_settings(config_file)

    try:
        info = import_media(media, settings.media.media_root) if store else probe_media(media)
    except MediaProbeFailure as exc:
        print_error(str(exc))
        raise typer.Exit(code=1)

    composition = Composition.from_media(info)
    ratio = calculate_aspect_ratio(info.width, info.height)

    err_console.print(
        f"[bold]{info.url}[/bold]: {info.width}x{info.height}, "
        f"{info.duration_seconds:.2f}s, {composition.duration_in_frames} frames, ratio {ratio}"
    )
    err_console.print(
        f"[dim]Aspect ratios: {', '.join(available_aspect_ratios(ratio))}[/dim]"
    )
    typer.echo(json.dumps(ExportRequest.from_composition(composition).to_wire(), indent=2))

"""Render command: the out-of-process renderer behind exports.

Prints exactly one ``RENDER_RESULT:`` line on stdout when it succeeds and
exits non-zero otherwise. Everything else goes to stderr.
"""

from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.markup import escape

from overlaystudio.cli.ui.console import ERROR_COLOR, err_console
from overlaystudio.config import load_settings
from overlaystudio.export.protocol import ProtocolError, format_result_line
from overlaystudio.export.snapshot import load_request
from overlaystudio.media.probe import MediaProbeFailure
from overlaystudio.render.renderer import CompositionError, Renderer


def render(
    snapshot: str = typer.Argument(..., help="Render snapshot JSON written by an export."),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """Render a snapshot to video. Invoked by 'overlaystudio export'."""
    settings = load_settings(config_file)

    try:
        request = load_request(snapshot)
    except (OSError, ValidationError, ProtocolError) as exc:
        _fail(f"Cannot read snapshot {snapshot}: {exc}")

    renderer = Renderer(settings=settings.render, media_root=settings.media.media_root)
    try:
        response = renderer.render(request)
    except (CompositionError, MediaProbeFailure) as exc:
        _fail(str(exc))

    typer.echo(format_result_line(response))


def _fail(message: str) -> NoReturn:
    err_console.print(f"[{ERROR_COLOR}]\\[x][/{ERROR_COLOR}] {escape(message)}")
    raise typer.Exit(code=1)

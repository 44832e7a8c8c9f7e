"""Main Typer application for the Overlay Studio CLI."""

import logging

import typer
from rich.logging import RichHandler

from overlaystudio import __version__
from overlaystudio.cli.commands.clean import clean
from overlaystudio.cli.commands.config_cmd import config
from overlaystudio.cli.commands.export import export
from overlaystudio.cli.commands.preview import preview
from overlaystudio.cli.commands.probe import probe
from overlaystudio.cli.commands.render import render
from overlaystudio.cli.ui.console import console, err_console

app = typer.Typer(
    name="overlaystudio",
    help="Place animated text overlays on a video and export it as MP4.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"overlaystudio version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route log records to stderr through Rich; DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Log pipeline and renderer activity.",
    ),
) -> None:
    """Overlay Studio: animated text overlays for video.

    Quick start: run [bold]overlaystudio probe clip.mp4 > request.json[/bold],
    add text overlays to the request, check a frame with
    [bold]overlaystudio preview request.json --frame 45[/bold], then
    [bold]overlaystudio export request.json[/bold].
    """
    configure_logging(verbose)


# Register commands from individual modules
app.command()(probe)
app.command()(preview)
app.command()(export)
app.command()(render)
app.command()(config)
app.command()(clean)

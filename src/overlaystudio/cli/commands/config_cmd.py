"""Config command: view current configuration settings."""

import typer

from overlaystudio.cli.ui.console import (
    console,
    print_header,
    print_key_value_table,
    print_muted,
)
from overlaystudio.cli.ui.setup import run_setup_check
from overlaystudio.config import load_settings


def config(
    check: bool = typer.Option(
        False,
        "--check",
        help="Validate configured paths and system dependencies.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """View current configuration and validate setup.

    Displays all configuration values loaded from environment variables
    and config files. Use --check to verify that the media root and font
    exist and that FFmpeg is installed.
    """
    settings = load_settings(config_file)

    if check:
        ok = run_setup_check(settings)
        if not ok:
            raise typer.Exit(code=1)
        return

    print_header("Overlay Studio Configuration")

    print_key_value_table(
        "Editor",
        {
            "Min Resize": f"{settings.editor.min_resize_px}px",
            "Default Text": settings.editor.default_overlay_text,
            "Default Position": settings.editor.default_overlay_position,
            "Aspect Ratios": settings.editor.aspect_ratios,
        },
    )
    console.print()

    print_key_value_table(
        "Rendering",
        {
            "Codec": settings.render.codec,
            "Preset": settings.render.preset,
            "Threads": settings.render.threads,
            "Font": settings.render.font_path,
            "Font Size": f"{settings.render.font_size}px",
        },
    )
    console.print()

    timeout = settings.export.timeout_seconds
    print_key_value_table(
        "Export",
        {
            "Media Root": settings.media.media_root,
            "Work Directory": settings.export.work_dir,
            "Output Directory": settings.export.output_dir,
            "Renderer": settings.export.renderer,
            "Renderer Command": " ".join(settings.export.renderer_command),
            "Timeout": f"{timeout:g}s" if timeout is not None else None,
            "Keep Output": settings.export.keep_output,
        },
    )

    print_muted("\nTip: use 'overlaystudio config --check' to validate your setup.")
    print_muted("Config file: use --config to specify a custom YAML config.")

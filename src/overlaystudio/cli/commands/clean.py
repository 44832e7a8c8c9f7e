"""Clean command: remove export snapshots and rendered videos."""

import shutil
from pathlib import Path

import typer

from overlaystudio.cli.ui.console import print_info, print_success, print_warning
from overlaystudio.config import load_settings
from overlaystudio.export.snapshot import SnapshotStore


def clean(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Skip confirmation prompt and remove immediately.",
    ),
    config_file: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration YAML file.",
    ),
) -> None:
    """Remove leftover export snapshots and rendered videos.

    Deletes the export work directory and the renderer output directory.
    Uploaded source media in the media root is left alone.
    """
    settings = load_settings(config_file)
    work_dir = Path(settings.export.work_dir)
    output_dir = Path(settings.export.output_dir)

    if not _has_files(work_dir) and not _has_files(output_dir):
        print_info("Nothing to remove.")
        return

    if not force:
        print_warning(f"This will remove all files in '{work_dir}/' and '{output_dir}/'.")
        confirmed = typer.confirm("Are you sure?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit()

    SnapshotStore(work_dir).clear()
    if output_dir.exists():
        shutil.rmtree(output_dir)
    print_success(f"Removed '{work_dir}/' contents and '{output_dir}/'.")


def _has_files(directory: Path) -> bool:
    return directory.is_dir() and any(directory.iterdir())

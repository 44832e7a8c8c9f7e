"""Helpers shared by the commands that read export requests."""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.markup import escape

from overlaystudio.cli.ui.console import print_error
from overlaystudio.config.settings import Settings
from overlaystudio.editor.session import EditSession
from overlaystudio.models.geometry import CompositionValidationError
from overlaystudio.models.wire import ExportRequest


def read_request(path: str) -> ExportRequest:
    """Load an export request document, exiting with code 1 if it is invalid."""
    request_path = Path(path)
    if not request_path.exists():
        print_error(f"Request file not found: {request_path}")
        raise typer.Exit(code=1)
    try:
        return ExportRequest.model_validate_json(request_path.read_text(encoding="utf-8"))
    except ValidationError as exc:
        print_error(f"Invalid export request: {escape(str(exc))}")
        raise typer.Exit(code=1)


def apply_aspect_ratio(
    request: ExportRequest, ratio: str | None, settings: Settings
) -> ExportRequest:
    """Resize the request's canvas to ``ratio`` the way the editor toolbar does."""
    if not ratio:
        return request
    session = EditSession(
        request.to_composition(),
        min_size=settings.editor.min_resize_px,
        default_text=settings.editor.default_overlay_text,
        default_position=settings.editor.overlay_position,
    )
    try:
        session.set_aspect_ratio(ratio)
    except CompositionValidationError as exc:
        print_error(str(exc))
        raise typer.Exit(code=1)
    return ExportRequest.from_composition(session.snapshot())

"""Messages exchanged between the export pipeline and the renderer.

The pipeline writes a ``RenderRequest`` to a JSON snapshot and hands the
renderer only its path. The renderer reports back with a single stdout line
``RENDER_RESULT:{...}`` whose payload is a ``RenderResponse``; any other
output is diagnostic and ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError

from overlaystudio.config.settings import RenderSettings
from overlaystudio.models.composition import Composition

SCHEMA_VERSION = 1
RESULT_MARKER = "RENDER_RESULT:"


class ProtocolError(ValueError):
    """Raised when renderer output carries no valid result line."""


class RenderRequest(BaseModel):
    """Everything the renderer needs, frozen at export time."""

    schema_version: int = Field(default=SCHEMA_VERSION, description="Snapshot format version")
    export_token: str = Field(..., min_length=1, description="Unique id of this export")
    composition: Composition = Field(..., description="Composition snapshot to render")
    source_path: str | None = Field(
        default=None,
        description="Filesystem path of the source video; None resolves composition.source",
    )
    output_path: str = Field(..., min_length=1, description="Where to write the encoded video")
    render: RenderSettings | None = Field(
        default=None,
        description="Font and encoder settings of the exporting caller; None uses the renderer's own",
    )


class RenderResponse(BaseModel):
    """Result reported by a successful render."""

    output_path: str
    duration_in_frames: int = Field(..., gt=0)
    frames_rendered: int = Field(..., ge=0)


def format_result_line(response: RenderResponse) -> str:
    return f"{RESULT_MARKER}{response.model_dump_json()}"


def parse_result_line(output: str) -> RenderResponse:
    """Extract the last result line from renderer stdout.

    Raises:
        ProtocolError: If no line carries the marker or its payload is invalid.
    """
    lines = [line for line in output.splitlines() if line.startswith(RESULT_MARKER)]
    if not lines:
        raise ProtocolError("Renderer output has no result line")
    payload = lines[-1][len(RESULT_MARKER):]
    try:
        return RenderResponse.model_validate_json(payload)
    except ValidationError as exc:
        raise ProtocolError(f"Malformed renderer result: {exc}") from exc

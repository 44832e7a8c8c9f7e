"""Export pipeline and renderer backends."""

from .base import ExportError, ExportTimeout, RendererProtocol, RenderProcessFailure
from .factory import create_renderer
from .pipeline import ExportPipeline, ExportResult, new_export_token
from .protocol import (
    RESULT_MARKER,
    ProtocolError,
    RenderRequest,
    RenderResponse,
    format_result_line,
    parse_result_line,
)
from .snapshot import SnapshotStore, load_request
from .subprocess_renderer import SubprocessRenderer

__all__ = [
    "RESULT_MARKER",
    "ExportError",
    "ExportPipeline",
    "ExportResult",
    "ExportTimeout",
    "ProtocolError",
    "RenderProcessFailure",
    "RenderRequest",
    "RenderResponse",
    "RendererProtocol",
    "SnapshotStore",
    "SubprocessRenderer",
    "create_renderer",
    "format_result_line",
    "load_request",
    "new_export_token",
    "parse_result_line",
]

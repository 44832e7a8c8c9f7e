"""Renderer protocol and export errors.

Defines the structural protocol every renderer backend satisfies. Using
Protocol instead of ABC allows duck-typing: test doubles and alternative
backends conform by shape alone.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from .protocol import RenderResponse


class ExportError(Exception):
    """Base class for export failures."""


class RenderProcessFailure(ExportError):
    """The renderer failed: non-zero exit, no result line, or no output file.

    Args:
        message: What went wrong.
        returncode: Exit status of the renderer process, if it ran as one.
        stderr: Tail of the renderer's diagnostic output.
    """

    def __init__(self, message: str, returncode: int | None = None, stderr: str = "") -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ExportTimeout(ExportError):
    """The renderer did not finish within the caller's timeout."""


@runtime_checkable
class RendererProtocol(Protocol):
    """Protocol for renderer backends."""

    async def render(self, snapshot_path: Path, timeout: float | None = None) -> RenderResponse:
        """Render the snapshot at ``snapshot_path`` and report the result."""
        ...

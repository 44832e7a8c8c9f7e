"""Renderer backend that renders in a worker thread of the calling process.

Encoding is synchronous and long-running, so it is pushed to a thread via
asyncio.to_thread() to keep the event loop free. A timeout abandons the
thread rather than stopping it; the thread deletes its output when it
eventually finishes. Use the subprocess backend when a hard kill is required.
"""

import asyncio
import logging
import threading
from pathlib import Path

from overlaystudio.media.probe import MediaProbeFailure
from overlaystudio.render.renderer import CompositionError, Renderer

from .base import ExportTimeout, RenderProcessFailure
from .protocol import RenderRequest, RenderResponse
from .snapshot import load_request

logger = logging.getLogger(__name__)


class InProcessRenderer:
    """Renderer implementing ``RendererProtocol`` on top of ``Renderer``."""

    def __init__(self, renderer: Renderer | None = None) -> None:
        self.renderer = renderer or Renderer()

    async def render(self, snapshot_path: Path, timeout: float | None = None) -> RenderResponse:
        """Load the snapshot and render it in a thread.

        Raises:
            ExportTimeout: If the timeout expired.
            RenderProcessFailure: If rendering failed or produced no file.
        """
        request = load_request(snapshot_path)
        abandoned = threading.Event()
        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(self._render, request, abandoned), timeout
            )
        except TimeoutError:
            abandoned.set()
            logger.warning(
                "Export %s timed out; %s will be removed when its render thread finishes",
                request.export_token,
                request.output_path,
            )
            raise ExportTimeout(f"Renderer did not finish within {timeout}s") from None
        except (CompositionError, MediaProbeFailure) as exc:
            raise RenderProcessFailure(f"Rendering failed: {exc}") from exc

        if not Path(response.output_path).exists():
            raise RenderProcessFailure(
                f"Renderer reported {response.output_path} but it does not exist"
            )
        return response

    def _render(self, request: RenderRequest, abandoned: threading.Event) -> RenderResponse:
        response = self.renderer.render(request)
        if abandoned.is_set():
            Path(response.output_path).unlink(missing_ok=True)
            logger.info(
                "Removed %s of abandoned export %s", response.output_path, request.export_token
            )
        return response

"""Export orchestration: from a boundary request to encoded bytes.

Each export freezes its composition into a snapshot file, hands the
renderer nothing but that file's path, and reads back the encoded video.
The snapshot (and, unless configured otherwise, the encoded file) is
removed whether the render succeeds or fails.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from overlaystudio.config.settings import Settings
from overlaystudio.media.probe import resolve_media_path
from overlaystudio.models.composition import Composition
from overlaystudio.models.wire import ExportRequest

from .base import ExportError, RendererProtocol
from .protocol import RenderRequest
from .snapshot import SnapshotStore

logger = logging.getLogger(__name__)

CONTENT_TYPE = "video/mp4"


def new_export_token() -> str:
    """Millisecond timestamp plus a random suffix, unique per export."""
    return f"{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class ExportResult:
    """An encoded video ready to be sent as a download."""

    payload: bytes
    filename: str
    duration_in_frames: int
    content_type: str = CONTENT_TYPE

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


class ExportPipeline:
    """Runs exports against a renderer backend.

    Args:
        settings: Resolved application settings.
        renderer: Backend to render with. Defaults to the one selected by
            ``settings.export.renderer``.
        snapshots: Snapshot store. Defaults to one in ``settings.export.work_dir``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        renderer: RendererProtocol | None = None,
        snapshots: SnapshotStore | None = None,
    ) -> None:
        self.settings = settings or Settings()
        if renderer is None:
            from .factory import create_renderer

            renderer = create_renderer(self.settings)
        self.renderer = renderer
        self.snapshots = snapshots or SnapshotStore(self.settings.export.work_dir)

    def prepare(self, request: ExportRequest, export_token: str) -> RenderRequest:
        """Convert a boundary request into the renderer's snapshot.

        Raises:
            MediaProbeFailure: If the video URL escapes the media root.
        """
        composition = request.to_composition()
        source_path = resolve_media_path(composition.source, self.settings.media.media_root)
        output_path = Path(self.settings.export.output_dir) / f"video_{export_token}.mp4"
        return RenderRequest(
            export_token=export_token,
            composition=composition,
            source_path=str(source_path),
            output_path=str(output_path),
            render=self.settings.render,
        )

    async def export(
        self,
        request: ExportRequest | dict[str, Any],
        timeout: float | None = None,
    ) -> ExportResult:
        """Render ``request`` and return the encoded video.

        Args:
            request: Boundary request, or its raw camelCase JSON document.
            timeout: Seconds before the renderer is killed. Defaults to
                ``settings.export.timeout_seconds``.

        Returns:
            The encoded video and its download metadata.

        Raises:
            pydantic.ValidationError: If a raw request document is malformed.
            ExportTimeout: If the renderer did not finish in time.
            RenderProcessFailure: If the renderer failed.
        """
        if not isinstance(request, ExportRequest):
            request = ExportRequest.model_validate(request)
        if timeout is None:
            timeout = self.settings.export.timeout_seconds

        export_token = new_export_token()
        render_request = self.prepare(request, export_token)
        snapshot_path = self.snapshots.write(render_request)
        output_paths = {Path(render_request.output_path)}
        logger.info(
            "Export %s started: %d overlays, %dx%d",
            export_token,
            len(render_request.composition.overlays),
            render_request.composition.size.width,
            render_request.composition.size.height,
        )

        try:
            response = await self.renderer.render(snapshot_path, timeout=timeout)
            output_path = Path(response.output_path)
            output_paths.add(output_path)
            payload = output_path.read_bytes()
        except ExportError as exc:
            logger.error("Export %s failed: %s", export_token, exc)
            raise
        finally:
            self.snapshots.delete(snapshot_path)
            if not self.settings.export.keep_output:
                for path in output_paths:
                    path.unlink(missing_ok=True)

        logger.info(
            "Export %s finished: %d frames, %d bytes",
            export_token,
            response.duration_in_frames,
            len(payload),
        )
        return ExportResult(
            payload=payload,
            filename=output_path.name,
            duration_in_frames=response.duration_in_frames,
        )

    async def export_composition(
        self, composition: Composition, timeout: float | None = None
    ) -> ExportResult:
        """Export an editor snapshot (e.g. ``EditSession.snapshot()``)."""
        return await self.export(ExportRequest.from_composition(composition), timeout=timeout)

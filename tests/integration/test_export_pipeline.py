"""Integration tests for the export pipeline with a stand-in renderer."""

import asyncio
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from overlaystudio.config.settings import RenderSettings, Settings
from overlaystudio.export.base import ExportTimeout, RenderProcessFailure
from overlaystudio.export.pipeline import ExportPipeline, new_export_token
from overlaystudio.export.protocol import RenderRequest, RenderResponse
from overlaystudio.export.snapshot import load_request
from overlaystudio.media.probe import MediaProbeFailure
from overlaystudio.models.composition import Composition


class FakeRenderer:
    """Writes a fixed payload where the snapshot asks for it."""

    def __init__(self, error: Exception | None = None, payload: bytes = b"fake-mp4") -> None:
        self.error = error
        self.payload = payload
        self.calls: list[tuple[Path, float | None]] = []
        self.snapshots: list[dict] = []
        self.requests: list[RenderRequest] = []

    async def render(self, snapshot_path: Path, timeout: float | None = None) -> RenderResponse:
        self.calls.append((snapshot_path, timeout))
        self.snapshots.append(json.loads(snapshot_path.read_text()))
        request = load_request(snapshot_path)
        self.requests.append(request)
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        output = Path(request.output_path)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(self.payload + request.export_token.encode())
        return RenderResponse(
            output_path=str(output), duration_in_frames=372, frames_rendered=372
        )


@pytest.fixture
def document() -> dict:
    return {
        "videoData": "/video-1.mp4",
        "videoPosition": "0,0",
        "textOverlays": [{"id": "a", "text": "Hello world", "position": "100,200"}],
        "compositionSize": {"width": 1280, "height": 720},
        "videoSize": {"width": 1280, "height": 720},
    }


def _with_export(settings: Settings, **changes: object) -> Settings:
    return settings.model_copy(
        update={"export": settings.export.model_copy(update=changes)}
    )


def _work_files(settings: Settings) -> list[Path]:
    return list(Path(settings.export.work_dir).iterdir())


class TestExport:
    async def test_returns_video(self, settings: Settings, document: dict) -> None:
        pipeline = ExportPipeline(settings, renderer=FakeRenderer())
        result = await pipeline.export(document)

        assert result.payload.startswith(b"fake-mp4")
        assert result.filename.startswith("video_")
        assert result.filename.endswith(".mp4")
        assert result.duration_in_frames == 372
        assert result.content_type == "video/mp4"
        assert result.content_disposition == f'attachment; filename="{result.filename}"'

    async def test_snapshot_carries_resolved_source(
        self, settings: Settings, document: dict, media_root: Path
    ) -> None:
        renderer = FakeRenderer()
        await ExportPipeline(settings, renderer=renderer).export(document)

        snapshot_path, _ = renderer.calls[0]
        assert snapshot_path.parent == Path(settings.export.work_dir)
        assert snapshot_path.name.startswith("render-")
        snapshot = renderer.snapshots[0]
        assert snapshot["source_path"] == str((media_root / "video-1.mp4").resolve())
        assert snapshot["composition"]["overlays"][0]["text"] == "Hello world"
        assert snapshot["output_path"].startswith(settings.export.output_dir)

    async def test_snapshot_carries_render_settings(
        self, settings: Settings, document: dict
    ) -> None:
        render = RenderSettings(font_size=48, preset="ultrafast", threads=2)
        settings = settings.model_copy(update={"render": render})
        renderer = FakeRenderer()
        await ExportPipeline(settings, renderer=renderer).export(document)

        snapshot = renderer.snapshots[0]
        assert snapshot["render"]["font_size"] == 48
        assert snapshot["render"]["preset"] == "ultrafast"
        assert renderer.requests[0].render == render

    async def test_cleans_up(self, settings: Settings, document: dict) -> None:
        await ExportPipeline(settings, renderer=FakeRenderer()).export(document)
        assert _work_files(settings) == []
        assert not any(Path(settings.export.output_dir).glob("*.mp4"))

    async def test_keep_output(self, settings: Settings, document: dict) -> None:
        settings = _with_export(settings, keep_output=True)
        result = await ExportPipeline(settings, renderer=FakeRenderer()).export(document)
        kept = Path(settings.export.output_dir) / result.filename
        assert kept.read_bytes() == result.payload
        assert _work_files(settings) == []

    async def test_failure_cleans_up_and_reraises(
        self, settings: Settings, document: dict
    ) -> None:
        renderer = FakeRenderer(error=RenderProcessFailure("boom", returncode=1))
        with pytest.raises(RenderProcessFailure, match="boom"):
            await ExportPipeline(settings, renderer=renderer).export(document)
        assert _work_files(settings) == []

    async def test_timeout_propagates(self, settings: Settings, document: dict) -> None:
        renderer = FakeRenderer(error=ExportTimeout("too slow"))
        with pytest.raises(ExportTimeout):
            await ExportPipeline(settings, renderer=renderer).export(document, timeout=1)
        assert renderer.calls[0][1] == 1
        assert _work_files(settings) == []

    async def test_default_timeout_from_settings(
        self, settings: Settings, document: dict
    ) -> None:
        settings = _with_export(settings, timeout_seconds=42.0)
        renderer = FakeRenderer()
        await ExportPipeline(settings, renderer=renderer).export(document)
        assert renderer.calls[0][1] == 42.0

    async def test_invalid_document(self, settings: Settings, document: dict) -> None:
        document["textOverlays"][0]["position"] = "nowhere"
        renderer = FakeRenderer()
        with pytest.raises(ValidationError):
            await ExportPipeline(settings, renderer=renderer).export(document)
        assert renderer.calls == []
        assert _work_files(settings) == []

    async def test_source_outside_media_root(self, settings: Settings, document: dict) -> None:
        document["videoData"] = "/../../etc/passwd"
        renderer = FakeRenderer()
        with pytest.raises(MediaProbeFailure):
            await ExportPipeline(settings, renderer=renderer).export(document)
        assert renderer.calls == []

    async def test_concurrent_exports_are_isolated(
        self, settings: Settings, document: dict
    ) -> None:
        renderer = FakeRenderer()
        pipeline = ExportPipeline(settings, renderer=renderer)
        results = await asyncio.gather(*(pipeline.export(document) for _ in range(3)))

        assert len({r.filename for r in results}) == 3
        assert len({p for p, _ in renderer.calls}) == 3
        for result in results:
            token = result.filename.removeprefix("video_").removesuffix(".mp4")
            assert result.payload == b"fake-mp4" + token.encode()
        assert _work_files(settings) == []

    async def test_export_composition(self, settings: Settings, composition: Composition) -> None:
        renderer = FakeRenderer()
        result = await ExportPipeline(settings, renderer=renderer).export_composition(composition)
        assert result.duration_in_frames == 372
        assert renderer.snapshots[0]["composition"]["overlays"][0]["id"] == "a"


class TestExportToken:
    def test_unique(self) -> None:
        tokens = {new_export_token() for _ in range(100)}
        assert len(tokens) == 100

    def test_format(self) -> None:
        millis, suffix = new_export_token().split("_")
        assert millis.isdigit()
        assert len(suffix) == 8

"""Integration tests for the headless renderer."""

from pathlib import Path
from unittest.mock import patch

import pytest

from overlaystudio.config.settings import RenderSettings
from overlaystudio.export.protocol import RenderRequest
from overlaystudio.media.probe import MediaInfo, MediaProbeFailure, probe_media
from overlaystudio.models.composition import Composition, VideoPlacement
from overlaystudio.models.geometry import FrameSize, Point
from overlaystudio.models.overlay import Overlay
from overlaystudio.render.renderer import CompositionError, Renderer
from tests.fixtures.create_test_video import create_test_video


def _request(composition: Composition, tmp_path: Path, **kwargs: object) -> RenderRequest:
    return RenderRequest(
        export_token="1_abcdef12",
        composition=composition,
        output_path=str(tmp_path / "out" / "video_1_abcdef12.mp4"),
        **kwargs,
    )


class TestPrepareComposition:
    def test_duration_comes_from_probe(
        self, composition: Composition, media_root: Path, tmp_path: Path
    ) -> None:
        probed: list[Path] = []

        def probe(path: Path) -> MediaInfo:
            probed.append(path)
            return MediaInfo(url="/video-1.mp4", width=1280, height=720, duration_seconds=12.4)

        renderer = Renderer(media_root=media_root, probe=probe)
        prepared, source = renderer.prepare_composition(_request(composition, tmp_path))

        assert prepared.duration_in_frames == 372
        assert prepared.overlays == composition.overlays
        assert source == (media_root / "video-1.mp4").resolve()
        assert probed == [source]

    def test_explicit_source_path(self, composition: Composition, tmp_path: Path) -> None:
        renderer = Renderer(media_root=tmp_path / "elsewhere")
        request = _request(composition, tmp_path, source_path=str(tmp_path / "clip.mp4"))
        assert renderer.resolve_source(request) == tmp_path / "clip.mp4"

    def test_no_source(self, tmp_path: Path) -> None:
        with pytest.raises(CompositionError, match="no source"):
            Renderer().resolve_source(_request(Composition(), tmp_path))

    def test_missing_source_file(
        self, composition: Composition, media_root: Path, tmp_path: Path
    ) -> None:
        with pytest.raises(MediaProbeFailure):
            Renderer(media_root=media_root).render(_request(composition, tmp_path))


class TestRender:
    def test_renders_tiny_video(self, media_root: Path, tmp_path: Path) -> None:
        create_test_video(media_root / "video-1.mp4", duration=1.0, size=(160, 90))
        size = FrameSize(width=160, height=90)
        composition = Composition(
            source="/video-1.mp4",
            size=size,
            video=VideoPlacement(size=size),
            overlays=(Overlay(id="a", text="Hi there", position=Point(x=10, y=10)),),
            # Stale placeholder; the renderer re-derives it from the source
            duration_in_frames=900,
        )
        renderer = Renderer(RenderSettings(preset="ultrafast", threads=1), media_root=media_root)
        response = renderer.render(_request(composition, tmp_path))

        output = Path(response.output_path)
        assert output.exists()
        assert response.duration_in_frames == 30
        assert response.frames_rendered == 30

        info = probe_media(output)
        assert (info.width, info.height) == (160, 90)
        assert info.duration_seconds == pytest.approx(1.0, abs=0.1)


class TestRenderSettings:
    @staticmethod
    def _probe(path: Path) -> MediaInfo:
        return MediaInfo(url="/video-1.mp4", width=1280, height=720, duration_seconds=2.0)

    def _painter_kwargs(self, renderer: Renderer, request: RenderRequest) -> dict:
        with (
            patch("overlaystudio.render.renderer.FramePainter") as painter,
            patch(
                "overlaystudio.render.renderer.VideoFileClip",
                side_effect=OSError("unreadable"),
            ),
        ):
            with pytest.raises(CompositionError, match="unreadable"):
                renderer.render(request)
        return painter.call_args.kwargs

    def test_snapshot_settings_win(
        self, composition: Composition, media_root: Path, tmp_path: Path
    ) -> None:
        renderer = Renderer(RenderSettings(font_size=30), media_root=media_root, probe=self._probe)
        request = _request(
            composition, tmp_path, render=RenderSettings(font_size=48, font_path="/fonts/a.ttf")
        )
        assert self._painter_kwargs(renderer, request) == {
            "font_size": 48,
            "font_path": "/fonts/a.ttf",
        }

    def test_falls_back_to_own_settings(
        self, composition: Composition, media_root: Path, tmp_path: Path
    ) -> None:
        renderer = Renderer(RenderSettings(font_size=30), media_root=media_root, probe=self._probe)
        kwargs = self._painter_kwargs(renderer, _request(composition, tmp_path))
        assert kwargs["font_size"] == 30

    def test_settings_survive_snapshot_file(
        self, composition: Composition, tmp_path: Path
    ) -> None:
        request = _request(composition, tmp_path, render=RenderSettings(font_size=48))
        restored = RenderRequest.model_validate_json(request.model_dump_json())
        assert restored.render is not None
        assert restored.render.font_size == 48

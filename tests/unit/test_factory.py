"""Unit tests for the renderer backend factory."""

import sys
from pathlib import Path

import pytest

from overlaystudio.config.settings import ExportSettings, RenderSettings, Settings
from overlaystudio.export.base import RendererProtocol
from overlaystudio.export.factory import create_renderer
from overlaystudio.export.inprocess_renderer import InProcessRenderer
from overlaystudio.export.subprocess_renderer import SubprocessRenderer


def _settings(settings: Settings, **export: object) -> Settings:
    return settings.model_copy(
        update={"export": settings.export.model_copy(update=export)}
    )


class TestCreateRenderer:
    def test_default_is_subprocess(self, settings: Settings) -> None:
        renderer = create_renderer(settings)
        assert isinstance(renderer, SubprocessRenderer)
        assert isinstance(renderer, RendererProtocol)
        assert renderer.command == [sys.executable, "-m", "overlaystudio", "render"]

    def test_custom_command(self, settings: Settings) -> None:
        renderer = create_renderer(_settings(settings, renderer_command=["my-renderer", "--x"]))
        assert isinstance(renderer, SubprocessRenderer)
        assert renderer.command == ["my-renderer", "--x"]

    def test_inprocess(self, settings: Settings) -> None:
        settings = settings.model_copy(update={"render": RenderSettings(preset="ultrafast")})
        renderer = create_renderer(_settings(settings, renderer="inprocess"))
        assert isinstance(renderer, InProcessRenderer)
        assert isinstance(renderer, RendererProtocol)
        assert renderer.renderer.settings.preset == "ultrafast"
        assert renderer.renderer.media_root == Path(settings.media.media_root)

    def test_unknown_backend(self, settings: Settings) -> None:
        export = ExportSettings.model_construct(renderer="docker")
        with pytest.raises(ValueError, match="Unknown renderer backend"):
            create_renderer(settings.model_copy(update={"export": export}))

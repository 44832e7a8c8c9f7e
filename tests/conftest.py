"""Pytest configuration and fixtures for Overlay Studio tests."""

from pathlib import Path

import pytest

from overlaystudio.config.settings import ExportSettings, MediaSettings, Settings
from overlaystudio.models.composition import Composition, VideoPlacement
from overlaystudio.models.geometry import FrameSize, Point
from overlaystudio.models.overlay import Overlay


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def media_root(tmp_path: Path) -> Path:
    """Return a temporary media root for uploaded videos."""
    root = tmp_path / "public"
    root.mkdir()
    return root


@pytest.fixture
def settings(tmp_path: Path, media_root: Path) -> Settings:
    """Settings with every directory inside the test's temp dir."""
    return Settings(
        media=MediaSettings(media_root=str(media_root)),
        export=ExportSettings(
            work_dir=str(tmp_path / "build" / "exports"),
            output_dir=str(tmp_path / "out"),
        ),
    )


@pytest.fixture
def composition() -> Composition:
    """A 1280x720, 30 s composition with one always-visible overlay."""
    size = FrameSize(width=1280, height=720)
    return Composition(
        source="/video-1.mp4",
        size=size,
        video=VideoPlacement(size=size),
        overlays=(Overlay(id="a", text="Hello", position=Point(x=100, y=200)),),
        duration_in_frames=900,
    )

"""Unit tests for word sprites, layout and frame painting."""

from dataclasses import replace

import numpy as np
import pytest
from PIL import Image

from overlaystudio.composition.engine import CompositionEngine
from overlaystudio.models.composition import Composition, VideoPlacement
from overlaystudio.models.geometry import FrameSize, Point
from overlaystudio.models.overlay import Overlay
from overlaystudio.render.painter import FramePainter, FrameSource
from overlaystudio.render.text import (
    SHADOW_BLUR,
    WordSprite,
    layout_words,
    load_font,
    render_word,
)


def _sprite(advance: int, height: int = 30) -> WordSprite:
    return WordSprite(
        text="w",
        image=Image.new("RGBA", (advance, height)),
        advance=advance,
        height=height,
        padding=0,
    )


class FakeSource:
    """Solid red 160x90 video."""

    duration = 1.0

    def __init__(self) -> None:
        self.times: list[float] = []

    def get_frame(self, t: float) -> np.ndarray:
        self.times.append(t)
        frame = np.zeros((90, 160, 3), dtype=np.uint8)
        frame[:, :, 0] = 255
        return frame


@pytest.fixture(scope="module")
def painter() -> FramePainter:
    return FramePainter(font_size=24)


def _composition(*overlays: Overlay) -> Composition:
    return Composition(
        source="/video-1.mp4",
        size=FrameSize(width=320, height=180),
        video=VideoPlacement(position=Point(x=10, y=20), size=FrameSize(width=160, height=90)),
        overlays=overlays,
        duration_in_frames=60,
    )


class TestRenderWord:
    def test_sprite_is_padded_for_shadow(self) -> None:
        sprite = render_word("Hello", load_font(24))
        pad = SHADOW_BLUR * 2
        assert sprite.padding == pad
        assert sprite.image.mode == "RGBA"
        assert sprite.image.size == (sprite.advance + 2 * pad, sprite.height + 2 * pad)
        assert sprite.advance > 0

    def test_fade(self) -> None:
        sprite = render_word("Hi", load_font(24))
        assert sprite.faded(1.0) is sprite.image
        full = max(sprite.image.getchannel("A").getdata())
        half = max(sprite.faded(0.5).getchannel("A").getdata())
        assert half == pytest.approx(full / 2, abs=1)


class TestLayoutWords:
    def test_single_line(self) -> None:
        positions = layout_words([_sprite(100), _sprite(50)], (10, 20), max_right=1000, font_size=20)
        assert positions == [(10, 20), (116, 20)]

    def test_wraps_at_right_edge(self) -> None:
        sprites = [_sprite(100), _sprite(100), _sprite(100)]
        positions = layout_words(sprites, (0, 0), max_right=250, font_size=20)
        assert positions == [(0, 0), (106, 0), (0, 30)]

    def test_first_word_never_wraps(self) -> None:
        positions = layout_words([_sprite(500)], (0, 0), max_right=100, font_size=20)
        assert positions == [(0, 0)]

    def test_empty(self) -> None:
        assert layout_words([], (0, 0), max_right=100) == []


class TestFramePainter:
    def test_fake_source_matches_protocol(self) -> None:
        assert isinstance(FakeSource(), FrameSource)

    def test_paints_video_at_position(self, painter: FramePainter) -> None:
        state = CompositionEngine(_composition()).render_frame(15)
        source = FakeSource()
        frame = painter.paint(state, source)

        assert frame.shape == (180, 320, 3)
        assert frame.dtype == np.uint8
        assert tuple(frame[25, 15]) == (255, 0, 0)
        assert tuple(frame[0, 0]) == (0, 0, 0)
        assert tuple(frame[150, 300]) == (0, 0, 0)
        assert source.times == [0.5]

    def test_source_time_is_clamped(self, painter: FramePainter) -> None:
        source = FakeSource()
        source.duration = 0.5
        painter.paint(CompositionEngine(_composition()).render_frame(59), source)
        assert source.times == [pytest.approx(0.5 - 1 / 30)]

    def test_source_clamp_uses_layer_fps(self, painter: FramePainter) -> None:
        state = CompositionEngine(_composition()).render_frame(59)
        assert state.video is not None
        assert state.video.fps == 30
        slow = replace(state, video=replace(state.video, fps=10))

        source = FakeSource()
        source.duration = 0.5
        painter.paint(slow, source)
        assert source.times == [pytest.approx(0.4)]

    def test_without_source_video_layer_is_black(self, painter: FramePainter) -> None:
        frame = painter.paint(CompositionEngine(_composition()).render_frame(0))
        assert frame.max() == 0

    def test_paints_overlay_text(self, painter: FramePainter) -> None:
        overlay = Overlay(id="t", text="Hi", position=Point(x=200, y=120))
        frame = painter.paint(CompositionEngine(_composition(overlay)).render_frame(0))
        assert frame[120:150, 200:240].max() > 200

    def test_hidden_words_are_skipped(self, painter: FramePainter) -> None:
        # Local frame 30 starts a loop, where the first word is fully transparent
        overlay = Overlay(id="t", text="Hi", position=Point(x=200, y=120))
        state = CompositionEngine(_composition(overlay)).render_frame(30)
        assert state.overlays[0].words[0].opacity == 0.0
        assert painter.paint(state).max() == 0

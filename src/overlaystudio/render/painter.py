"""Rasterize a ``FrameState`` into an RGB frame."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import numpy as np
from PIL import Image

from overlaystudio.composition.engine import FrameState, OverlayLayer

from .text import DEFAULT_FONT_SIZE, Font, WordSprite, layout_words, load_font, render_word

logger = logging.getLogger(__name__)

BACKGROUND_COLOR = (0, 0, 0)


@runtime_checkable
class FrameSource(Protocol):
    """Anything that yields source video frames by time (e.g. a VideoFileClip)."""

    duration: float

    def get_frame(self, t: float) -> np.ndarray:
        ...


class FramePainter:
    """Paints composition frames with Pillow.

    Word sprites are cached per text, so repeated words and repeated frames
    only pay for fading and pasting.

    Args:
        font_size: Overlay font size in pixels.
        font_path: Optional TrueType font file.
        font: Preloaded font; overrides ``font_path``.
    """

    def __init__(
        self,
        font_size: int = DEFAULT_FONT_SIZE,
        font_path: str = "",
        font: Font | None = None,
    ) -> None:
        self.font_size = font_size
        self.font = font or load_font(font_size, font_path)
        self._sprites: dict[str, WordSprite] = {}

    def paint(self, state: FrameState, source: FrameSource | None = None) -> np.ndarray:
        """Draw one frame.

        Args:
            state: Frame to draw, from ``CompositionEngine.render_frame``.
            source: Source video; when None the video layer is left black.

        Returns:
            ``(height, width, 3)`` uint8 array.
        """
        canvas = Image.new("RGB", (state.size.width, state.size.height), BACKGROUND_COLOR)

        if state.video is not None and source is not None:
            self._paint_video(canvas, state, source)

        for layer in state.overlays:
            self._paint_overlay(canvas, layer)

        return np.asarray(canvas)

    def _paint_video(self, canvas: Image.Image, state: FrameState, source: FrameSource) -> None:
        video = state.video
        # Stay inside the source; the last frame holds if the clip is shorter
        t = min(video.source_time, max(source.duration - 1.0 / video.fps, 0.0))
        frame = Image.fromarray(np.asarray(source.get_frame(t), dtype=np.uint8)).convert("RGB")
        if frame.size != (video.size.width, video.size.height):
            frame = frame.resize((video.size.width, video.size.height), Image.Resampling.BILINEAR)
        canvas.paste(frame, (int(round(video.position.x)), int(round(video.position.y))))

    def _paint_overlay(self, canvas: Image.Image, layer: OverlayLayer) -> None:
        sprites = [self._sprite(word.text) for word in layer.words]
        positions = layout_words(
            sprites,
            (layer.position.x, layer.position.y),
            max_right=canvas.width,
            font_size=self.font_size,
        )
        for word, sprite, (x, y) in zip(layer.words, sprites, positions):
            if word.opacity <= 0:
                continue
            image = sprite.faded(word.opacity)
            top_left = (x - sprite.padding, int(round(y + word.offset_y)) - sprite.padding)
            canvas.paste(image, top_left, image)

    def _sprite(self, text: str) -> WordSprite:
        sprite = self._sprites.get(text)
        if sprite is None:
            sprite = render_word(text, self.font)
            self._sprites[text] = sprite
        return sprite

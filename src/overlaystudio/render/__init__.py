"""Frame painting and video encoding."""

from .painter import FramePainter, FrameSource
from .renderer import CompositionError, Renderer
from .text import WordSprite, layout_words, load_font, render_word

__all__ = [
    "CompositionError",
    "FramePainter",
    "FrameSource",
    "Renderer",
    "WordSprite",
    "layout_words",
    "load_font",
    "render_word",
]

"""Word sprites and layout for animated text overlays.

Uses Pillow for text rendering to avoid the ImageMagick system dependency
that MoviePy's TextClip requires. Every word is rendered once into a padded
RGBA sprite carrying its soft shadow; the painter then only has to fade and
shift sprites per frame.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from PIL import Image, ImageDraw, ImageFilter, ImageFont

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 24
TEXT_COLOR = (255, 255, 255)
SHADOW_COLOR = (0, 0, 0)
SHADOW_BLUR = 5  # px, matches a "0 0 5px" text shadow
WORD_GAP_EM = 0.3

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


def load_font(size: int = DEFAULT_FONT_SIZE, font_path: str = "", bold: bool = True) -> Font:
    """Load a font at the given size, falling back to the Pillow default.

    Args:
        size: Font size in pixels.
        font_path: Explicit TrueType file to use; tried before system fonts.
        bold: Whether to prefer a bold variant.

    Returns:
        A Pillow font object.
    """
    candidates: list[str] = [font_path] if font_path else []
    if bold:
        candidates.extend([
            "DejaVuSans-Bold.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
            "arialbd.ttf",
            "C:/Windows/Fonts/arialbd.ttf",
        ])
    candidates.extend([
        "DejaVuSans.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "arial.ttf",
        "C:/Windows/Fonts/arial.ttf",
    ])

    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue

    logger.warning("No TrueType font found; falling back to Pillow default font.")
    return ImageFont.load_default(size)


def line_height(font: Font) -> int:
    """Height of one text line (ascent plus descent)."""
    if isinstance(font, ImageFont.FreeTypeFont):
        ascent, descent = font.getmetrics()
        return ascent + descent
    bbox = font.getbbox("Ag")
    return int(bbox[3])


@dataclass(frozen=True)
class WordSprite:
    """A rendered word with its shadow.

    ``image`` is ``padding`` pixels larger than the text box on every side
    so the blurred shadow is not cut off.
    """

    text: str
    image: Image.Image
    advance: int
    height: int
    padding: int

    def faded(self, opacity: float) -> Image.Image:
        """Copy of the sprite with its alpha scaled by ``opacity``."""
        if opacity >= 1.0:
            return self.image
        image = self.image.copy()
        alpha = image.getchannel("A").point(lambda v: int(v * opacity + 0.5))
        image.putalpha(alpha)
        return image


def render_word(word: str, font: Font) -> WordSprite:
    """Render ``word`` white-on-transparent with a blurred black shadow."""
    advance = int(round(font.getlength(word)))
    height = line_height(font)
    pad = SHADOW_BLUR * 2
    size = (advance + 2 * pad, height + 2 * pad)

    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).text((pad, pad), word, fill=255, font=font)
    shadow_alpha = mask.filter(ImageFilter.GaussianBlur(SHADOW_BLUR / 2))

    image = Image.new("RGBA", size, (*SHADOW_COLOR, 0))
    image.putalpha(shadow_alpha)
    ImageDraw.Draw(image).text((pad, pad), word, fill=(*TEXT_COLOR, 255), font=font)
    return WordSprite(text=word, image=image, advance=advance, height=height, padding=pad)


def layout_words(
    sprites: list[WordSprite],
    origin: tuple[float, float],
    max_right: float,
    font_size: int = DEFAULT_FONT_SIZE,
) -> list[tuple[int, int]]:
    """Flow words left to right from ``origin``, wrapping at ``max_right``.

    Each word is followed by a gap of 0.3 em. A word that would cross
    ``max_right`` starts a new line, unless it is the first on its line.

    Returns:
        Top-left text-box position of every sprite, in order.
    """
    gap = WORD_GAP_EM * font_size
    x0, y0 = origin
    x, y = x0, y0
    positions: list[tuple[int, int]] = []

    for sprite in sprites:
        if x > x0 and x + sprite.advance > max_right:
            x = x0
            y += sprite.height
        positions.append((int(round(x)), int(round(y))))
        x += sprite.advance + gap

    return positions

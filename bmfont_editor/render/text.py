"""
Text Preview - Lays out and draws a string with a loaded BitmapFont.

Glyphs are looked up by their letter, falling back to the char id as a
code point, placed at the pen position plus their offsets, and the pen
moves by xadvance. A newline moves the pen down by the line height.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from PIL import Image

from ..texture.atlas import new_texture

Ink = Tuple[int, int, int, int]  # RGBA


@dataclass
class PlacedGlyph:
    """A char positioned on the output image."""
    char: object
    image: Optional[Image.Image]
    position: Tuple[int, int]


@dataclass
class TextLayout:
    """Output image size and the glyphs to draw on it."""
    size: Tuple[int, int]
    glyphs: List[PlacedGlyph] = field(default_factory=list)


def layout_text(font, text: str) -> TextLayout:
    """
    Position every glyph of `text`.

    Characters the font has no glyph for are skipped. Positions are shifted
    so that none is negative, and the size covers every glyph and every
    pen advance.
    """
    by_letter = {}
    by_id = {}
    for char in font.chars:
        by_letter.setdefault(char.letter, char)
        by_id.setdefault(char.id, char)

    line_height = font.common.line_height if font.common is not None else 0

    placed = []
    pen_x = pen_y = 0
    min_x = min_y = 0
    max_x = 0
    max_y = line_height
    for ch in text:
        if ch == '\n':
            pen_x = 0
            pen_y += line_height
            max_y = max(max_y, pen_y + line_height)
            continue

        char = by_letter.get(ch) or by_id.get(ord(ch))
        if char is None:
            font.log.debug(f"no glyph for {ch!r}, skipping")
            continue

        x = pen_x + char.xoffset
        y = pen_y + char.yoffset
        placed.append(PlacedGlyph(char, char.image, (x, y)))

        min_x = min(min_x, x)
        min_y = min(min_y, y)
        max_x = max(max_x, x + char.width)
        max_y = max(max_y, y + char.height)
        pen_x += char.xadvance
        max_x = max(max_x, pen_x)

    for glyph in placed:
        glyph.position = (glyph.position[0] - min_x, glyph.position[1] - min_y)

    return TextLayout(size=(max_x - min_x, max_y - min_y), glyphs=placed)


def render_layout(layout: TextLayout, ink: Optional[Ink] = None) -> Image.Image:
    """
    Draw a layout onto a new transparent RGBA image.

    Args:
        layout: Result of layout_text
        ink: If given, every non-empty pixel is painted with this RGBA color

    Returns:
        The rendered image, at least 1 x 1 pixels
    """
    width, height = layout.size
    canvas = new_texture(max(width, 1), max(height, 1))

    for glyph in layout.glyphs:
        image = glyph.image
        if image is None or not image.width or not image.height:
            continue
        if image.mode != 'RGBA':
            image = image.convert('RGBA')
        canvas.alpha_composite(image, dest=glyph.position)

    if ink is not None:
        pixels = np.array(canvas)
        pixels[pixels.any(axis=-1)] = ink
        canvas = Image.fromarray(pixels)

    return canvas


def render_text(font, text: str, ink: Optional[Ink] = None) -> Image.Image:
    """Lay out and draw `text` in one step."""
    return render_layout(layout_text(font, text), ink=ink)

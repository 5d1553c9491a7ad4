"""
Atlas textures - loading, cropping, blitting and saving page images.

All images are handled as RGBA PIL Images. Cropping always returns a new,
independent image, so editing a glyph never touches its atlas.
"""

import os
from typing import Tuple

from PIL import Image

from ..errors import GlyphCropError, TextureLoadError


def load_texture(path: str) -> Image.Image:
    """
    Decode an atlas texture from disk.

    The file is read completely and closed before returning.

    Raises:
        TextureLoadError: the file is missing or is not a readable image
    """
    try:
        with Image.open(path) as image:
            image.load()
            return image.convert('RGBA')
    except (OSError, ValueError) as e:
        raise TextureLoadError(path, e) from e


def new_texture(width: int, height: int) -> Image.Image:
    """Create a fully transparent RGBA texture."""
    return Image.new('RGBA', (width, height), (0, 0, 0, 0))


def glyph_box(x: int, y: int, width: int, height: int) -> Tuple[int, int, int, int]:
    """Convert an (x, y, width, height) rectangle to a PIL crop box."""
    return x, y, x + width, y + height


def crop_glyph(texture: Image.Image, x: int, y: int,
               width: int, height: int) -> Image.Image:
    """
    Extract a single glyph from an atlas texture.

    Args:
        texture: Page atlas
        x, y: Top-left corner of the glyph on the atlas
        width, height: Glyph size, may be zero (e.g. space)

    Returns:
        New image of size (width, height)

    Raises:
        GlyphCropError: the rectangle is not inside the atlas
    """
    box = glyph_box(x, y, width, height)
    if (width < 0 or height < 0 or x < 0 or y < 0
            or box[2] > texture.width or box[3] > texture.height):
        raise GlyphCropError(box, texture.size)
    return texture.crop(box)


def blit(dest: Image.Image, src: Image.Image, x: int, y: int) -> None:
    """Copy `src` onto `dest` at (x, y), replacing the pixels underneath."""
    if src.width and src.height:
        dest.paste(src, (x, y))


def save_texture(image: Image.Image, path: str) -> None:
    """Encode an atlas texture; the format follows the file extension."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    image.save(path)

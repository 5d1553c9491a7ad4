"""
Pytest configuration and fixtures for BMFont editor tests.
"""

from typing import Dict, Sequence, Tuple

import pytest
from PIL import Image

from bmfont_editor.texture.atlas import blit, new_texture
from bmfont_editor.texture.packer import PackedSheet, Placement

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)

SAMPLE_FNT = (
    'info face="Test Font" size=16 bold=0 italic=1 charset="" unicode=1 '
    'stretchH=100 smooth=1 aa=1 padding=1,2 spacing=1\n'
    'common lineHeight=12 base=10 scaleW=32 scaleH=16 pages=1 packed=0\n'
    'page id=0 file="font.png"\n'
    'chars count=2\n'
    'char id=65 x=0 y=0 width=10 height=10 xoffset=0 yoffset=1 xadvance=11 page=0 chnl=15 letter="A"\n'
    'char id=66 x=10 y=0 width=8 height=10 xoffset=1 yoffset=1 xadvance=9 page=0 chnl=15 letter="B"\n'
)

TWO_PAGE_FNT = (
    'info face="Test Font" size=16\n'
    'common lineHeight=12 base=10 scaleW=32 scaleH=16 pages=2\n'
    'page id=0 file="font0.png"\n'
    'chars count=1\n'
    'char id=65 x=0 y=0 width=10 height=10 xoffset=0 yoffset=1 xadvance=11 page=0 chnl=15 letter="A"\n'
    'page id=1 file="font1.png"\n'
    'chars count=1\n'
    'char id=66 x=2 y=3 width=8 height=10 xoffset=1 yoffset=1 xadvance=9 page=1 chnl=15 letter="B"\n'
)


def make_atlas() -> Image.Image:
    """32x16 atlas: a red 10x10 "A" at (0, 0), a green 8x10 "B" at (10, 0)."""
    atlas = new_texture(32, 16)
    atlas.paste(RED, (0, 0, 10, 10))
    atlas.paste(GREEN, (10, 0, 18, 10))
    return atlas


class FixedPacker:
    """Packer returning preset rectangles, keyed by glyph name."""

    def __init__(self, rects: Dict[str, Tuple[int, int, int, int]], size=(32, 16)):
        self.rects = rects
        self.size = size
        self.calls = []

    def pack(self, images: Sequence[Tuple[str, Image.Image]]) -> PackedSheet:
        self.calls.append([name for name, _ in images])
        texture = new_texture(*self.size)
        placements = []
        for name, image in images:
            x, y, width, height = self.rects[name]
            blit(texture, image, x, y)
            placements.append(Placement(name, x, y, width, height))
        return PackedSheet(placements=placements, texture=texture)


@pytest.fixture
def atlas():
    """Sample atlas image."""
    return make_atlas()


@pytest.fixture
def fake_loader(atlas):
    """Texture loader that never touches the disk."""
    loaded = []

    def load(path):
        loaded.append(path)
        return atlas.copy()

    load.loaded = loaded
    return load


@pytest.fixture
def font_file(tmp_path):
    """Sample single-page font written to disk with its atlas."""
    make_atlas().save(tmp_path / "font.png")
    path = tmp_path / "font.fnt"
    path.write_text(SAMPLE_FNT, encoding="utf-8")
    return str(path)


@pytest.fixture
def two_page_font_file(tmp_path):
    """Two-page font: "A" on font0.png, "B" at (2, 3) on font1.png."""
    page0 = new_texture(16, 16)
    page0.paste(RED, (0, 0, 10, 10))
    page0.save(tmp_path / "font0.png")

    page1 = new_texture(16, 16)
    page1.paste(BLUE, (2, 3, 10, 13))
    page1.save(tmp_path / "font1.png")

    path = tmp_path / "font.fnt"
    path.write_text(TWO_PAGE_FNT, encoding="utf-8")
    return str(path)

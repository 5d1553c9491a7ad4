"""
Unit tests for repacking and writing .fnt files.
"""

import logging

import pytest

from bmfont_editor.core.font import BitmapFont, load_bmfont
from bmfont_editor.core.parser import Char, Common, Info, Page
from bmfont_editor.core.writer import (
    BitmapFontWriter, enumerate_file, relative_texture_path, save_bmfont,
)
from bmfont_editor.errors import (
    MissingCommonError, MissingInfoError, NoTextureLoadedError, UnmatchedGlyphError,
)
from bmfont_editor.texture.atlas import new_texture
from bmfont_editor.texture.packer import PackedSheet, Placement

from conftest import BLUE, GREEN, RED, FixedPacker, make_atlas

IDENTITY = {'A': (0, 0, 10, 10), 'B': (10, 0, 8, 10)}


@pytest.fixture
def out_dir(tmp_path):
    path = tmp_path / "out"
    path.mkdir()
    return path


class RenamingPacker:
    """Packer answering with a glyph name that was never asked for."""

    def pack(self, images):
        return PackedSheet(placements=[Placement('Z', 0, 0, 1, 1)], texture=new_texture(1, 1))


class DoublingPacker:
    """Packer answering with one placement too many for the first glyph."""

    def pack(self, images):
        name = images[0][0]
        placements = [Placement(name, 0, 0, 1, 1) for _ in range(len(images) + 1)]
        return PackedSheet(placements=placements, texture=new_texture(1, 1))


class TestPaths:
    """Atlas file naming."""

    def test_single_page_unchanged(self):
        assert enumerate_file("out/font.png", 0, 1) == "out/font.png"

    def test_page_id_before_extension(self):
        assert enumerate_file("out/font.png", 1, 2) == "out/font1.png"
        assert enumerate_file("font.tga", 10, 12) == "font10.tga"

    def test_no_extension(self):
        assert enumerate_file("atlas", 3, 4) == "atlas3"

    def test_relative_texture_path(self):
        assert relative_texture_path("out/tex/a.png", "out") == "tex/a.png"
        assert relative_texture_path("a.png", "") == "a.png"


class TestWrite:
    """Writing descriptions and atlases."""

    def test_identity_packing_output(self, font_file, out_dir):
        font = load_bmfont(font_file, packer=FixedPacker(IDENTITY))

        font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

        text = (out_dir / "font.fnt").read_text(encoding='utf-8')
        assert text.split('\n') == [
            'info face="Test Font" size=16 stretchH=100 charset="" padding=1,2,0,0 spacing=1,0',
            'common lineHeight=12 base=10 scaleW=32 scaleH=16',
            'page id=0 file="font.png"',
            'chars count=2',
            'char id=65 x=0 y=0 width=10 height=10 xoffset=0 yoffset=1 xadvance=11 page=0 chnl=15 letter="A"',
            'char id=66 x=10 y=0 width=8 height=10 xoffset=1 yoffset=1 xadvance=9 page=0 chnl=15 letter="B"',
            '',
        ]
        assert (out_dir / "font.png").exists()

    def test_packer_receives_letters_in_order(self, font_file, out_dir):
        packer = FixedPacker(IDENTITY)
        font = load_bmfont(font_file, packer=packer)

        font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

        assert packer.calls == [['A', 'B']]

    def test_chars_move_to_placements(self, font_file, out_dir):
        font = load_bmfont(font_file, packer=FixedPacker({'A': (20, 4, 10, 10), 'B': (0, 2, 8, 10)}))
        page = font.pages[0]

        font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

        a, b = page.chars
        assert a.rect == (20, 4, 10, 10)
        assert b.rect == (0, 2, 8, 10)
        assert (a.xoffset, a.yoffset, a.xadvance, a.chnl) == (0, 1, 11, 15)
        assert page.texture.getpixel((20, 4)) == RED
        assert page.texture.getpixel((0, 2)) == GREEN

    def test_texture_in_other_directory(self, font_file, out_dir):
        font = load_bmfont(font_file, packer=FixedPacker(IDENTITY))

        font.save(str(out_dir / "font.fnt"), str(out_dir / "tex" / "atlas.png"))

        assert 'page id=0 file="tex/atlas.png"' in (out_dir / "font.fnt").read_text(encoding='utf-8')
        assert (out_dir / "tex" / "atlas.png").exists()
        assert font.pages[0].file == "tex/atlas.png"

    def test_two_pages_enumerated(self, two_page_font_file, out_dir):
        font = load_bmfont(two_page_font_file)

        font.save(str(out_dir / "font.fnt"), str(out_dir / "atlas.png"))

        text = (out_dir / "font.fnt").read_text(encoding='utf-8')
        assert 'page id=0 file="atlas0.png"' in text
        assert 'page id=1 file="atlas1.png"' in text
        assert text.count('chars count=1') == 2
        assert (out_dir / "atlas0.png").exists()
        assert (out_dir / "atlas1.png").exists()
        assert not (out_dir / "atlas.png").exists()

        reloaded = load_bmfont(str(out_dir / "font.fnt"))
        b = reloaded.find_letter('B')
        assert b.page == 1
        assert b.image.getpixel((0, 0)) == BLUE

    def test_chars_without_letters_keep_their_pixels(self, tmp_path, out_dir):
        make_atlas().save(tmp_path / "plain.png")
        fnt = tmp_path / "plain.fnt"
        fnt.write_text(
            'info face="Plain" size=16\n'
            'common lineHeight=12 base=10 scaleW=32 scaleH=16\n'
            'page id=0 file="plain.png"\n'
            'char id=65 x=0 y=0 width=10 height=10 xadvance=11\n'
            'char id=66 x=10 y=0 width=8 height=6 xadvance=9\n',
            encoding='utf-8')
        font = load_bmfont(str(fnt))

        font.save(str(out_dir / "plain.fnt"), str(out_dir / "plain.png"))
        reloaded = load_bmfont(str(out_dir / "plain.fnt"))

        a, b = reloaded.pages[0].chars
        assert a.rect != b.rect
        assert (a.id, a.image.size) == (65, (10, 10))
        assert (b.id, b.image.size) == (66, (8, 6))
        assert set(a.image.getdata()) == {RED}
        assert set(b.image.getdata()) == {GREEN}

    def test_write_logs(self, font_file, out_dir, caplog):
        font = load_bmfont(font_file, packer=FixedPacker(IDENTITY))

        with caplog.at_level(logging.INFO, logger='BMFont'):
            font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

        assert "saving font to" in caplog.text
        assert "saving page 0 texture to" in caplog.text

    def test_save_bmfont(self, font_file, out_dir):
        font = load_bmfont(font_file)

        save_bmfont(font, str(out_dir / "font.fnt"), str(out_dir / "font.png"),
                    packer=FixedPacker(IDENTITY), include_flags=True)

        first = (out_dir / "font.fnt").read_text(encoding='utf-8').split('\n')[0]
        assert 'italic=1' in first


class TestWriteErrors:
    """Failures while saving."""

    def test_missing_info(self, out_dir):
        with pytest.raises(MissingInfoError, match="no info for the font"):
            BitmapFont().save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

        assert not (out_dir / "font.fnt").exists()

    def test_missing_common(self, out_dir):
        font = BitmapFont()
        font.info = Info(face='x')

        with pytest.raises(MissingCommonError, match="no common for the font"):
            font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

        assert not (out_dir / "font.fnt").exists()

    def test_unmatched_glyph(self, font_file, out_dir):
        font = load_bmfont(font_file, packer=RenamingPacker())

        with pytest.raises(UnmatchedGlyphError, match='char "Z" not found'):
            font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

    def test_more_placements_than_chars(self, font_file, out_dir):
        font = load_bmfont(font_file, packer=DoublingPacker())

        with pytest.raises(UnmatchedGlyphError, match='char "A" not found'):
            font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

    def test_char_without_image(self, out_dir):
        font = BitmapFont(packer=FixedPacker(IDENTITY))
        font.info = Info()
        font.common = Common()
        font.add_page(Page(id=0, file='font.png'))
        font.add_char(Char(id=65, letter='A'))

        with pytest.raises(NoTextureLoadedError):
            font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

    def test_repack_page_directly(self, font_file):
        font = load_bmfont(font_file)
        writer = BitmapFontWriter(font, packer=FixedPacker(IDENTITY))

        sheet = writer.repack_page(font.pages[0])

        assert [p.name for p in sheet.placements] == ['A', 'B']
        assert sheet.texture.size == (32, 16)


class TestRoundTrip:
    """Saving and loading again."""

    def test_flags_survive_with_write_flags(self, font_file, out_dir):
        font = load_bmfont(font_file, write_flags=True)

        font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))
        reloaded = load_bmfont(str(out_dir / "font.fnt"))

        assert reloaded.info == font.info
        assert reloaded.common == font.common
        assert list(reloaded.chars) == list(font.chars)
        for old, new in zip(font.chars, reloaded.chars):
            assert new.image.size == old.image.size
            assert new.image.tobytes() == old.image.tobytes()

    def test_flags_dropped_by_default(self, font_file, out_dir):
        font = load_bmfont(font_file)

        font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))
        reloaded = load_bmfont(str(out_dir / "font.fnt"))

        assert font.info.italic is True
        assert reloaded.info.italic is False
        assert reloaded.info.smooth is False
        assert reloaded.info.face == 'Test Font'
        assert reloaded.info.padding == [1, 2, 0, 0]

    def test_default_packer_layout(self, font_file, out_dir):
        font = load_bmfont(font_file)

        font.save(str(out_dir / "font.fnt"), str(out_dir / "font.png"))

        assert [c.rect for c in font.chars] == [(0, 0, 10, 10), (10, 0, 8, 10)]
        assert font.pages[0].texture.size == (32, 16)

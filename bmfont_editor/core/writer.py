"""
BMFont Writer - Repacks glyph images and writes .fnt files back to disk.

Every page is repacked by the packer from the current char images, the
char rectangles are updated from the packer's placements, and the text
description plus one atlas per page are written.
"""

import logging
import os
from collections import deque
from typing import Deque, Dict, Optional, TextIO

from ..errors import (
    MissingCommonError, MissingInfoError, NoTextureLoadedError, UnmatchedGlyphError,
)
from ..texture.atlas import save_texture
from ..texture.packer import PackedSheet, Packer, SpritesheetPacker
from .grammar import pack_record
from .parser import Char, Page


def enumerate_file(base: str, page_id: int, total: int) -> str:
    """
    Atlas path for one page.

    With a single page the path is returned unchanged; otherwise the page
    id is appended to the file name, before the extension.

    Example:
        enumerate_file("out/font.png", 1, 2)  # "out/font1.png"
    """
    if total <= 1:
        return base
    root, ext = os.path.splitext(base)
    return f"{root}{page_id}{ext}"


def relative_texture_path(texture_path: str, fnt_dir: str) -> str:
    """Path of an atlas as referenced from a .fnt file in `fnt_dir`."""
    rel_path = os.path.relpath(texture_path, fnt_dir or os.curdir)
    return rel_path.replace(os.sep, '/')


class BitmapFontWriter:
    """Writer for BMFont text descriptions and their page atlases."""

    def __init__(self, font, packer: Optional[Packer] = None,
                 include_flags: bool = False,
                 log: Optional[logging.Logger] = None):
        self.font = font
        self.packer = packer or SpritesheetPacker()
        self.include_flags = include_flags
        self.log = log or font.log

    def write(self, fnt_file: str, texture_file: str) -> None:
        """
        Write the font description and every page atlas.

        Args:
            fnt_file: Path of the .fnt file to create
            texture_file: Atlas path, enumerated per page when there are several

        Raises:
            MissingInfoError, MissingCommonError: the font was never loaded
            UnmatchedGlyphError: the packer returned an unknown glyph name
        """
        if self.font.info is None:
            raise MissingInfoError()
        if self.font.common is None:
            raise MissingCommonError()

        self.log.info(f"saving font to {fnt_file}")
        fnt_dir = os.path.dirname(fnt_file)
        if fnt_dir:
            os.makedirs(fnt_dir, exist_ok=True)

        with open(fnt_file, 'w', encoding='utf-8', newline='\n') as f:
            f.write(pack_record(self.font.info, 'info', self.include_flags))
            f.write(pack_record(self.font.common, 'common', self.include_flags))

            total = len(self.font.pages)
            for page in self.font.pages:
                self._write_page(f, page, texture_file, fnt_dir, total)

    def _write_page(self, f: TextIO, page: Page, texture_file: str,
                    fnt_dir: str, total: int) -> None:
        sheet = self.repack_page(page)

        texture_path = enumerate_file(texture_file, page.id, total)
        rel_path = relative_texture_path(texture_path, fnt_dir)
        page.file = rel_path

        f.write(pack_record(page, 'page'))
        f.write(f"chars count={len(page.chars)}\n")
        for char in page.chars:
            f.write(pack_record(char, 'char', self.include_flags))

        self.log.info(f"saving page {page.id} texture to {texture_path} (referenced as {rel_path})")
        save_texture(sheet.texture, texture_path)
        page.texture = sheet.texture

    def repack_page(self, page: Page) -> PackedSheet:
        """
        Pack the char images of one page and move the chars to their new places.

        Only x, y, width and height of each char change. Chars are matched
        to placements by their letter; chars sharing a letter (e.g. files
        without letter keys) are taken in declared order.
        """
        images = []
        for char in page.chars:
            if char.image is None:
                raise NoTextureLoadedError(page.id)
            images.append((char.letter, char.image))

        sheet = self.packer.pack(images)

        by_letter: Dict[str, Deque[Char]] = {}
        for char in page.chars:
            by_letter.setdefault(char.letter, deque()).append(char)

        for placement in sheet.placements:
            pending = by_letter.get(placement.name)
            if not pending:
                raise UnmatchedGlyphError(placement.name)
            char = pending.popleft()
            char.x = placement.x
            char.y = placement.y
            char.width = placement.width
            char.height = placement.height

        return sheet


def save_bmfont(font, fnt_file: str, texture_file: str,
                packer: Optional[Packer] = None, include_flags: bool = False) -> None:
    """Convenience function to repack and save a font."""
    writer = BitmapFontWriter(font, packer=packer, include_flags=include_flags)
    writer.write(fnt_file, texture_file)

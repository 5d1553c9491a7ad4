"""
BitmapFont - In-memory BMFont model.

Holds one Info, one Common and the ordered Pages (each owning its Chars).
Loading parses the description, decodes every page texture and crops one
independent image per char. Saving repacks those images onto new atlases.
"""

import logging
from typing import Callable, Iterator, List, Optional

from PIL import Image

from ..errors import NoTextureLoadedError
from ..render.text import Ink, TextLayout, layout_text, render_layout
from ..texture.atlas import crop_glyph, load_texture
from ..texture.packer import Packer, SpritesheetPacker
from .parser import BMFontParser, Char, Common, Info, Page
from .writer import BitmapFontWriter


class BitmapFont:
    """
    A BMFont font with individually addressable glyph images.

    Not safe for concurrent use: a load or save assumes exclusive access.

    Args:
        log: Logger receiving progress (info) and unknown-key (warning) messages
        packer: Atlas packer used by save(); defaults to SpritesheetPacker()
        write_flags: Write boolean info/common flags as 1/0 when saving
            (they are omitted otherwise)
        texture_loader: Page texture decoder, path -> RGBA image
    """

    def __init__(self, log: Optional[logging.Logger] = None,
                 packer: Optional[Packer] = None,
                 write_flags: bool = False,
                 texture_loader: Callable[[str], Image.Image] = load_texture):
        self.log = log or logging.getLogger('BMFont')
        self.packer = packer or SpritesheetPacker()
        self.write_flags = write_flags
        self.texture_loader = texture_loader
        self.info: Optional[Info] = None
        self.common: Optional[Common] = None
        self.pages: List[Page] = []

    def reset(self) -> None:
        """Drop all records; the font is empty until the next load."""
        self.info = None
        self.common = None
        self.pages = []

    def add_page(self, page: Page) -> int:
        """Append a page and return its index."""
        self.pages.append(page)
        return len(self.pages) - 1

    def add_char(self, char: Char, page_index: Optional[int] = None) -> None:
        """Append a char to the given page, by default the last one."""
        if page_index is None:
            page_index = len(self.pages) - 1
        self.pages[page_index].chars.append(char)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def chars(self) -> Iterator[Char]:
        """All chars, page by page in declared order."""
        for page in self.pages:
            yield from page.chars

    @property
    def char_count(self) -> int:
        return sum(len(page.chars) for page in self.pages)

    def find_char(self, char_id: int) -> Optional[Char]:
        """First char with the given id, or None."""
        for char in self.chars:
            if char.id == char_id:
                return char
        return None

    def find_letter(self, letter: str) -> Optional[Char]:
        """First char with the given letter, falling back to id == ord(letter)."""
        for char in self.chars:
            if char.letter == letter:
                return char
        if len(letter) == 1:
            return self.find_char(ord(letter))
        return None

    # ------------------------------------------------------------------
    # Load / save
    # ------------------------------------------------------------------

    def load(self, filename: str) -> None:
        """
        Load a .fnt file and slice every page texture into glyph images.

        On failure the font is left empty and the error is re-raised.
        """
        self._load(filename)

    def load_text(self, text: str, filename: str = '<string>') -> None:
        """
        Like load(), from description text already in memory.

        Page files are resolved relative to the directory of `filename`.
        """
        self._load(filename, text)

    def _load(self, filename: str, text: Optional[str] = None) -> None:
        parser = BMFontParser(log=self.log, texture_loader=self.texture_loader)
        try:
            if text is None:
                parser.parse(filename, self)
            else:
                parser.parse_text(text, self, filename)
            self.cut_texture()
        except Exception:
            self.reset()
            raise
        self.log.info(f"{filename}: {self.char_count} chars loaded")

    def cut_texture(self) -> None:
        """
        Crop every char's rectangle out of its page atlas into `char.image`.

        Raises:
            NoTextureLoadedError: a page has no decoded atlas
            GlyphCropError: a char rectangle lies outside its atlas
        """
        for page in self.pages:
            if page.texture is None:
                raise NoTextureLoadedError(page.id)
            for char in page.chars:
                char.image = crop_glyph(page.texture, char.x, char.y, char.width, char.height)

    def save(self, fnt_file: str, texture_file: str) -> None:
        """
        Repack all glyph images and write the description plus page atlases.

        Args:
            fnt_file: Output .fnt path
            texture_file: Output atlas path; with several pages the page id
                is inserted before the extension (font.png -> font1.png)
        """
        writer = BitmapFontWriter(self, packer=self.packer, include_flags=self.write_flags)
        writer.write(fnt_file, texture_file)

    # ------------------------------------------------------------------
    # Text preview
    # ------------------------------------------------------------------

    def layout_text(self, text: str) -> TextLayout:
        """Position the glyphs of `text` without drawing them."""
        return layout_text(self, text)

    def render_text(self, text: str, ink: Optional[Ink] = None) -> Image.Image:
        """Draw `text` onto a new transparent image."""
        return render_layout(layout_text(self, text), ink=ink)


def load_bmfont(file_path: str, **kwargs) -> BitmapFont:
    """Convenience function to load a .fnt file."""
    font = BitmapFont(**kwargs)
    font.load(file_path)
    return font

"""
BMFont Parser - AngelCode BMFont text description parser.

Parses .fnt text files into typed records (info, common, page, char),
loads every page texture and hands the records to a BitmapFont.

Format reference: https://www.angelcode.com/products/bmfont/doc/file_format.html
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from PIL import Image

from ..errors import DuplicateRecordError, OrphanCharError, RecordValueError
from .grammar import parse_line
from ..texture.atlas import load_texture


@dataclass
class Info:
    """How the font was generated."""
    face: str = ''
    size: int = 1
    stretch_h: int = field(default=1, metadata={'key': 'stretchH'})
    charset: str = ''
    bold: bool = False
    italic: bool = False
    aa: bool = False
    unicode: bool = False
    smooth: bool = False
    padding: List[int] = field(default_factory=lambda: [0, 0, 0, 0])  # up, right, down, left
    spacing: List[int] = field(default_factory=lambda: [0, 0])  # horizontal, vertical


@dataclass
class Common:
    """Information common to all characters."""
    line_height: int = field(default=1, metadata={'key': 'lineHeight'})
    base: int = 1
    scale_w: int = field(default=1, metadata={'key': 'scaleW'})
    scale_h: int = field(default=1, metadata={'key': 'scaleH'})
    packed: bool = False


@dataclass
class Char:
    """One glyph: its rectangle on the page atlas and its metrics."""
    id: int = 0
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    xoffset: int = 0
    yoffset: int = 0
    xadvance: int = 0
    page: int = 0
    chnl: int = 0
    letter: str = ''
    # Cropped glyph image, owned by this char
    image: Optional[Image.Image] = field(
        default=None, compare=False, repr=False, metadata={'packed': False})

    @property
    def rect(self) -> Tuple[int, int, int, int]:
        """(x, y, width, height) on the page atlas."""
        return self.x, self.y, self.width, self.height


@dataclass
class Page:
    """One atlas texture and the chars placed on it."""
    id: int = 0
    file: str = ''
    chars: List[Char] = field(default_factory=list, metadata={'packed': False})
    # Decoded atlas image
    texture: Optional[Image.Image] = field(
        default=None, compare=False, repr=False, metadata={'packed': False})


# ============================================================================
# Value converters
# ============================================================================

def parse_bool(value: str) -> bool:
    """Only the literal "1" is true."""
    return value == '1'


def ensure_length(values: List[int], length: int) -> List[int]:
    """Right-pad with zeros (or truncate) to exactly `length` items."""
    values = list(values[:length])
    while len(values) < length:
        values.append(0)
    return values


def _int_list(length: int) -> Callable[[str], List[int]]:
    def convert(value: str) -> List[int]:
        return ensure_length([int(v) for v in value.split(',')], length)
    return convert


# key -> (attribute, converter). A None converter means "recognized, ignored".
_INFO_KEYS: Dict[str, Tuple[str, Optional[Callable]]] = {
    'face': ('face', str),
    'size': ('size', int),
    'stretchH': ('stretch_h', int),
    'charset': ('charset', str),
    'bold': ('bold', parse_bool),
    'italic': ('italic', parse_bool),
    'aa': ('aa', parse_bool),
    'unicode': ('unicode', parse_bool),
    'smooth': ('smooth', parse_bool),
    'padding': ('padding', _int_list(4)),
    'spacing': ('spacing', _int_list(2)),
}

_COMMON_KEYS: Dict[str, Tuple[str, Optional[Callable]]] = {
    'lineHeight': ('line_height', int),
    'pages': ('pages', None),  # derived from the page lines instead
    'base': ('base', int),
    'scaleW': ('scale_w', int),
    'scaleH': ('scale_h', int),
    'packed': ('packed', parse_bool),
}

_PAGE_KEYS: Dict[str, Tuple[str, Optional[Callable]]] = {
    'id': ('id', int),
    'file': ('file', str),
}

_CHAR_KEYS: Dict[str, Tuple[str, Optional[Callable]]] = {
    name: (name, int) for name in (
        'id', 'x', 'y', 'width', 'height',
        'xoffset', 'yoffset', 'xadvance', 'page', 'chnl',
    )
}
_CHAR_KEYS['letter'] = ('letter', str)


Warn = Callable[[str, str], None]  # (command, key)


def _overlay(record, command: str, pairs: Iterable[Tuple[str, str]],
             keys: Dict[str, Tuple[str, Optional[Callable]]],
             warn: Optional[Warn]):
    for key, value in pairs:
        if key not in keys:
            if warn is not None:
                warn(command, key)
            continue
        attr, convert = keys[key]
        if convert is None:
            continue
        try:
            setattr(record, attr, convert(value))
        except ValueError as e:
            raise RecordValueError(command, key, value) from e
    return record


def decode_info(pairs: Iterable[Tuple[str, str]], warn: Optional[Warn] = None) -> Info:
    """Build an Info record from `info` line pairs."""
    return _overlay(Info(), 'info', pairs, _INFO_KEYS, warn)


def decode_common(pairs: Iterable[Tuple[str, str]], warn: Optional[Warn] = None) -> Common:
    """Build a Common record from `common` line pairs."""
    return _overlay(Common(), 'common', pairs, _COMMON_KEYS, warn)


def decode_page(pairs: Iterable[Tuple[str, str]], warn: Optional[Warn] = None) -> Page:
    """Build a Page record (without texture) from `page` line pairs."""
    return _overlay(Page(), 'page', pairs, _PAGE_KEYS, warn)


def decode_char(pairs: Iterable[Tuple[str, str]], page: int = 0,
                warn: Optional[Warn] = None) -> Char:
    """
    Build a Char record from `char` line pairs.

    Args:
        pairs: Key/value pairs of the line
        page: Page index used when the line has no `page` key
        warn: Called with (command, key) for every unknown key
    """
    return _overlay(Char(page=page), 'char', pairs, _CHAR_KEYS, warn)


# ============================================================================
# Parser
# ============================================================================

class BMFontParser:
    """
    Decoding context for one .fnt file.

    Keeps the index of the page that `char` lines are added to, and
    fills a BitmapFont (anything with reset/add_page/add_char and
    info/common attributes) as lines are read.
    """

    def __init__(self, log: Optional[logging.Logger] = None,
                 texture_loader: Callable[[str], Image.Image] = load_texture):
        self.log = log or logging.getLogger('BMFont')
        self.texture_loader = texture_loader
        self.filename = ''
        self.base_dir = ''
        self.current_page: Optional[int] = None

    def parse(self, file_path: str, font) -> None:
        """Parse a .fnt file into `font`, replacing its previous contents."""
        self.log.info(f"loading from {file_path}")
        with open(file_path, 'r', encoding='utf-8') as f:
            text = f.read()
        self.parse_text(text, font, file_path)

    def parse_text(self, text: str, font, file_path: str = '<string>') -> None:
        """
        Parse description text into `font`.

        Page files are resolved relative to the directory of `file_path`.
        """
        font.reset()
        self.filename = file_path
        self.base_dir = os.path.dirname(file_path)
        self.current_page = None

        for line in text.split('\n'):
            self._parse_line(line, font)

    def _warn_unknown(self, command: str, key: str) -> None:
        self.log.warning(f"{self.filename}: unknown {command} command key: {key}")

    def _parse_line(self, line: str, font) -> None:
        command, pairs = parse_line(line)

        if command == 'info':
            if font.info is not None:
                raise DuplicateRecordError(self.filename, 'info')
            font.info = decode_info(pairs, self._warn_unknown)
        elif command == 'common':
            if font.common is not None:
                raise DuplicateRecordError(self.filename, 'common')
            font.common = decode_common(pairs, self._warn_unknown)
        elif command == 'page':
            self._parse_page(pairs, font)
        elif command == 'chars':
            pass  # count line, implied by the char lines
        elif command == 'char':
            if self.current_page is None:
                raise OrphanCharError(self.filename)
            char = decode_char(pairs, self.current_page, self._warn_unknown)
            font.add_char(char, self.current_page)
        elif command:
            self.log.debug(f"{self.filename}: skipping {command} line")

    def _parse_page(self, pairs: List[Tuple[str, str]], font) -> None:
        page = decode_page(pairs, self._warn_unknown)
        if page.file:
            texture_path = os.path.join(self.base_dir, page.file)
            self.log.info(f"loading texture from {texture_path}")
            page.texture = self.texture_loader(texture_path)
            self.log.info(f"loaded texture: {page.texture.width} x {page.texture.height}")
        self.current_page = font.add_page(page)


def parse_bmfont(file_path: str, font, log: Optional[logging.Logger] = None) -> None:
    """Convenience function to parse a .fnt file into `font`."""
    parser = BMFontParser(log=log)
    parser.parse(file_path, font)

"""
Core module - .fnt parsing, the BitmapFont model, repacking and writing.
"""

from .font import BitmapFont, load_bmfont
from .grammar import ParsedLine, pack_record, parse_line
from .parser import BMFontParser, Char, Common, Info, Page, parse_bmfont
from .writer import BitmapFontWriter, enumerate_file, save_bmfont

__all__ = [
    "BitmapFont",
    "load_bmfont",
    "ParsedLine",
    "pack_record",
    "parse_line",
    "BMFontParser",
    "Char",
    "Common",
    "Info",
    "Page",
    "parse_bmfont",
    "BitmapFontWriter",
    "enumerate_file",
    "save_bmfont",
]

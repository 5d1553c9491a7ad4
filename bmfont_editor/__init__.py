"""
BMFont Editor - Load, repack and save AngelCode BMFont (.fnt) text fonts.

Modules:
    core: .fnt parsing, the BitmapFont model, repacking and writing
    texture: Atlas texture helpers and glyph packing
    render: Text preview with a loaded font
"""

__version__ = "1.0.0"
__author__ = "Digote"
__license__ = "MIT"

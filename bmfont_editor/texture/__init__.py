"""
Texture module - Atlas loading, glyph cropping and atlas packing.
"""

from .atlas import blit, crop_glyph, load_texture, new_texture, save_texture
from .packer import PackedSheet, Packer, Placement, SpritesheetPacker

__all__ = [
    "blit",
    "crop_glyph",
    "load_texture",
    "new_texture",
    "save_texture",
    "PackedSheet",
    "Packer",
    "Placement",
    "SpritesheetPacker",
]

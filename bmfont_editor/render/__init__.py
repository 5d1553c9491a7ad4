"""
Render module - Text preview with a loaded BitmapFont.
"""

from .text import PlacedGlyph, TextLayout, layout_text, render_layout, render_text

__all__ = [
    "PlacedGlyph",
    "TextLayout",
    "layout_text",
    "render_layout",
    "render_text",
]

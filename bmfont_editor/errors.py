"""
Errors raised while loading, slicing, repacking and saving BMFont files.

Every error is fatal for the operation that raised it. Unknown keys in a
description file are not errors; they are only logged as warnings.
"""

from typing import Any, Optional


class BMFontError(Exception):
    """Base exception for all BMFont errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.details = details


class FormatError(BMFontError):
    """The text description is malformed."""


class TextureError(BMFontError):
    """A page texture could not be used."""


class SaveError(BMFontError):
    """The font could not be saved."""


# ============================================================================
# Description format
# ============================================================================

class DuplicateRecordError(FormatError):
    """A second `info` or `common` line was found in one file."""

    def __init__(self, filename: str, command: str):
        super().__init__(f"error reading {filename}: second {command} command")
        self.filename = filename
        self.command = command


class OrphanCharError(FormatError):
    """A `char` line appeared before any `page` line."""

    def __init__(self, filename: str):
        super().__init__(f"{filename}: trying to add char without page")
        self.filename = filename


class RecordValueError(FormatError):
    """A numeric key holds a value that is not an integer."""

    def __init__(self, command: str, key: str, value: str):
        super().__init__(f"invalid value for {command} key {key}: {value!r}")
        self.command = command
        self.key = key
        self.value = value


# ============================================================================
# Textures
# ============================================================================

class TextureLoadError(TextureError):
    """A page texture could not be decoded."""

    def __init__(self, path: str, reason: Any = None):
        message = f"failed to load texture {path}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message, details=reason)
        self.path = path


class NoTextureLoadedError(TextureError):
    """Glyphs were sliced from a page that has no decoded atlas."""

    def __init__(self, page_id: int):
        super().__init__(f"no texture loaded for page {page_id}")
        self.page_id = page_id


class GlyphCropError(TextureError):
    """A glyph rectangle does not lie inside its atlas."""

    def __init__(self, box: tuple, size: tuple):
        super().__init__(f"glyph rectangle {box} is outside the {size[0]} x {size[1]} atlas")
        self.box = box
        self.size = size


# ============================================================================
# Saving
# ============================================================================

class MissingInfoError(SaveError):
    """The font has no `info` record to save."""

    def __init__(self):
        super().__init__("no info for the font")


class MissingCommonError(SaveError):
    """The font has no `common` record to save."""

    def __init__(self):
        super().__init__("no common for the font")


class UnmatchedGlyphError(SaveError):
    """The packer returned a glyph name that matches no char on the page."""

    def __init__(self, name: str):
        super().__init__(f'char "{name}" not found in the original font')
        self.name = name


class PackingError(SaveError):
    """The glyphs of a page do not fit on one atlas."""

"""
Atlas Packer - Places named glyph images on a new atlas texture.

The font writer only consumes a packer's result: one placement per input
name plus the new atlas image. Any object with a matching `pack` method can
be passed to BitmapFont; SpritesheetPacker is the default.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, Sequence, Tuple

from PIL import Image

from ..errors import PackingError
from .atlas import blit, new_texture


@dataclass
class Placement:
    """Where one named image was put on the atlas."""
    name: str
    x: int
    y: int
    width: int
    height: int


@dataclass
class PackedSheet:
    """Result of one pack call."""
    placements: List[Placement] = field(default_factory=list)
    texture: Optional[Image.Image] = None


class Packer(Protocol):
    def pack(self, images: Sequence[Tuple[str, Image.Image]]) -> PackedSheet:
        ...


def pow2_round_up(x: int) -> int:
    """Round up to the nearest power of 2."""
    if x <= 1:
        return 1
    return 1 << (x - 1).bit_length()


class _Node:
    """Binary tree splitting the free area of a sheet (blackpawn lightmap packing)."""

    def __init__(self, x: int, y: int, width: int, height: int):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.children: Optional[Tuple['_Node', '_Node']] = None
        self.used = False

    def insert(self, width: int, height: int) -> Optional[Tuple[int, int]]:
        """Reserve a width x height area; returns its top-left corner or None."""
        if self.children:
            return self.children[0].insert(width, height) or self.children[1].insert(width, height)
        if self.used or width > self.width or height > self.height:
            return None
        if width == self.width and height == self.height:
            self.used = True
            return self.x, self.y

        # Split along the axis with more room left, then fill the first half
        if self.width - width > self.height - height:
            self.children = (
                _Node(self.x, self.y, width, self.height),
                _Node(self.x + width, self.y, self.width - width, self.height),
            )
        else:
            self.children = (
                _Node(self.x, self.y, self.width, height),
                _Node(self.x, self.y + height, self.width, self.height - height),
            )
        return self.children[0].insert(width, height)


class SpritesheetPacker:
    """
    Pack glyph images onto one atlas, growing it until everything fits.

    Args:
        max_size: Largest allowed atlas width or height
        spacing: Empty pixels between neighbouring glyphs
        padding: Empty pixels around the atlas edges
        power_of_two: Keep both atlas dimensions powers of two
    """

    def __init__(self, max_size: int = 4096, spacing: int = 0,
                 padding: int = 0, power_of_two: bool = True):
        self.max_size = max_size
        self.spacing = spacing
        self.padding = padding
        self.power_of_two = power_of_two

    def pack(self, images: Sequence[Tuple[str, Image.Image]]) -> PackedSheet:
        width, height = self._initial_size(images)
        while True:
            positions = self._try_pack(images, width, height)
            if positions is not None:
                break
            width, height = self._grow(width, height)

        texture = new_texture(width, height)
        placements = []
        for (name, image), (x, y) in zip(images, positions):
            blit(texture, image, x, y)
            placements.append(Placement(name, x, y, image.width, image.height))
        return PackedSheet(placements=placements, texture=texture)

    def _round(self, size: int) -> int:
        return pow2_round_up(size) if self.power_of_two else size

    def _initial_size(self, images: Sequence[Tuple[str, Image.Image]]) -> Tuple[int, int]:
        border = 2 * self.padding
        if not images:
            return self._round(max(1, border)), self._round(max(1, border))

        max_width = max(image.width for _, image in images)
        max_height = max(image.height for _, image in images)
        if max_width + border > self.max_size or max_height + border > self.max_size:
            raise PackingError(
                f"glyph of {max_width} x {max_height} does not fit a {self.max_size} atlas")

        area = sum((image.width + self.spacing) * (image.height + self.spacing)
                   for _, image in images)
        edge = int(math.ceil(math.sqrt(area)))
        width = min(self._round(max(edge, max_width) + border), self.max_size)
        height = min(self._round(max(edge // 2, max_height) + border), self.max_size)
        return max(width, 1), max(height, 1)

    def _grow(self, width: int, height: int) -> Tuple[int, int]:
        if width >= self.max_size and height >= self.max_size:
            raise PackingError(f"glyphs do not fit a {self.max_size} x {self.max_size} atlas")
        if height < width and height < self.max_size or width >= self.max_size:
            return width, min(height * 2, self.max_size)
        return min(width * 2, self.max_size), height

    def _try_pack(self, images: Sequence[Tuple[str, Image.Image]],
                  width: int, height: int) -> Optional[List[Tuple[int, int]]]:
        root = _Node(
            self.padding, self.padding,
            width - 2 * self.padding + self.spacing,
            height - 2 * self.padding + self.spacing,
        )
        # Largest first; results are reported in input order
        order = sorted(range(len(images)),
                       key=lambda i: images[i][1].width * images[i][1].height,
                       reverse=True)
        positions: List[Tuple[int, int]] = [(self.padding, self.padding)] * len(images)
        for i in order:
            image = images[i][1]
            if not image.width or not image.height:
                continue
            position = root.insert(image.width + self.spacing, image.height + self.spacing)
            if position is None:
                return None
            positions[i] = position
        return positions

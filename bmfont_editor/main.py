"""
BMFont Editor v1.0 - Main entry point.

Loads a .fnt font, optionally renders a preview string to an image, and
optionally repacks and saves the font.

Usage:
    python -m bmfont_editor.main font.fnt --render "Hello" --output hello.png
    python -m bmfont_editor.main font.fnt --save-fnt out/font.fnt --save-texture out/font.png
"""

import logging
import os
import sys
from argparse import ArgumentParser
from typing import List, Optional

from PIL import ImageColor

from .core.font import BitmapFont
from .errors import BMFontError
from .texture.packer import SpritesheetPacker

logger = logging.getLogger('BMFont')


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Send BMFont log records to the console and, optionally, a file."""
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter('%(asctime)s [%(levelname)s] %(funcName)s: %(message)s'))
        logger.addHandler(file_handler)


def parse_ink(value: str):
    """Color name or #hex to an RGBA tuple."""
    color = ImageColor.getrgb(value)
    if len(color) == 3:
        color = color + (255,)
    return color


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog='bmfont-editor',
                            description='Load, preview and repack BMFont text fonts.')
    parser.add_argument('font_file', help='.fnt file to load')
    parser.add_argument('--render', metavar='TEXT', help='text to render with the font')
    parser.add_argument('--output', metavar='PNG', help='image file for --render')
    parser.add_argument('--ink', type=parse_ink, metavar='COLOR',
                        help='paint every rendered pixel with this color (e.g. black)')
    parser.add_argument('--save-fnt', metavar='FNT', help='repack and save the font here')
    parser.add_argument('--save-texture', metavar='PNG',
                        help='atlas path for --save-fnt (page id added when several pages)')
    parser.add_argument('--write-flags', action='store_true',
                        help='write boolean info/common flags as 1/0')
    parser.add_argument('--max-size', type=int, default=4096,
                        help='largest atlas width/height when repacking (default: 4096)')
    parser.add_argument('--spacing', type=int, default=0,
                        help='pixels between glyphs when repacking (default: 0)')
    parser.add_argument('--padding', type=int, default=0,
                        help='pixels around the atlas edges when repacking (default: 0)')
    parser.add_argument('-v', '--verbose', action='store_true', help='log debug messages')
    parser.add_argument('--log-file', help='also write a detailed log to this file')
    return parser


def run(args) -> None:
    packer = SpritesheetPacker(max_size=args.max_size, spacing=args.spacing,
                               padding=args.padding)
    font = BitmapFont(log=logger, packer=packer, write_flags=args.write_flags)
    font.load(args.font_file)

    if args.render is not None:
        image = font.render_text(args.render, ink=args.ink)
        image.save(args.output)
        logger.info(f"rendered {len(args.render)} characters to {args.output}: "
                    f"{image.width} x {image.height}")

    if args.save_fnt:
        font.save(args.save_fnt, args.save_texture)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.render is not None and not args.output:
        parser.error('--render requires --output')
    if args.save_fnt and not args.save_texture:
        parser.error('--save-fnt requires --save-texture')

    setup_logging(args.verbose, args.log_file)

    if not os.path.exists(args.font_file):
        logger.error(f"File not found: {args.font_file}")
        return 1

    try:
        run(args)
    except BMFontError as e:
        logger.debug("failure details", exc_info=True)
        logger.error(str(e))
        return 1
    except (OSError, ValueError) as e:
        # Output image/atlas could not be written (bad extension, unwritable path)
        logger.debug("failure details", exc_info=True)
        logger.error(f"could not write output: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

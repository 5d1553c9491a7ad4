#!/usr/bin/env python
"""
BMFont Editor - Standalone launcher for the command line tool.
"""
import sys

from bmfont_editor.main import main

if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
main.py: quick-start entry point.

Fill the tile library, then build a mosaic:

    python main.py scan ~/Pictures
    python main.py get my_photo.jpg

Or use the full CLI:

    python -m tile_mosaic.cli get --help
"""

from tile_mosaic.cli import app

if __name__ == "__main__":
    app()

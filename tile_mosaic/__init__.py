"""
Tile Mosaic
===========

Rebuild a target picture as a grid of small photos. Every tile in the
library is filed under its average colour; each grid cell of the target is
replaced by a tile whose colour is nearest to the cell's, picked at random
when several tiles share that colour.
"""

__version__ = "0.2.0"

from tile_mosaic.collect import collect_tiles
from tile_mosaic.color_utils import Color, average_color, average_color_of_file
from tile_mosaic.compositor import compose_mosaic, render_mosaic
from tile_mosaic.config import MosaicConfig
from tile_mosaic.database import TileDatabase, build_database
from tile_mosaic.exceptions import EmptyDatabaseError, MosaicError, TargetNotFoundError
from tile_mosaic.matcher import nearest_color

__all__ = [
    "Color",
    "EmptyDatabaseError",
    "MosaicConfig",
    "MosaicError",
    "TargetNotFoundError",
    "TileDatabase",
    "average_color",
    "average_color_of_file",
    "build_database",
    "collect_tiles",
    "compose_mosaic",
    "nearest_color",
    "render_mosaic",
]

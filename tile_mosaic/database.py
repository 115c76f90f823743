"""Colour-indexed tile library.

Every tile is filed under its exact average colour. Tiles that happen to
average to the same colour share a bucket, and the compositor picks among
them at random. Matching a cell therefore has two levels: an approximate
search for the nearest bucket key, then a uniform choice inside the bucket.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from types import MappingProxyType

from tile_mosaic.color_utils import Color, average_color_of_file
from tile_mosaic.exceptions import EmptyDatabaseError
from tile_mosaic.matcher import nearest_index, palette_array

logger = logging.getLogger(__name__)


class TileDatabase(Mapping[Color, tuple[Path, ...]]):
    """Read-only mapping from representative colour to tile paths."""

    def __init__(self, buckets: Mapping[Color, list[Path] | tuple[Path, ...]]) -> None:
        frozen = {color: tuple(paths) for color, paths in sorted(buckets.items())}
        self._buckets = MappingProxyType(frozen)
        self._colors = tuple(frozen)
        self._palette = palette_array(self._colors)
        self._palette.setflags(write=False)

    def __getitem__(self, color: Color) -> tuple[Path, ...]:
        return self._buckets[color]

    def __iter__(self) -> Iterator[Color]:
        return iter(self._colors)

    def __len__(self) -> int:
        return len(self._colors)

    def __repr__(self) -> str:
        return f"TileDatabase(colors={len(self)}, tiles={self.num_tiles})"

    @property
    def colors(self) -> tuple[Color, ...]:
        """Distinct keys in ascending (r, g, b) order."""
        return self._colors

    @property
    def num_tiles(self) -> int:
        return sum(len(paths) for paths in self._buckets.values())

    def candidates(self, color: Color) -> tuple[Path, ...]:
        """Tiles filed under exactly *color*."""
        return self._buckets[color]

    def nearest(self, color: Color) -> Color:
        """Key closest to *color*; ties go to the smallest key."""
        return self._colors[nearest_index(color, self._palette)]


def library_stamp(tile_dir: str | Path) -> int:
    """Newest mtime (ns) of the folder and of every file directly in it.

    Changes whenever a tile is added, removed or overwritten in place.
    """
    tile_dir = Path(tile_dir)
    if not tile_dir.is_dir():
        return 0
    stamps = [p.stat().st_mtime_ns for p in tile_dir.iterdir() if p.is_file()]
    return max([tile_dir.stat().st_mtime_ns, *stamps])


def build_database(tile_dir: str | Path) -> TileDatabase:
    """Index every decodable image directly inside *tile_dir*.

    Sub-directories are ignored and unreadable files are logged and skipped.

    Raises:
        EmptyDatabaseError: if no file could be indexed.
    """
    tile_dir = Path(tile_dir)
    entries = (
        sorted(p for p in tile_dir.iterdir() if p.is_file())
        if tile_dir.is_dir() else []
    )

    buckets: dict[Color, list[Path]] = {}
    for path in entries:
        color = average_color_of_file(path)
        if color is None:
            logger.debug("Skipping %s", path.name)
            continue
        buckets.setdefault(color, []).append(path)

    if not buckets:
        if entries:
            msg = f"None of the {len(entries)} files in {tile_dir} could be decoded"
        else:
            msg = f"There are no images in {tile_dir}"
        raise EmptyDatabaseError(msg)

    db = TileDatabase(buckets)
    logger.info(
        "Tile database: %d tiles under %d colours (%d skipped)",
        db.num_tiles, len(db), len(entries) - db.num_tiles,
    )
    return db

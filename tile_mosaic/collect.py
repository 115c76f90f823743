"""Fill the tile library from a folder of photos."""

from __future__ import annotations

import logging
from pathlib import Path

from tile_mosaic.config import MosaicConfig
from tile_mosaic.image_io import DECODE_ERRORS, resize_to_tile

logger = logging.getLogger(__name__)


def iter_source_images(folder: Path, extensions: frozenset[str]) -> list[Path]:
    """Every file under *folder* (recursively) with a supported extension."""
    if not folder.exists():
        return []
    return sorted(
        f for f in folder.rglob("*")
        if f.is_file() and f.suffix.lower() in extensions
    )


def collect_tiles(folder: str | Path, cfg: MosaicConfig | None = None) -> list[Path]:
    """Resize every photo under *folder* into a tile in ``cfg.tile_dir``.

    Tiles are named after the source file's stem. A stem that already has a
    tile is left alone, so repeated scans only add new photos. Photos that
    cannot be decoded are logged and skipped.

    Returns:
        Paths of the tiles written by this call.
    """
    cfg = cfg or MosaicConfig()
    folder = Path(folder)
    tile_dir = cfg.tile_dir
    tile_dir.mkdir(parents=True, exist_ok=True)
    tile_dir_resolved = tile_dir.resolve()

    written: list[Path] = []
    for src in iter_source_images(folder, cfg.SUPPORTED_EXTENSIONS):
        if src.resolve().parent == tile_dir_resolved:
            continue
        dest = tile_dir / f"{src.stem}{cfg.tile_suffix}"
        if dest.exists():
            logger.debug("%s: name already used, skipping", src)
            continue
        try:
            tile = resize_to_tile(src, cfg.cell_size)
        except DECODE_ERRORS as exc:
            logger.warning("%s: cannot open image: %s", src, exc)
            continue
        tile.save(dest, format=cfg.tile_format)
        logger.info("%s moved to %s", src, tile_dir)
        written.append(dest)

    return written

"""Grid walk that replaces every cell of the target with a matching tile."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
from PIL import Image

from tile_mosaic.color_utils import Color, average_color
from tile_mosaic.config import MosaicConfig
from tile_mosaic.database import TileDatabase
from tile_mosaic.exceptions import MosaicError, TargetNotFoundError
from tile_mosaic.image_io import (
    DECODE_ERRORS,
    crop_to_grid,
    load_rgb,
    load_tile,
    make_comparison_grid,
    save_image,
)

logger = logging.getLogger(__name__)


def sample_cell(
    target: np.ndarray,
    x: int,
    y: int,
    cfg: MosaicConfig,
) -> Color:
    """Colour standing in for the cell whose top-left corner is (x, y)."""
    if cfg.sampling == "average":
        return average_color(target[y:y + cfg.grid_height, x:x + cfg.grid_width])
    return Color.from_pixel(target[y, x])


def compose_mosaic(
    target: np.ndarray | Image.Image,
    database: TileDatabase,
    cfg: MosaicConfig | None = None,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Build the mosaic pixels for *target*.

    Args:
        target:   Decoded target image, (H, W, 3) array or PIL image.
        database: Tile library to match against.
        cfg:      Grid size and sampling mode.
        rng:      Picks among tiles sharing a colour; seeded from
                  ``cfg.seed`` when omitted.

    Returns:
        (H', W', 4) uint8 RGBA array, H' and W' being the target size
        rounded down to whole cells.
    """
    cfg = cfg or MosaicConfig()
    if rng is None:
        rng = np.random.default_rng(cfg.seed)
    if isinstance(target, Image.Image):
        target = np.asarray(target.convert("RGB"))

    h, w = target.shape[:2]
    cols, rows = w // cfg.grid_width, h // cfg.grid_height
    if cols == 0 or rows == 0:
        msg = (
            f"Target {w}x{h} is smaller than one "
            f"{cfg.grid_width}x{cfg.grid_height} cell"
        )
        raise ValueError(msg)

    target = crop_to_grid(target, cfg.grid_width, cfg.grid_height)
    out_h, out_w = target.shape[:2]
    mosaic = np.zeros((out_h, out_w, 4), dtype=np.uint8)
    logger.info(
        "Composing %dx%d mosaic: %dx%d cells of %dx%d px",
        out_w, out_h, cols, rows, cfg.grid_width, cfg.grid_height,
    )

    for i in range(rows):
        for j in range(cols):
            x, y = j * cfg.grid_width, i * cfg.grid_height
            color = sample_cell(target, x, y, cfg)
            nearest = database.nearest(color)
            paths = database.candidates(nearest)
            chosen = paths[int(rng.integers(len(paths)))]
            logger.debug("Cell (%d, %d) %s -> %s %s", i, j, color, nearest, chosen.name)
            try:
                tile = load_tile(chosen, cfg.cell_size)
            except DECODE_ERRORS as exc:
                msg = f"Cannot decode tile {chosen}: {exc}"
                raise MosaicError(msg) from exc
            mosaic[y:y + cfg.grid_height, x:x + cfg.grid_width] = tile

    return mosaic


def render_mosaic(
    target_path: str | Path,
    database: TileDatabase,
    cfg: MosaicConfig | None = None,
    rng: np.random.Generator | None = None,
    output_path: str | Path | None = None,
    comparison_path: str | Path | None = None,
) -> Path:
    """Load *target_path*, compose it and write the result as PNG.

    Any existing file at the output path is replaced only once the whole
    mosaic has been encoded.

    With *comparison_path* a Target | Mosaic sheet is written as well.

    Raises:
        TargetNotFoundError: if *target_path* does not exist.
        MosaicError: if the target or a chosen tile cannot be decoded.
        OSError: if the output cannot be written.
    """
    cfg = cfg or MosaicConfig()
    target_path = Path(target_path)
    output_path = Path(output_path) if output_path else cfg.output_path

    if not target_path.exists():
        msg = f"Target image {target_path} does not exist"
        raise TargetNotFoundError(msg)

    try:
        target = load_rgb(target_path)
    except DECODE_ERRORS as exc:
        msg = f"Cannot decode target image {target_path}: {exc}"
        raise MosaicError(msg) from exc

    t0 = time.perf_counter()
    mosaic = compose_mosaic(target, database, cfg, rng)
    logger.info("Mosaic composed  (%.1f s)", time.perf_counter() - t0)

    save_image(mosaic, output_path, format="PNG")
    logger.info("Saved %s", output_path)

    if comparison_path:
        make_comparison_grid(
            crop_to_grid(target, cfg.grid_width, cfg.grid_height),
            mosaic,
            comparison_path,
        )
        logger.info("Comparison sheet saved to %s", comparison_path)
    return output_path

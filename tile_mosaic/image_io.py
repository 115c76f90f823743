"""Image loading, tile decoding, atomic saving and comparison sheets."""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

import numpy as np
from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

# Everything Pillow raises for a file it cannot (or refuses to) decode
DECODE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def compute_output_size(
    width: int,
    height: int,
    grid_width: int,
    grid_height: int,
) -> tuple[int, int]:
    """Largest (w, h) no bigger than the input that the grid divides evenly."""
    return width - width % grid_width, height - height % grid_height


def load_rgb(path: str | Path) -> np.ndarray:
    """Decode an image file.

    Returns:
        (H, W, 3) uint8 array.
    """
    with Image.open(path) as img:
        return np.array(img.convert("RGB"), dtype=np.uint8)


def crop_to_grid(image: np.ndarray, grid_width: int, grid_height: int) -> np.ndarray:
    """Drop the right/bottom remainder that does not fill a whole cell."""
    h, w = image.shape[:2]
    cw, ch = compute_output_size(w, h, grid_width, grid_height)
    return image[:ch, :cw]


def load_tile(path: str | Path, size: tuple[int, int]) -> np.ndarray:
    """Decode a tile as RGBA, resizing it to *size* if it does not fit.

    Returns:
        (size[1], size[0], 4) uint8 array.
    """
    with Image.open(path) as img:
        tile = img.convert("RGBA")
    if tile.size != size:
        logger.warning(
            "Tile %s is %dx%d, expected %dx%d; resizing",
            path, tile.width, tile.height, size[0], size[1],
        )
        tile = tile.resize(size, Image.LANCZOS)
    return np.array(tile, dtype=np.uint8)


def resize_to_tile(path: str | Path, size: tuple[int, int]) -> Image.Image:
    """Open any source photo and squash it to exactly *size* (RGB)."""
    with Image.open(path) as img:
        return img.convert("RGB").resize(size, Image.LANCZOS)


def _target_mode(path: Path) -> int:
    """Keep the mode of the file being replaced, else honour the umask."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def save_image(array: np.ndarray, path: str | Path, format: str = "PNG") -> Path:
    """Encode *array* and atomically replace *path* with the result.

    The image is written to a temporary file beside *path* first, so a
    failed or interrupted write never leaves a truncated file at *path*.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.stem}-", suffix=path.suffix or ".tmp", dir=path.parent,
    )
    try:
        with os.fdopen(fd, "wb") as stream:
            Image.fromarray(array).save(stream, format=format)
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path


def make_comparison_grid(
    target: np.ndarray,
    mosaic: np.ndarray,
    output_path: str | Path,
) -> None:
    """Create a 2-panel comparison: cropped Target | Mosaic."""
    panel_h, panel_w = mosaic.shape[:2]
    label_height = 36

    panels = [
        Image.fromarray(target).convert("RGB").resize((panel_w, panel_h), Image.NEAREST),
        Image.fromarray(mosaic).convert("RGB"),
    ]
    labels = ["Target", f"Mosaic {panel_w}x{panel_h}"]

    gap = 8
    total_w = len(panels) * panel_w + (len(panels) - 1) * gap
    total_h = panel_h + label_height

    canvas = Image.new("RGB", (total_w, total_h), (30, 30, 30))
    draw = ImageDraw.Draw(canvas)

    try:
        font = ImageFont.truetype(
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 18,
        )
    except OSError:
        font = ImageFont.load_default()

    for i, (panel, label) in enumerate(zip(panels, labels, strict=False)):
        x = i * (panel_w + gap)
        canvas.paste(panel, (x, label_height))

        bbox = draw.textbbox((0, 0), label, font=font)
        text_w = bbox[2] - bbox[0]
        tx = x + (panel_w - text_w) // 2
        draw.text((tx, 6), label, fill=(220, 220, 220), font=font)

    canvas.save(output_path)

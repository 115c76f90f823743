"""Colour value type, RGB distance and average-colour extraction."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image

from tile_mosaic.image_io import DECODE_ERRORS

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Color:
    """An exact 8-bit RGB triple.

    Equality and hashing are component-wise, so a Color can key the tile
    database. Ordering is lexicographic on (r, g, b).
    """

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name in ("r", "g", "b"):
            value = getattr(self, name)
            if not 0 <= value <= 255:
                msg = f"Colour component {name}={value} outside 0..255"
                raise ValueError(msg)

    @classmethod
    def from_pixel(cls, pixel) -> Color:
        """Build from any indexable pixel; extra channels (alpha) are ignored."""
        return cls(int(pixel[0]), int(pixel[1]), int(pixel[2]))

    def as_tuple(self) -> tuple[int, int, int]:
        return self.r, self.g, self.b

    def distance(self, other: Color) -> float:
        """Euclidean distance in RGB space."""
        return math.sqrt(squared_distance(self, other))


def squared_distance(a: Color, b: Color) -> int:
    return (a.r - b.r) ** 2 + (a.g - b.g) ** 2 + (a.b - b.b) ** 2


def squared_distances(palette: np.ndarray, query: Color) -> np.ndarray:
    """Squared RGB distance from *query* to every row of *palette*.

    Args:
        palette: (K, 3) integer array of colours.
        query:   The colour to compare against.

    Returns:
        (K,) int64 array. Integer arithmetic keeps ties exact.
    """
    diff = palette.astype(np.int64) - np.asarray(query.as_tuple(), dtype=np.int64)
    return np.sum(diff * diff, axis=1)


def _to_rgb_array(image: Image.Image | np.ndarray) -> np.ndarray:
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGB"))
    arr = np.asarray(image)
    if arr.ndim == 2:
        return np.repeat(arr[:, :, np.newaxis], 3, axis=2)
    if arr.ndim != 3 or arr.shape[2] < 3:
        msg = f"Expected an (H, W), (H, W, 3) or (H, W, 4) array, got {arr.shape}"
        raise ValueError(msg)
    return arr[:, :, :3]


def average_color(image: Image.Image | np.ndarray) -> Color:
    """Per-channel mean colour of an image, truncated to 8 bits.

    Accepts a PIL image (converted to RGB, alpha dropped) or a pixel array.
    Channel sums are accumulated as int64 and floor-divided by the pixel
    count, so the result is the mean rounded down.
    """
    rgb = _to_rgb_array(image)
    count = rgb.shape[0] * rgb.shape[1]
    if count == 0:
        msg = "Cannot average an empty image"
        raise ValueError(msg)
    sums = rgb.reshape(-1, 3).sum(axis=0, dtype=np.int64)
    r, g, b = (int(s) // count for s in sums)
    return Color(r, g, b)


def average_color_of_file(path: str | Path) -> Color | None:
    """Decode *path* and return its average colour, or None if unreadable."""
    try:
        with Image.open(path) as img:
            return average_color(img)
    except DECODE_ERRORS as exc:
        logger.warning("Cannot compute average colour of %s: %s", path, exc)
        return None

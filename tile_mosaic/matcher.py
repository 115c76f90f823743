"""Exhaustive nearest-colour search over the database keys."""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from tile_mosaic.color_utils import Color, squared_distances


def palette_array(colors: Iterable[Color]) -> np.ndarray:
    """Stack colours into a (K, 3) int64 array, keeping their order."""
    rows = [c.as_tuple() for c in colors]
    return np.array(rows, dtype=np.int64).reshape(-1, 3)


def nearest_index(query: Color, palette: np.ndarray) -> int:
    """Row of *palette* closest to *query*.

    When several rows share the minimum distance the first one wins, so the
    caller controls tie-breaking through the row order.

    Raises:
        ValueError: if *palette* is empty.
    """
    if len(palette) == 0:
        msg = "Cannot match a colour against an empty palette"
        raise ValueError(msg)
    return int(np.argmin(squared_distances(palette, query)))


def nearest_color(query: Color, colors: Iterable[Color]) -> Color:
    """Closest colour to *query* by Euclidean RGB distance.

    Candidates are scanned in ascending (r, g, b) order; among equidistant
    candidates the lexicographically smallest is returned.
    """
    ordered = sorted(set(colors))
    return ordered[nearest_index(query, palette_array(ordered))]

"""Centralised configuration via a frozen dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

SAMPLING_MODES = ("pixel", "average")


@dataclass(frozen=True)
class MosaicConfig:
    """All tuneable parameters for a mosaic run.

    Attributes:
        grid_width:   Pixel width of one grid cell (and of every tile).
        grid_height:  Pixel height of one grid cell (and of every tile).
        sampling:     How a cell's colour is taken from the target -
                      ``"pixel"`` (top-left pixel) or ``"average"`` (cell mean).
        seed:         Seed for the tile picker (None = non-deterministic).
        tile_dir:     Tile library folder, filled by ``scan``.
        output_path:  Where the finished mosaic is written.
        tile_format:  Pillow format name for collected tiles.
    """

    # Grid
    grid_width: int = 10
    grid_height: int = 10

    # Matching
    sampling: str = "pixel"  # "pixel" | "average"
    seed: int | None = None

    # Paths
    tile_dir: Path = field(default_factory=lambda: Path("images_db"))
    output_path: Path = field(default_factory=lambda: Path("result.png"))

    # Collection
    tile_format: str = "JPEG"
    tile_suffix: str = ".jpg"

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".jpg", ".jpeg", ".png", ".bmp", ".tiff", ".tif", ".webp", ".jfif"}
    )

    def __post_init__(self) -> None:
        if self.grid_width <= 0 or self.grid_height <= 0:
            msg = (
                f"Grid dimensions must be positive, "
                f"got {self.grid_width}x{self.grid_height}"
            )
            raise ValueError(msg)
        if self.sampling not in SAMPLING_MODES:
            msg = f"Unknown sampling mode {self.sampling!r}; use one of {SAMPLING_MODES}"
            raise ValueError(msg)

    @property
    def cell_size(self) -> tuple[int, int]:
        """(width, height) of one grid cell in pixels."""
        return self.grid_width, self.grid_height

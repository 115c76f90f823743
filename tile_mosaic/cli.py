"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
import time
from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

from tile_mosaic.collect import collect_tiles
from tile_mosaic.compositor import render_mosaic
from tile_mosaic.config import MosaicConfig
from tile_mosaic.database import build_database
from tile_mosaic.exceptions import EmptyDatabaseError, MosaicError

app = typer.Typer(
    name="tile-mosaic",
    help="Rebuild any picture as a grid of small photos.",
    add_completion=False,
    rich_markup_mode="rich",
)
console = Console()

USAGE = (
    "Usage:\n"
    "    tile-mosaic get <path_to_image>\n"
    "    tile-mosaic scan <folder>\n"
    "    tile-mosaic --help"
)


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )


def _ensure_tile_dir(tile_dir: Path) -> None:
    if not tile_dir.exists():
        tile_dir.mkdir(parents=True)
        console.print(f"Folder created: {tile_dir}")


# Defaults come from MosaicConfig - single source of truth
_DEFAULTS = MosaicConfig()


# -- scan command ------------------------------------------------------

@app.command()
def scan(
    folder: Path = typer.Argument(..., help="Folder of photos to turn into tiles"),
    tile_dir: Path = typer.Option(
        _DEFAULTS.tile_dir, "--db", "-d", help="Tile library folder",
    ),
    grid_width: int = typer.Option(
        _DEFAULTS.grid_width, "--grid-width", "-W", help="Tile width in pixels",
    ),
    grid_height: int = typer.Option(
        _DEFAULTS.grid_height, "--grid-height", "-H", help="Tile height in pixels",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Resize every photo under FOLDER into the tile library."""
    _setup_logging(verbose)
    cfg = MosaicConfig(grid_width=grid_width, grid_height=grid_height, tile_dir=tile_dir)
    _ensure_tile_dir(cfg.tile_dir)

    if not folder.is_dir():
        console.print(f"[red]Folder {folder} does not exist[/red]")
        raise typer.Exit(1)

    written = collect_tiles(folder, cfg)
    console.print(
        f"[green]✓[/green] {len(written)} new tiles in {cfg.tile_dir}/  "
        f"[dim]{cfg.grid_width}x{cfg.grid_height} px[/dim]"
    )


# -- get command -------------------------------------------------------

@app.command()
def get(
    target: Path = typer.Argument(..., help="Path to the target image"),
    tile_dir: Path = typer.Option(
        _DEFAULTS.tile_dir, "--db", "-d", help="Tile library folder",
    ),
    output: Path = typer.Option(_DEFAULTS.output_path, "--output", "-o"),
    grid_width: int = typer.Option(
        _DEFAULTS.grid_width, "--grid-width", "-W", help="Cell width in pixels",
    ),
    grid_height: int = typer.Option(
        _DEFAULTS.grid_height, "--grid-height", "-H", help="Cell height in pixels",
    ),
    seed: int | None = typer.Option(
        _DEFAULTS.seed, "--seed", "-s", help="Seed for the tile picker",
    ),
    sampling: str = typer.Option(
        _DEFAULTS.sampling, "--sampling", help="'pixel' or 'average'",
    ),
    comparison: Path | None = typer.Option(
        None, "--comparison", "-c", help="Also save a Target | Mosaic sheet",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Build a photomosaic of TARGET from the tile library."""
    _setup_logging(verbose)
    logger = logging.getLogger("tile_mosaic")

    try:
        cfg = MosaicConfig(
            grid_width=grid_width,
            grid_height=grid_height,
            sampling=sampling,
            seed=seed,
            tile_dir=tile_dir,
            output_path=output,
        )
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(2) from exc

    _ensure_tile_dir(cfg.tile_dir)

    if not target.exists():
        console.print("[red]File that you gave does not exist[/red]")
        raise typer.Exit(1)

    t_total = time.perf_counter()
    try:
        database = build_database(cfg.tile_dir)
    except EmptyDatabaseError as exc:
        console.print(f"[red]{exc}[/red]. You need to scan a folder with images first.")
        console.print(USAGE)
        raise typer.Exit(1) from exc

    console.print(Panel.fit(
        f"[bold]TILE MOSAIC[/bold]\n"
        f"Cell: {cfg.grid_width}x{cfg.grid_height}  |  Sampling: {cfg.sampling}\n"
        f"Tiles: {database.num_tiles}  |  Colours: {len(database)}",
        border_style="cyan",
    ))

    try:
        path = render_mosaic(
            target, database, cfg,
            rng=np.random.default_rng(cfg.seed),
            comparison_path=comparison,
        )
    except (MosaicError, ValueError) as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc
    except OSError as exc:
        console.print(f"[red]Cannot write {escape(str(output))}: {escape(str(exc))}[/red]")
        raise typer.Exit(1) from exc

    logger.debug("Total %.1f s", time.perf_counter() - t_total)
    console.print(
        f"[green]✓[/green] New image was successfully created: {path}"
    )


if __name__ == "__main__":
    app()

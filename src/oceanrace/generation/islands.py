"""Archipelago painting and start-point search."""

import numpy as np
import structlog
from numpy.typing import NDArray

from ..config import MapConfig
from ..rng import ISLANDS_TAG, derive_seed, make_rng, random_int
from ..types import Position

logger = structlog.get_logger()


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def paint_blob(
    land: NDArray[np.bool_],
    bx: int,
    by: int,
    rx: int,
    ry: int,
) -> None:
    """Mark every cell inside the ellipse centred on (bx, by) as land.

    A cell is inside when (dx/rx)^2 + (dy/ry)^2 <= 1. Modifies ``land``
    in place; cells outside the grid are ignored.
    """
    height, width = land.shape
    min_x = _clamp(bx - rx, 0, width - 1)
    max_x = _clamp(bx + rx, 0, width - 1)
    min_y = _clamp(by - ry, 0, height - 1)
    max_y = _clamp(by + ry, 0, height - 1)

    xs = np.arange(min_x, max_x + 1, dtype=np.float64)
    ys = np.arange(min_y, max_y + 1, dtype=np.float64)
    xx, yy = np.meshgrid(xs, ys)

    nx = (xx - bx) / rx
    ny = (yy - by) / ry
    inside = nx * nx + ny * ny <= 1

    land[min_y : max_y + 1, min_x : max_x + 1] |= inside


def generate_map(seed: int, config: MapConfig | None = None) -> NDArray[np.bool_]:
    """Generate the archipelago for a voyage seed.

    Islands are unions of overlapping elliptical blobs. No connectivity or
    land-ratio guarantee is made; the result is purely geometric.

    Args:
        seed: Voyage seed.
        config: Map parameters (defaults to 160x45).

    Returns:
        Boolean mask of shape (height, width) where True = land.
    """
    config = config or MapConfig()
    width, height = config.width, config.height
    land = np.zeros((height, width), dtype=np.bool_)

    rng = make_rng(derive_seed(seed, ISLANDS_TAG))
    island_count = random_int(rng, config.island_count_min, config.island_count_max)
    margin = config.edge_margin

    for _ in range(island_count):
        cx = random_int(rng, config.center_margin_x, width - 1 - config.center_margin_x)
        cy = random_int(rng, config.center_margin_y, height - 1 - config.center_margin_y)
        blobs = random_int(rng, config.blobs_min, config.blobs_max)

        for _ in range(blobs):
            ox = random_int(rng, -config.blob_offset_x, config.blob_offset_x)
            oy = random_int(rng, -config.blob_offset_y, config.blob_offset_y)
            bx = _clamp(cx + ox, margin, width - 1 - margin)
            by = _clamp(cy + oy, margin, height - 1 - margin)
            rx = random_int(rng, config.blob_rx_min, config.blob_rx_max)
            ry = random_int(rng, config.blob_ry_min, config.blob_ry_max)
            paint_blob(land, bx, by, rx, ry)

    logger.debug(
        "map_generated",
        seed=seed,
        islands=island_count,
        land_fraction=round(float(np.mean(land)), 3),
    )
    return land


def find_water_start(land: NDArray[np.bool_]) -> Position:
    """Find the water cell nearest the grid centre.

    Expands square rings around the centre and scans each ring's window
    row by row, returning the first water cell. Falls back to (0, 0) when
    the grid holds no water at all.
    """
    height, width = land.shape
    cx, cy = width // 2, height // 2

    if not land[cy, cx]:
        return Position(x=cx, y=cy)

    for r in range(1, max(width, height) + 1):
        y0, y1 = max(cy - r, 0), min(cy + r, height - 1)
        x0, x1 = max(cx - r, 0), min(cx + r, width - 1)
        hits = np.argwhere(~land[y0 : y1 + 1, x0 : x1 + 1])
        if len(hits):
            dy, dx = hits[0]
            return Position(x=x0 + int(dx), y=y0 + int(dy))

    logger.warning("start_search_degenerate", width=width, height=height)
    return Position(x=0, y=0)


def is_water(land: NDArray[np.bool_], position: Position) -> bool:
    """Check that position is in bounds and not land."""
    height, width = land.shape
    if not (0 <= position.x < width and 0 <= position.y < height):
        return False
    return not bool(land[position.y, position.x])


def water_cells(land: NDArray[np.bool_]) -> list[Position]:
    """All water cells in row-major order."""
    return [Position(x=int(x), y=int(y)) for y, x in np.argwhere(~land)]

"""Weather front mask: a meandering band with holes, smoothed once.

The mask is generated once per seed and never changes; the front moves by
scrolling it across the world with a separate offset.
"""

import numpy as np
import structlog
from numpy.typing import NDArray
from scipy import ndimage

from ..config import WeatherConfig
from ..rng import WEATHER_TAG, SeededRng, derive_seed, make_rng, random_int

logger = structlog.get_logger()


def thickness_bounds(config: WeatherConfig) -> tuple[int, int]:
    """Minimum and maximum band thickness for a front width."""
    lo = max(config.thickness_floor, int(config.thickness_min_ratio * config.front_width))
    hi = max(lo, int(config.thickness_max_ratio * config.front_width))
    return lo, hi


def _paint_band(
    mask: NDArray[np.bool_],
    rng: SeededRng,
    config: WeatherConfig,
) -> None:
    """Random-walk the band centre and thickness down the rows."""
    height, front_width = mask.shape
    t_min, t_max = thickness_bounds(config)

    center = random_int(rng, front_width // 4, front_width - 1 - front_width // 4)
    thickness = random_int(rng, t_min, t_max)

    for y in range(height):
        center = min(max(center + random_int(rng, -1, 1), 0), front_width - 1)
        thickness = min(max(thickness + random_int(rng, -1, 1), t_min), t_max)
        start = center - thickness // 2
        mask[y, max(start, 0) : max(start + thickness, 0)] = True


def _punch_holes(
    mask: NDArray[np.bool_],
    rng: SeededRng,
    config: WeatherConfig,
) -> int:
    height, front_width = mask.shape
    count = max(config.holes_min, (height * front_width) // config.hole_area_divisor)

    for _ in range(count):
        w = random_int(rng, config.hole_width_min, config.hole_width_max)
        h = random_int(rng, config.hole_height_min, config.hole_height_max)
        x = random_int(rng, 0, max(front_width - w, 0))
        y = random_int(rng, 0, max(height - h, 0))
        mask[y : y + h, x : x + w] = False

    return count


def majority_smooth(mask: NDArray[np.bool_], threshold: int = 4) -> NDArray[np.bool_]:
    """One pass of 3x3 majority smoothing.

    A cell stays (or becomes) true iff at least ``threshold`` cells of its
    3x3 neighbourhood, itself included, are true. Cells beyond the edge
    count as false.
    """
    kernel = np.ones((3, 3), dtype=np.int32)
    counts = ndimage.convolve(mask.astype(np.int32), kernel, mode="constant", cval=0)
    return counts >= threshold


def generate_weather_mask(
    seed: int,
    height: int,
    config: WeatherConfig | None = None,
) -> NDArray[np.bool_]:
    """Build the storm band for a voyage seed.

    Args:
        seed: Voyage seed.
        height: World height (mask rows).
        config: Front parameters.

    Returns:
        Boolean mask of shape (height, front_width) where True = rough seas.
    """
    config = config or WeatherConfig()
    rng = make_rng(derive_seed(seed, WEATHER_TAG))
    mask = np.zeros((height, config.front_width), dtype=np.bool_)

    _paint_band(mask, rng, config)
    holes = _punch_holes(mask, rng, config)
    mask = majority_smooth(mask, config.smooth_threshold)

    logger.debug(
        "weather_mask_generated",
        seed=seed,
        holes=holes,
        coverage=round(float(np.mean(mask)), 3),
    )
    return mask


def weather_covers_tile(
    mask: NDArray[np.bool_],
    offset: int,
    x: int,
    y: int,
    world_width: int,
) -> bool:
    """Check whether world cell (x, y) lies inside the scrolled front."""
    height, front_width = mask.shape
    if not 0 <= y < height:
        return False
    local_x = (x - offset) % world_width
    if local_x >= front_width:
        return False
    return bool(mask[y, local_x])


def coverage_grid(
    mask: NDArray[np.bool_],
    offset: int,
    world_width: int,
) -> NDArray[np.bool_]:
    """Front coverage for every world cell, shape (height, world_width)."""
    height, front_width = mask.shape
    local_x = (np.arange(world_width) - offset) % world_width
    inside = local_x < front_width
    result = np.zeros((height, world_width), dtype=np.bool_)
    result[:, inside] = mask[:, local_x[inside]]
    return result

"""Procedural content generation package.

Everything here is a pure function of the voyage seed: the archipelago,
the weather front mask and the reflection markers.
"""

from .islands import find_water_start, generate_map, is_water, water_cells
from .reflections import APHORISMS, place_reflections
from .weather import coverage_grid, generate_weather_mask, majority_smooth, weather_covers_tile

__all__ = [
    "APHORISMS",
    "coverage_grid",
    "find_water_start",
    "generate_map",
    "generate_weather_mask",
    "is_water",
    "majority_smooth",
    "place_reflections",
    "water_cells",
    "weather_covers_tile",
]

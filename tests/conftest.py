"""Shared test fixtures for voyage tests."""

from typing import Callable

import numpy as np
import pytest

from oceanrace.config import MapConfig, VoyageConfig, WeatherConfig
from oceanrace.state import Boat, Voyage
from oceanrace.types import Heading, Position, ReflectionMarker

SMALL_WIDTH = 20
SMALL_HEIGHT = 10
SMALL_FRONT = 5


@pytest.fixture
def small_config() -> VoyageConfig:
    """20x10 world with a 5-wide front and default timings."""
    return VoyageConfig(
        map=MapConfig(width=SMALL_WIDTH, height=SMALL_HEIGHT),
        weather=WeatherConfig(front_width=SMALL_FRONT),
    )


@pytest.fixture
def make_voyage(small_config: VoyageConfig) -> Callable[..., Voyage]:
    """Factory for hand-built voyages on the small open sea.

    Defaults: all water, no weather front, boat at (5, 5) heading east,
    boat due at 30s and weather due at 20s.
    """

    def factory(
        land: np.ndarray | None = None,
        mask: np.ndarray | None = None,
        boat: Position = Position(x=5, y=5),
        heading: Heading = Heading.EAST,
        anchored: bool = False,
        markers: list[ReflectionMarker] | None = None,
        config: VoyageConfig | None = None,
        now: float = 0.0,
    ) -> Voyage:
        config = config or small_config
        width, height = config.map.width, config.map.height
        if land is None:
            land = np.zeros((height, width), dtype=np.bool_)
        if mask is None:
            mask = np.zeros((height, config.weather.front_width), dtype=np.bool_)
        markers = list(markers or [])
        return Voyage(
            seed=7,
            land=land,
            boat=Boat(position=boat, heading=heading, anchored=anchored),
            weather_mask=mask,
            next_boat_move_at=now + config.schedule.boat_step_ms,
            next_weather_move_at=now + config.schedule.weather_step_ms,
            markers=markers,
            reflections_total=len(markers),
            config=config,
        )

    return factory


@pytest.fixture
def stormy_config() -> VoyageConfig:
    """20x10 world where the front is as wide as the world."""
    return VoyageConfig(
        map=MapConfig(width=SMALL_WIDTH, height=SMALL_HEIGHT),
        weather=WeatherConfig(front_width=SMALL_WIDTH),
    )

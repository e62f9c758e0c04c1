"""Voyage state management."""

from dataclasses import dataclass, field

import numpy as np
import structlog
from numpy.typing import NDArray

from .config import VoyageConfig
from .generation import (
    find_water_start,
    generate_map,
    generate_weather_mask,
    place_reflections,
    weather_covers_tile,
)
from .types import HEADING_DELTAS, Heading, Position, ReflectionMarker

logger = structlog.get_logger()


@dataclass
class Boat:
    """The single sailor's boat."""

    position: Position
    heading: Heading = Heading.EAST
    anchored: bool = False


@dataclass
class ActiveAphorism:
    """Aphorism revealed by the last reflection found."""

    text: str | None = None
    visible: bool = False

    def show(self, text: str) -> None:
        self.text = text
        self.visible = True

    def hide(self) -> None:
        self.visible = False


@dataclass(frozen=True)
class Sparkle:
    """Short-lived cosmetic glint on the water."""

    position: Position
    glyph: str
    expires_at: float  # frame clock, ms


@dataclass
class Voyage:
    """
    Mutable voyage aggregate.

    Grid and weather mask are pure functions of the seed and are never
    persisted. Everything else is saved after each state change.
    """

    seed: int
    land: NDArray[np.bool_]
    boat: Boat
    weather_mask: NDArray[np.bool_]
    next_boat_move_at: float
    next_weather_move_at: float
    front_offset: int = 0
    markers: list[ReflectionMarker] = field(default_factory=list)
    reflections_found: int = 0
    reflections_total: int = 0
    active_aphorism: ActiveAphorism = field(default_factory=ActiveAphorism)
    revealed: list[str] = field(default_factory=list)  # aphorisms found this voyage
    regenerations: int = 0
    sparkles: list[Sparkle] = field(default_factory=list)
    config: VoyageConfig = field(default_factory=VoyageConfig)

    @property
    def width(self) -> int:
        return self.land.shape[1]

    @property
    def height(self) -> int:
        return self.land.shape[0]

    def is_land(self, x: int, y: int) -> bool:
        return bool(self.land[y, x])

    def in_front(self, position: Position) -> bool:
        """Whether a world cell is inside the weather front right now."""
        return weather_covers_tile(
            self.weather_mask, self.front_offset, position.x, position.y, self.width
        )

    def forward_cell(self) -> Position | None:
        """Cell ahead of the boat, or None past the top/bottom edge.

        The world wraps horizontally.
        """
        dx, dy = HEADING_DELTAS[self.boat.heading]
        x = (self.boat.position.x + dx) % self.width
        y = self.boat.position.y + dy
        if not 0 <= y < self.height:
            return None
        return Position(x=x, y=y)

    def forward_blocked(self) -> bool:
        ahead = self.forward_cell()
        return ahead is None or self.is_land(ahead.x, ahead.y)

    def marker_at(self, position: Position) -> ReflectionMarker | None:
        for marker in self.markers:
            if marker.position == position:
                return marker
        return None

    def boat_interval_ms(self) -> int:
        """Boat step interval for the boat's current cell."""
        schedule = self.config.schedule
        if self.in_front(self.boat.position):
            return schedule.front_step_ms
        return schedule.boat_step_ms

    def regenerate_reflections(self) -> None:
        """Replace the marker set with a fresh one and reset the counters.

        The boat's current cell and the spawn cell are kept free of
        markers. Aphorisms already revealed are skipped while unrevealed
        ones remain.
        """
        self.regenerations += 1
        self.markers = place_reflections(
            self.land,
            self.boat.position,
            self.seed,
            self.config.reflections,
            regeneration=self.regenerations,
            avoid=[*self.revealed, *(m.aphorism for m in self.markers)],
            keep_free=[find_water_start(self.land)],
        )
        self.reflections_found = 0
        self.reflections_total = len(self.markers)
        logger.info(
            "reflections_regenerated",
            seed=self.seed,
            regeneration=self.regenerations,
            total=self.reflections_total,
        )


def new_seed(now_ms: float) -> int:
    """Seed derived from the wall clock."""
    return int(now_ms) % 1_000_000_000


def new_voyage(
    seed: int,
    now_ms: float,
    config: VoyageConfig | None = None,
) -> Voyage:
    """Create a fresh voyage for a seed.

    Args:
        seed: Voyage seed.
        now_ms: Wall clock in milliseconds; first steps fall due one
            interval after it.
        config: Voyage configuration.

    Returns:
        Voyage with the boat at the start point, heading east.
    """
    config = config or VoyageConfig()
    land = generate_map(seed, config.map)
    start = find_water_start(land)
    mask = generate_weather_mask(seed, config.map.height, config.weather)
    markers = place_reflections(land, start, seed, config.reflections)

    voyage = Voyage(
        seed=seed,
        land=land,
        boat=Boat(position=start),
        weather_mask=mask,
        next_boat_move_at=now_ms,
        next_weather_move_at=now_ms + config.schedule.weather_step_ms,
        markers=markers,
        reflections_total=len(markers),
        config=config,
    )
    voyage.next_boat_move_at = now_ms + voyage.boat_interval_ms()

    logger.info(
        "voyage_created",
        seed=seed,
        start=str(start),
        reflections=len(markers),
    )
    return voyage

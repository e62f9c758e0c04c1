"""Voyage tick engine: brings a voyage up to date with the wall clock."""

from dataclasses import dataclass, field

import structlog

from .state import Voyage
from .types import Position, ReflectionMarker

logger = structlog.get_logger()


@dataclass
class TickResult:
    """Result of one advance() call."""

    now_ms: float
    boat_moves: int = 0
    blocked_steps: int = 0
    anchored_steps: int = 0
    weather_steps: int = 0
    found: list[ReflectionMarker] = field(default_factory=list)
    reflections_regenerated: bool = False
    dropped_ms: float = 0.0
    path: list[Position] = field(default_factory=list)

    @property
    def boat_steps(self) -> int:
        """Boat steps that fell due, whether or not the boat moved."""
        return self.boat_moves + self.blocked_steps + self.anchored_steps

    @property
    def changed(self) -> bool:
        """Whether any schedule-driven field changed."""
        return self.boat_steps > 0 or self.weather_steps > 0 or self.dropped_ms > 0


def _apply_catchup_cap(voyage: Voyage, now_ms: float) -> float:
    """Move stale due times up to the start of the catch-up window.

    Returns:
        Milliseconds of elapsed time that will not be simulated.
    """
    floor = now_ms - voyage.config.schedule.max_catchup_ms
    oldest = min(voyage.next_boat_move_at, voyage.next_weather_move_at)
    if oldest >= floor:
        return 0.0

    voyage.next_boat_move_at = max(voyage.next_boat_move_at, floor)
    voyage.next_weather_move_at = max(voyage.next_weather_move_at, floor)
    dropped = floor - oldest
    logger.info("catchup_capped", seed=voyage.seed, dropped_ms=dropped)
    return dropped


def step_weather(voyage: Voyage) -> None:
    """Scroll the front one cell east. Never blocked."""
    voyage.front_offset = (voyage.front_offset + 1) % voyage.width
    voyage.next_weather_move_at += voyage.config.schedule.weather_step_ms


def step_boat(voyage: Voyage, result: TickResult) -> None:
    """Attempt one boat move, then schedule the next attempt.

    The boat stays put when anchored or facing land (or the top/bottom
    edge). The schedule advances either way, so a blocked boat never
    owes moves once it is free.
    """
    boat = voyage.boat
    if boat.anchored:
        result.anchored_steps += 1
    elif voyage.forward_blocked():
        result.blocked_steps += 1
    else:
        _move_boat(voyage, result)

    voyage.next_boat_move_at += voyage.boat_interval_ms()


def _move_boat(voyage: Voyage, result: TickResult) -> None:
    destination = voyage.forward_cell()
    if destination is None:
        raise RuntimeError("No forward cell for unblocked boat")

    voyage.boat.position = destination
    voyage.active_aphorism.hide()
    result.boat_moves += 1
    result.path.append(destination)

    marker = voyage.marker_at(destination)
    if marker is None:
        return

    voyage.markers.remove(marker)
    voyage.reflections_found += 1
    voyage.active_aphorism.show(marker.aphorism)
    if marker.aphorism not in voyage.revealed:
        voyage.revealed.append(marker.aphorism)
    result.found.append(marker)
    logger.info(
        "reflection_found",
        seed=voyage.seed,
        position=str(destination),
        found=voyage.reflections_found,
        total=voyage.reflections_total,
    )

    if not voyage.markers:
        voyage.regenerate_reflections()
        result.reflections_regenerated = True


def advance(voyage: Voyage, now_ms: float) -> TickResult:
    """Process every boat and weather step due at or before now_ms.

    Steps from both subsystems are applied in timestamp order (weather
    first on ties), so one call spanning a long gap gives the same state
    as many calls spanning the same gap. Elapsed time beyond the catch-up
    window is dropped. Calling again with the same now_ms is a no-op.

    Args:
        voyage: Voyage to update in place.
        now_ms: Wall clock in milliseconds.

    Returns:
        TickResult describing what happened.
    """
    result = TickResult(now_ms=now_ms)
    result.dropped_ms = _apply_catchup_cap(voyage, now_ms)

    while min(voyage.next_boat_move_at, voyage.next_weather_move_at) <= now_ms:
        if voyage.next_weather_move_at <= voyage.next_boat_move_at:
            step_weather(voyage)
            result.weather_steps += 1
        else:
            step_boat(voyage, result)

    if result.changed:
        logger.debug(
            "voyage_advanced",
            seed=voyage.seed,
            boat_moves=result.boat_moves,
            blocked_steps=result.blocked_steps,
            anchored_steps=result.anchored_steps,
            weather_steps=result.weather_steps,
            position=str(voyage.boat.position),
            front_offset=voyage.front_offset,
        )
    return result

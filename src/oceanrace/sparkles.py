"""Cosmetic sparkles on open water. Not seeded, not persisted."""

import math

import numpy as np

from .state import Sparkle, Voyage
from .types import Position


def spawn_sparkles(
    voyage: Voyage,
    dt_ms: float,
    now_perf_ms: float,
    rng: np.random.Generator | None = None,
) -> list[Sparkle]:
    """Add sparkles for a frame lasting dt_ms.

    The expected count is ``rate * dt / 1000``: its integer part always
    spawns, the fractional part spawns one more with that probability.

    Args:
        voyage: Voyage to decorate.
        dt_ms: Frame duration in milliseconds.
        now_perf_ms: Frame clock in milliseconds.
        rng: Random source (a fresh unseeded generator if omitted).

    Returns:
        The newly spawned sparkles (also appended to voyage.sparkles).
    """
    if dt_ms <= 0:
        return []

    rng = rng or np.random.default_rng()
    config = voyage.config.sparkles
    expected = config.rate * dt_ms / 1000
    whole = math.floor(expected)
    count = whole + (1 if rng.random() < expected - whole else 0)
    if count == 0:
        return []

    water = ~voyage.land
    water[voyage.boat.position.y, voyage.boat.position.x] = False
    cells = np.flatnonzero(water)
    if len(cells) == 0:
        return []

    spawned = []
    for _ in range(count):
        y, x = divmod(int(rng.choice(cells)), voyage.width)
        spawned.append(
            Sparkle(
                position=Position(x=x, y=y),
                glyph=config.glyphs[int(rng.integers(0, len(config.glyphs)))],
                expires_at=now_perf_ms
                + int(rng.integers(config.lifetime_min_ms, config.lifetime_max_ms + 1)),
            )
        )

    voyage.sparkles.extend(spawned)
    return spawned


def prune_sparkles(voyage: Voyage, now_perf_ms: float) -> int:
    """Drop expired sparkles.

    Returns:
        Number of sparkles removed.
    """
    before = len(voyage.sparkles)
    voyage.sparkles = [s for s in voyage.sparkles if s.expires_at > now_perf_ms]
    return before - len(voyage.sparkles)

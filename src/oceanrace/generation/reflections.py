"""Reflection marker placement."""

from typing import Iterable

import numpy as np
import structlog
from numpy.typing import NDArray

from ..config import ReflectionConfig
from ..rng import REFLECTIONS_TAG, derive_seed, make_rng, random_int, shuffle
from ..types import Position, ReflectionMarker
from .islands import water_cells

logger = structlog.get_logger()


APHORISMS: tuple[str, ...] = (
    "The sea does not hurry, yet every shore is reached.",
    "A calm sea never made a skilled sailor.",
    "You cannot direct the wind, only the sails.",
    "Every horizon is a promise kept by walking toward it.",
    "Still water shows the sky; moving water shows the way.",
    "The anchor is not a failure of the voyage.",
    "Islands are patient. They wait for those who wander.",
    "Storms pass. Charts remain.",
    "The smallest boat carries the largest thoughts.",
    "Distance is measured in mornings, not miles.",
    "What the tide takes, it often returns.",
    "A single star is enough to steer by.",
    "Rough water makes the journey shorter and the story longer.",
    "Solitude is a crew of one, well chosen.",
    "Not every current needs to be fought.",
    "Silence at sea is never empty.",
    "The compass points; it does not push.",
    "Every wake fades, and that is its kindness.",
    "Rest is part of the route.",
    "The map is not the water.",
)

APHORISM_SET = frozenset(APHORISMS)


def _reflections_seed(seed: int, regeneration: int) -> int:
    """Generator seed for the initial set (0) or a later regeneration."""
    if regeneration == 0:
        return derive_seed(seed, REFLECTIONS_TAG)
    return derive_seed(seed, f"{REFLECTIONS_TAG}{regeneration}:")


def place_reflections(
    land: NDArray[np.bool_],
    start: Position,
    seed: int,
    config: ReflectionConfig | None = None,
    regeneration: int = 0,
    avoid: Iterable[str] = (),
    keep_free: Iterable[Position] = (),
) -> list[ReflectionMarker]:
    """Scatter reflection markers over the water.

    Candidates are every water cell except ``start`` and ``keep_free``.
    Positions and aphorisms come from two independent seeded shuffles, so
    no position and no aphorism is used twice. Aphorisms in ``avoid`` are
    only drawn once every other aphorism is used up.

    Args:
        land: Boolean land mask.
        start: Cell to keep free (the boat's spawn or current cell).
        seed: Voyage seed.
        config: Count range.
        regeneration: How many times the set has been rebuilt; each value
            draws a different layout.
        avoid: Aphorisms already revealed this voyage.
        keep_free: Further cells that must not get a marker.

    Returns:
        Markers in placement order.
    """
    config = config or ReflectionConfig()
    rng = make_rng(_reflections_seed(seed, regeneration))
    count = random_int(rng, config.count_min, config.count_max)

    blocked = {start, *keep_free}
    candidates = [p for p in water_cells(land) if p not in blocked]
    shuffle(rng, candidates)

    avoided = set(avoid)
    pool = [a for a in APHORISMS if a not in avoided]
    shuffle(rng, pool)
    if len(pool) < count:
        spent = [a for a in APHORISMS if a in avoided]
        pool.extend(shuffle(rng, spent))

    count = min(count, len(candidates), len(pool))
    markers = [
        ReflectionMarker(position=candidates[i], aphorism=pool[i])
        for i in range(count)
    ]

    logger.debug("reflections_placed", seed=seed, regeneration=regeneration, count=count)
    return markers

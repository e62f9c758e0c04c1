"""Tests for reflection marker placement."""

import numpy as np
import pytest

from oceanrace.config import ReflectionConfig
from oceanrace.generation.islands import find_water_start, generate_map
from oceanrace.generation.reflections import APHORISMS, place_reflections
from oceanrace.types import Position


class TestAphorismPool:
    """Tests for the fixed aphorism pool."""

    def test_unique(self) -> None:
        assert len(set(APHORISMS)) == len(APHORISMS)

    def test_large_enough_for_max_count(self) -> None:
        assert len(APHORISMS) >= ReflectionConfig().count_max


class TestPlaceReflections:
    """Tests for place_reflections."""

    @pytest.mark.parametrize("seed", range(12))
    def test_invariants(self, seed: int) -> None:
        """Count in range; distinct positions and aphorisms; water only; spawn kept free."""
        land = generate_map(seed)
        start = find_water_start(land)
        markers = place_reflections(land, start, seed)

        assert 5 <= len(markers) <= 8
        positions = [m.position for m in markers]
        aphorisms = [m.aphorism for m in markers]
        assert len(set(positions)) == len(positions)
        assert len(set(aphorisms)) == len(aphorisms)
        assert start not in positions
        assert all(not land[p.y, p.x] for p in positions)
        assert all(a in APHORISMS for a in aphorisms)

    def test_deterministic(self) -> None:
        land = generate_map(42)
        start = find_water_start(land)
        assert place_reflections(land, start, 42) == place_reflections(land, start, 42)

    def test_exclusion_point_respected(self) -> None:
        """Whatever cell is passed as start never gets a marker."""
        land = np.zeros((4, 4), dtype=np.bool_)
        for x in range(4):
            for y in range(4):
                excluded = Position(x=x, y=y)
                markers = place_reflections(land, excluded, 11)
                assert excluded not in [m.position for m in markers]

    def test_few_candidates_caps_count(self) -> None:
        land = np.ones((5, 5), dtype=np.bool_)
        land[0, 0] = land[2, 3] = land[4, 4] = False
        markers = place_reflections(land, Position(x=0, y=0), 3)

        assert {m.position for m in markers} == {Position(x=3, y=2), Position(x=4, y=4)}

    def test_no_candidates(self) -> None:
        land = np.ones((3, 3), dtype=np.bool_)
        land[1, 1] = False
        assert place_reflections(land, Position(x=1, y=1), 3) == []

    def test_custom_count_range(self) -> None:
        land = np.zeros((10, 10), dtype=np.bool_)
        config = ReflectionConfig(count_min=2, count_max=2)
        assert len(place_reflections(land, Position(x=0, y=0), 1, config)) == 2

    def test_keep_free_cells_skipped(self) -> None:
        land = np.ones((3, 4), dtype=np.bool_)
        land[1, :] = False
        keep_free = [Position(x=1, y=1), Position(x=2, y=1)]

        markers = place_reflections(land, Position(x=0, y=1), 5, keep_free=keep_free)

        assert [m.position for m in markers] == [Position(x=3, y=1)]


class TestRegeneration:
    """Later marker sets for the same voyage."""

    def test_each_regeneration_draws_a_new_layout(self) -> None:
        land = generate_map(42)
        start = find_water_start(land)
        sets = [place_reflections(land, start, 42, regeneration=n) for n in range(3)]

        assert sets[0] != sets[1]
        assert sets[1] != sets[2]
        assert place_reflections(land, start, 42, regeneration=1) == sets[1]

    def test_avoided_aphorisms_used_last(self) -> None:
        land = np.zeros((10, 10), dtype=np.bool_)
        avoid = APHORISMS[:15]

        markers = place_reflections(land, Position(x=0, y=0), 1, avoid=avoid)
        aphorisms = [m.aphorism for m in markers]

        assert set(APHORISMS[15:]) <= set(aphorisms)
        assert len(set(aphorisms)) == len(aphorisms)

    def test_fresh_aphorisms_only_when_enough(self) -> None:
        land = np.zeros((10, 10), dtype=np.bool_)
        avoid = APHORISMS[:8]

        markers = place_reflections(land, Position(x=0, y=0), 1, regeneration=2, avoid=avoid)

        assert not {m.aphorism for m in markers} & set(avoid)

    def test_whole_pool_avoided(self) -> None:
        land = np.zeros((10, 10), dtype=np.bool_)
        markers = place_reflections(land, Position(x=0, y=0), 1, avoid=APHORISMS)
        assert 5 <= len(markers) <= 8

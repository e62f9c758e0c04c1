"""Tests for the interactive voyage session."""

import pytest

from oceanrace.persistence import MemoryStore, load_voyage
from oceanrace.render import IntroModel, RenderModel
from oceanrace.session import InputEvent, Phase, VoyageSession
from oceanrace.types import Heading

KEY = "tl-ocean-solo-race-v1"
APHORISM = "Storms pass. Charts remain."


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def playing(store: MemoryStore) -> VoyageSession:
    """Session that has just started a voyage at t=1000."""
    session = VoyageSession(store, now_ms=1_000)
    session.handle(InputEvent.START, 1_000)
    return session


class TestIntro:
    """Tests for the intro phase."""

    def test_starts_in_intro_without_saving(self, store: MemoryStore) -> None:
        session = VoyageSession(store, now_ms=1_000)

        assert session.phase is Phase.INTRO
        assert KEY not in store.data

    def test_intro_ignores_other_input(self, store: MemoryStore) -> None:
        session = VoyageSession(store, now_ms=1_000)

        session.handle(InputEvent.STEER_NORTH, 1_000)
        session.handle(InputEvent.TOGGLE_ANCHOR, 1_000)
        session.handle(InputEvent.RESET, 1_000)

        assert session.phase is Phase.INTRO
        assert session.voyage.boat.heading is Heading.EAST
        assert not session.voyage.boat.anchored
        assert KEY not in store.data

    def test_start_creates_and_saves_voyage(self, store: MemoryStore) -> None:
        session = VoyageSession(store, now_ms=1_000)

        session.handle(InputEvent.START, 5_000)

        assert session.phase is Phase.PLAYING
        assert session.voyage.seed == 5_000
        assert load_voyage(store, 5_000).seed == 5_000

    def test_start_only_once(self, playing: VoyageSession) -> None:
        assert not playing.start(9_000)
        assert playing.voyage.seed == 1_000

    def test_intro_frame(self, store: MemoryStore) -> None:
        session = VoyageSession(store, now_ms=1_000)
        assert isinstance(session.frame(1_000, 0), IntroModel)

    def test_resume_keeps_saved_voyage(self, playing: VoyageSession, store: MemoryStore) -> None:
        session = VoyageSession(store, now_ms=2_000)
        session.resume()

        assert session.phase is Phase.PLAYING
        assert session.voyage.seed == playing.voyage.seed


class TestCommands:
    """Steering, anchoring and resetting."""

    def test_steer_is_saved(self, playing: VoyageSession, store: MemoryStore) -> None:
        playing.handle(InputEvent.STEER_NORTH, 2_000)

        assert playing.voyage.boat.heading is Heading.NORTH
        assert load_voyage(store, 2_000).boat.heading is Heading.NORTH

    def test_steer_keeps_aphorism(self, playing: VoyageSession) -> None:
        playing.voyage.active_aphorism.show(APHORISM)
        playing.handle(InputEvent.STEER_WEST, 2_000)
        assert playing.voyage.active_aphorism.visible

    def test_anchor_toggle_and_notice(self, playing: VoyageSession, store: MemoryStore) -> None:
        playing.handle(InputEvent.TOGGLE_ANCHOR, 2_000)

        assert playing.voyage.boat.anchored
        assert playing.notice(2_000) == "Anchor dropped"
        assert playing.notice(3_799) == "Anchor dropped"
        assert playing.notice(3_800) == ""
        assert load_voyage(store, 2_000).boat.anchored

        playing.handle(InputEvent.TOGGLE_ANCHOR, 4_000)
        assert not playing.voyage.boat.anchored
        assert playing.notice(4_000) == "Anchor raised"

    def test_zero_duration_notice_is_not_shown(self, playing: VoyageSession) -> None:
        playing.set_notice("Blink", 2_000, duration_ms=0)
        assert playing.notice(2_000) == ""

        playing.set_notice("Default", 2_000)
        assert playing.notice(3_799) == "Default"

    def test_reset_needs_confirmation(self, playing: VoyageSession, store: MemoryStore) -> None:
        playing.handle(InputEvent.RESET, 2_000)

        assert playing.voyage.seed == 1_000
        assert playing.notice(2_000) == "Press R again to confirm reset"

        playing.handle(InputEvent.RESET, 2_500)

        assert playing.voyage.seed == 2_500
        assert playing.notice(2_500) == "Game reset"
        assert load_voyage(store, 2_500).seed == 2_500

    def test_reset_window_expires(self, playing: VoyageSession) -> None:
        playing.handle(InputEvent.RESET, 2_000)
        playing.handle(InputEvent.RESET, 4_001)

        assert playing.voyage.seed == 1_000
        assert playing.notice(4_001) == "Press R again to confirm reset"

    def test_confirmed_reset(self, playing: VoyageSession) -> None:
        assert playing.request_reset(7_000, confirmed=True)
        assert playing.voyage.seed == 7_000


class TestFrames:
    """Per-frame catch-up."""

    def test_frame_advances_and_saves(self, playing: VoyageSession, store: MemoryStore) -> None:
        model = playing.frame(61_000, 0)

        assert isinstance(model, RenderModel)
        assert playing.voyage.front_offset == 3
        assert load_voyage(store, 61_000).front_offset == 3

    def test_frame_carries_notice(self, playing: VoyageSession) -> None:
        playing.handle(InputEvent.TOGGLE_ANCHOR, 2_000)
        assert playing.frame(2_100, 0).status.endswith("Anchor dropped")

    def test_sparkles_follow_frame_clock(self, playing: VoyageSession) -> None:
        playing.frame(2_000, 10_000)
        assert playing.voyage.sparkles == []

        playing.frame(2_000, 12_000)
        assert len(playing.voyage.sparkles) == 14
        assert all(s.expires_at > 12_000 for s in playing.voyage.sparkles)

    def test_expired_sparkles_pruned(self, playing: VoyageSession) -> None:
        playing.frame(2_000, 10_000)
        playing.frame(2_000, 12_000)

        playing.frame(2_000, 12_801)
        assert all(s.expires_at > 12_801 for s in playing.voyage.sparkles)

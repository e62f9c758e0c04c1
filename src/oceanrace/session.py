"""Interactive session: input events, notices and per-frame stepping.

The session is the only owner of mutable voyage state. Hosts feed it
events and clock readings and get render models back.
"""

from enum import Enum

import structlog

from .config import VoyageConfig
from .persistence import KeyValueStore, load_voyage, save_voyage
from .render import IntroModel, RenderModel, build_intro_model, build_render_model
from .sparkles import prune_sparkles, spawn_sparkles
from .state import Voyage, new_seed, new_voyage
from .tick import TickResult, advance
from .types import Heading

logger = structlog.get_logger()


class Phase(Enum):
    INTRO = "intro"
    PLAYING = "playing"


class InputEvent(Enum):
    """Discrete events an input source can deliver."""

    STEER_NORTH = "steer_north"
    STEER_EAST = "steer_east"
    STEER_SOUTH = "steer_south"
    STEER_WEST = "steer_west"
    TOGGLE_ANCHOR = "toggle_anchor"
    RESET = "reset"
    START = "start"


STEER_EVENTS: dict[InputEvent, Heading] = {
    InputEvent.STEER_NORTH: Heading.NORTH,
    InputEvent.STEER_EAST: Heading.EAST,
    InputEvent.STEER_SOUTH: Heading.SOUTH,
    InputEvent.STEER_WEST: Heading.WEST,
}


class VoyageSession:
    """
    One local play session bound to a single save slot.

    Usage:
        session = VoyageSession(JsonFileStore(path), now_ms=clock())
        session.handle(InputEvent.START, clock())
        model = session.frame(clock(), perf_clock())
    """

    def __init__(
        self,
        store: KeyValueStore,
        now_ms: float,
        config: VoyageConfig | None = None,
        phase: Phase = Phase.INTRO,
    ):
        self.store = store
        self.config = config or VoyageConfig()
        self.phase = phase
        self.voyage: Voyage = load_voyage(store, now_ms, self.config)

        self._notice = ""
        self._notice_until = 0.0
        self._reset_confirm_until = 0.0
        self._last_frame_ms: float | None = None

    # --- Notices ---

    def set_notice(self, text: str, now_ms: float, duration_ms: int | None = None) -> None:
        """Show a transient message in the status line."""
        self._notice = text
        if duration_ms is None:
            duration_ms = self.config.session.notice_ms
        self._notice_until = now_ms + duration_ms

    def notice(self, now_ms: float) -> str:
        """Current notice text, empty once expired."""
        return self._notice if now_ms < self._notice_until else ""

    def _clear_notice(self) -> None:
        self._notice = ""
        self._notice_until = 0.0
        self._reset_confirm_until = 0.0

    # --- Commands ---

    def save(self) -> None:
        save_voyage(self.store, self.voyage)

    def start(self, now_ms: float) -> bool:
        """Leave the intro with a brand-new voyage.

        Returns:
            False if already playing.
        """
        if self.phase is not Phase.INTRO:
            return False
        self.voyage = new_voyage(new_seed(now_ms), now_ms, self.config)
        self.save()
        self._clear_notice()
        self.phase = Phase.PLAYING
        logger.info("session_started", seed=self.voyage.seed)
        return True

    def resume(self) -> None:
        """Skip the intro and keep sailing the loaded voyage."""
        self.phase = Phase.PLAYING

    def steer(self, heading: Heading) -> None:
        """Point the boat. Does not touch the aphorism display."""
        self.voyage.boat.heading = heading
        self.save()

    def toggle_anchor(self, now_ms: float) -> bool:
        """Drop or raise the anchor.

        Returns:
            New anchored state.
        """
        boat = self.voyage.boat
        boat.anchored = not boat.anchored
        self.set_notice("Anchor dropped" if boat.anchored else "Anchor raised", now_ms)
        self.save()
        return boat.anchored

    def request_reset(self, now_ms: float, confirmed: bool = False) -> bool:
        """Ask for a new voyage; a second request within the window confirms.

        Args:
            now_ms: Wall clock in milliseconds.
            confirmed: Skip the confirmation step.

        Returns:
            True if a new voyage was started.
        """
        if not confirmed and now_ms > self._reset_confirm_until:
            window = self.config.session.reset_confirm_ms
            self._reset_confirm_until = now_ms + window
            self.set_notice("Press R again to confirm reset", now_ms, window)
            return False

        old_seed = self.voyage.seed
        self.voyage = new_voyage(new_seed(now_ms), now_ms, self.config)
        self._reset_confirm_until = 0.0
        self.set_notice("Game reset", now_ms, self.config.session.reset_notice_ms)
        self.save()
        logger.info("voyage_reset", old_seed=old_seed, new_seed=self.voyage.seed)
        return True

    def handle(self, event: InputEvent, now_ms: float) -> None:
        """Dispatch one input event. Only START is accepted in the intro."""
        if self.phase is Phase.INTRO:
            if event is InputEvent.START:
                self.start(now_ms)
            return

        if event in STEER_EVENTS:
            self.steer(STEER_EVENTS[event])
        elif event is InputEvent.TOGGLE_ANCHOR:
            self.toggle_anchor(now_ms)
        elif event is InputEvent.RESET:
            self.request_reset(now_ms)

    # --- Time ---

    def catch_up(self, now_ms: float) -> TickResult:
        """Advance the voyage to now_ms, saving if anything changed."""
        result = advance(self.voyage, now_ms)
        if result.changed:
            self.save()
        return result

    def frame(self, now_ms: float, perf_ms: float) -> RenderModel | IntroModel:
        """Run one host frame.

        Args:
            now_ms: Wall clock in milliseconds (drives the voyage).
            perf_ms: Monotonic frame clock in milliseconds (drives sparkles).

        Returns:
            Render model for the current phase.
        """
        dt = 0.0 if self._last_frame_ms is None else perf_ms - self._last_frame_ms
        self._last_frame_ms = perf_ms

        if self.phase is Phase.INTRO:
            return build_intro_model(self.config.map)

        self.catch_up(now_ms)
        spawn_sparkles(self.voyage, dt, perf_ms)
        prune_sparkles(self.voyage, perf_ms)
        return build_render_model(self.voyage, self.notice(now_ms))

"""Async frame loop driving a voyage session."""

import asyncio
import sys
import time
from typing import Callable, TextIO

import structlog

from .render import IntroModel, RenderModel, render_intro, render_text
from .session import VoyageSession

logger = structlog.get_logger()

# Move the cursor home and clear the screen before each frame
CLEAR_SCREEN = "\x1b[H\x1b[2J"

Clock = Callable[[], float]


def wall_clock_ms() -> float:
    return time.time() * 1000


def frame_clock_ms() -> float:
    return time.monotonic() * 1000


def draw(model: RenderModel | IntroModel) -> str:
    """Turn either render model into text."""
    if isinstance(model, IntroModel):
        return render_intro(model)
    return render_text(model)


class HostLoop:
    """
    Cooperative frame loop: one catch-up + draw per frame.

    Usage:
        loop = HostLoop(session)
        await loop.run()   # until loop.stop()
    """

    def __init__(
        self,
        session: VoyageSession,
        output: TextIO | None = None,
        frames_per_second: float | None = None,
        clear: bool = True,
        wall_clock: Clock = wall_clock_ms,
        frame_clock: Clock = frame_clock_ms,
    ):
        self.session = session
        self.output = output or sys.stdout
        self.frames_per_second = frames_per_second or session.config.session.frames_per_second
        self.clear = clear
        self.wall_clock = wall_clock
        self.frame_clock = frame_clock

        self._running = False
        self._frames = 0
        self._stop_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def frames(self) -> int:
        """Frames drawn so far."""
        return self._frames

    def step(self) -> str:
        """Run and draw a single frame."""
        model = self.session.frame(self.wall_clock(), self.frame_clock())
        text = draw(model)
        if self.clear:
            self.output.write(CLEAR_SCREEN)
        self.output.write(text + "\n")
        self.output.flush()
        self._frames += 1
        return text

    async def run(self, max_frames: int | None = None) -> None:
        """Draw frames until stopped (or max_frames is reached)."""
        self._running = True
        self._stop_event.clear()
        interval = 1.0 / self.frames_per_second

        logger.info("host_loop_started", fps=self.frames_per_second)

        try:
            while self._running:
                frame_start = time.monotonic()
                self.step()

                if max_frames is not None and self._frames >= max_frames:
                    break

                remaining = interval - (time.monotonic() - frame_start)
                if remaining > 0:
                    try:
                        await asyncio.wait_for(self._stop_event.wait(), timeout=remaining)
                    except asyncio.TimeoutError:
                        pass  # Normal - frame interval elapsed
        finally:
            self._running = False
            logger.info("host_loop_stopped", frames=self._frames)

    def stop(self) -> None:
        """Signal the loop to stop after the current frame."""
        self._running = False
        self._stop_event.set()


def run_frames(
    session: VoyageSession,
    num_frames: int,
    wall_clock: Clock,
    frame_clock: Clock,
) -> list[RenderModel | IntroModel]:
    """
    Run a fixed number of frames without waiting (useful for testing).

    Returns:
        The render model of every frame.
    """
    return [session.frame(wall_clock(), frame_clock()) for _ in range(num_frames)]

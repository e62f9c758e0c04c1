"""Command-line interface for sailing a voyage from a terminal."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import structlog

from .config import VoyageConfig, find_config, load_config
from .exceptions import ConfigError
from .host import HostLoop, draw, frame_clock_ms, wall_clock_ms
from .persistence import JsonFileStore
from .render import build_render_model, render_text
from .session import Phase, VoyageSession
from .state import new_voyage
from .types import Heading

DEFAULT_SAVE = Path.home() / ".oceanrace" / "save.json"


def configure_logging(verbose: bool) -> None:
    """Configure structlog for console output on stderr."""
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="oceanrace",
        description="TL Ocean Solo Race - an idle sailing voyage",
    )
    parser.add_argument("--config", type=str, help="Config name or path to a TOML file")
    parser.add_argument(
        "--save",
        type=str,
        default=str(DEFAULT_SAVE),
        help=f"Save file (default: {DEFAULT_SAVE})",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("show", help="Catch up and print one frame")

    sail = commands.add_parser("sail", help="Watch the voyage live")
    sail.add_argument("--frames", type=int, default=None, help="Stop after N frames")
    sail.add_argument("--fps", type=float, default=None, help="Frames per second")

    steer = commands.add_parser("steer", help="Set the boat heading")
    steer.add_argument("heading", choices=[h.value for h in Heading])

    commands.add_parser("anchor", help="Drop or raise the anchor")
    commands.add_parser("reset", help="Start a new voyage")

    map_cmd = commands.add_parser("map", help="Print a generated map")
    map_cmd.add_argument("--seed", type=int, default=None, help="Seed (default: saved voyage)")
    return parser


def resolve_config(name: str | None) -> VoyageConfig:
    if not name:
        return VoyageConfig()
    return load_config(find_config(name))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger = structlog.get_logger()

    try:
        config = resolve_config(args.config)
    except ConfigError as exc:
        logger.error("config_not_found", error=str(exc))
        return 2

    store = JsonFileStore(args.save)
    now = wall_clock_ms()
    session = VoyageSession(store, now, config, phase=Phase.PLAYING)

    if args.command == "map":
        # Preview only: never written to the save slot
        voyage = session.voyage
        if args.seed is not None:
            voyage = new_voyage(args.seed, now, config)
        print(render_text(build_render_model(voyage)))
        return 0

    # First run: keep the fresh voyage so later commands continue it
    if store.get(config.session.storage_key) is None:
        session.save()

    if args.command == "sail":
        loop = HostLoop(session, frames_per_second=args.fps)
        try:
            asyncio.run(loop.run(max_frames=args.frames))
        except KeyboardInterrupt:
            logger.info("interrupted")
        return 0

    # One-shot commands: bring the voyage up to date first
    session.catch_up(now)
    if args.command == "steer":
        session.steer(Heading(args.heading))
    elif args.command == "anchor":
        session.toggle_anchor(now)
    elif args.command == "reset":
        session.request_reset(now, confirmed=True)

    print(draw(session.frame(now, frame_clock_ms())))
    return 0


if __name__ == "__main__":
    sys.exit(main())

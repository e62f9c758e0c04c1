"""Idle sailing voyage simulation core."""

from .config import VoyageConfig, find_config, load_config
from .exceptions import ConfigError, InvalidFieldError, PersistedPayloadError, VoyageError
from .generation import (
    find_water_start,
    generate_map,
    generate_weather_mask,
    place_reflections,
    weather_covers_tile,
)
from .persistence import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    decode_voyage,
    encode_voyage,
    load_voyage,
    save_voyage,
)
from .render import RenderModel, build_render_model, render_text
from .rng import derive_seed, hash_seed_string, make_rng, random_int, shuffle
from .session import InputEvent, Phase, VoyageSession
from .sparkles import prune_sparkles, spawn_sparkles
from .state import ActiveAphorism, Boat, Sparkle, Voyage, new_voyage
from .tick import TickResult, advance
from .types import HEADING_DELTAS, Heading, Position, ReflectionMarker

__all__ = [
    # Types
    "Heading",
    "Position",
    "ReflectionMarker",
    "HEADING_DELTAS",
    # RNG
    "make_rng",
    "random_int",
    "shuffle",
    "hash_seed_string",
    "derive_seed",
    # Generation
    "generate_map",
    "find_water_start",
    "generate_weather_mask",
    "weather_covers_tile",
    "place_reflections",
    # State
    "Voyage",
    "Boat",
    "ActiveAphorism",
    "Sparkle",
    "new_voyage",
    # Tick
    "TickResult",
    "advance",
    # Sparkles
    "spawn_sparkles",
    "prune_sparkles",
    # Persistence
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "encode_voyage",
    "decode_voyage",
    "load_voyage",
    "save_voyage",
    # Presentation
    "RenderModel",
    "build_render_model",
    "render_text",
    # Session
    "VoyageSession",
    "InputEvent",
    "Phase",
    # Config
    "VoyageConfig",
    "load_config",
    "find_config",
    # Exceptions
    "VoyageError",
    "PersistedPayloadError",
    "InvalidFieldError",
    "ConfigError",
]

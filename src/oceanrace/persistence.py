"""Voyage persistence: a single save slot in a string key-value store.

Only the seed and the mutable fields are saved; the map, weather mask
and aphorism pool are regenerated from the seed. Loading repairs each
field on its own, so one bad field never costs the whole voyage.
"""

import json
from pathlib import Path
from typing import Any, Protocol, TypeVar

import structlog
from pydantic import BaseModel, FiniteFloat, StrictBool, StrictInt, TypeAdapter, ValidationError

from .config import VoyageConfig
from .exceptions import InvalidFieldError, PersistedPayloadError
from .generation import find_water_start, generate_map, generate_weather_mask
from .generation.reflections import APHORISM_SET
from .state import ActiveAphorism, Boat, Voyage, new_seed, new_voyage
from .types import Heading, Position, ReflectionMarker

logger = structlog.get_logger()

T = TypeVar("T")

RECORD_VERSION = 3


class KeyValueStore(Protocol):
    """Synchronous string store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """In-process store, handy for tests and one-shot runs."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Store backed by one JSON object file mapping keys to strings.

    Every set() rewrites the file synchronously.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("store_unreadable", path=str(self.path), error=str(exc))
            return {}
        if not isinstance(data, dict):
            logger.warning("store_unreadable", path=str(self.path), error="not an object")
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# --- Record models (what goes on disk) ---


class BoatRecord(BaseModel):
    x: int
    y: int
    heading: Heading
    anchored: bool


class MarkerRecord(BaseModel, strict=True):
    x: int
    y: int
    aphorism: str


class AphorismRecord(BaseModel):
    text: str | None
    visible: bool


class VoyageRecord(BaseModel):
    """Flat persisted form of a voyage."""

    version: int = RECORD_VERSION
    seed: int
    boat: BoatRecord
    next_boat_move_at: float
    next_weather_move_at: float
    front_offset: int
    markers: list[MarkerRecord]
    reflections_found: int
    reflections_total: int
    active_aphorism: AphorismRecord
    revealed: list[str]
    regenerations: int


def encode_voyage(voyage: Voyage) -> str:
    """Serialize a voyage to the JSON payload stored in the save slot."""
    record = VoyageRecord(
        seed=voyage.seed,
        boat=BoatRecord(
            x=voyage.boat.position.x,
            y=voyage.boat.position.y,
            heading=voyage.boat.heading,
            anchored=voyage.boat.anchored,
        ),
        next_boat_move_at=voyage.next_boat_move_at,
        next_weather_move_at=voyage.next_weather_move_at,
        front_offset=voyage.front_offset,
        markers=[
            MarkerRecord(x=m.position.x, y=m.position.y, aphorism=m.aphorism)
            for m in voyage.markers
        ],
        reflections_found=voyage.reflections_found,
        reflections_total=voyage.reflections_total,
        active_aphorism=AphorismRecord(
            text=voyage.active_aphorism.text,
            visible=voyage.active_aphorism.visible,
        ),
        revealed=list(voyage.revealed),
        regenerations=voyage.regenerations,
    )
    return record.model_dump_json()


# --- Field validation ---

_INT = TypeAdapter(StrictInt)
_BOOL = TypeAdapter(StrictBool)
_TIMESTAMP = TypeAdapter(FiniteFloat)
_HEADING = TypeAdapter(Heading)


def _check(adapter: TypeAdapter[T], name: str, value: Any) -> T:
    """Validate one value.

    Raises:
        InvalidFieldError: If the value has the wrong type.
    """
    try:
        return adapter.validate_python(value)
    except ValidationError as exc:
        raise InvalidFieldError(name, exc.errors()[0]["msg"]) from exc


def _read(
    data: dict,
    key: str,
    adapter: TypeAdapter[T],
    default: T,
    name: str | None = None,
) -> T:
    """Validate data[key], falling back to default when absent or invalid."""
    name = name or key
    try:
        if key not in data:
            raise InvalidFieldError(name, "missing")
        return _check(adapter, name, data[key])
    except InvalidFieldError as exc:
        logger.info("field_repaired", field=exc.field, reason=exc.reason)
        return default


def _section(data: dict, name: str) -> dict:
    value = data.get(name)
    if isinstance(value, dict):
        return value
    if name in data:
        logger.info("field_repaired", field=name, reason="not an object")
    return {}


def _decode_boat(data: dict, land, start: Position) -> Boat:
    raw = _section(data, "boat")
    height, width = land.shape

    x = _read(raw, "x", _INT, None, name="boat.x")
    y = _read(raw, "y", _INT, None, name="boat.y")
    if x is None or y is None:
        position = start
    else:
        position = Position(x=min(max(x, 0), width - 1), y=min(max(y, 0), height - 1))

    if land[position.y, position.x]:
        logger.info("boat_relocated", from_pos=str(position), to_pos=str(start))
        position = start

    return Boat(
        position=position,
        heading=_read(raw, "heading", _HEADING, Heading.EAST, name="boat.heading"),
        anchored=_read(raw, "anchored", _BOOL, False, name="boat.anchored"),
    )


def _decode_due(data: dict, name: str, now_ms: float, interval_ms: int) -> float:
    due = _read(data, name, _TIMESTAMP, now_ms)
    if due > now_ms + interval_ms:
        logger.info("field_repaired", field=name, reason="too far in the future")
        return now_ms + interval_ms
    return due


def _check_marker(
    index: int,
    item: Any,
    land,
    occupied: set[Position],
    seen_positions: set[Position],
    seen_aphorisms: set[str],
) -> ReflectionMarker:
    """Validate one saved marker.

    Raises:
        InvalidFieldError: On wrong types, out-of-range or land coordinates,
            the spawn or boat cell, unknown aphorisms, or a position/aphorism
            already taken.
    """
    name = f"markers[{index}]"
    try:
        record = MarkerRecord.model_validate(item)
    except ValidationError as exc:
        raise InvalidFieldError(name, exc.errors()[0]["msg"]) from exc

    height, width = land.shape
    if not (0 <= record.x < width and 0 <= record.y < height):
        raise InvalidFieldError(name, "out of bounds")
    if land[record.y, record.x]:
        raise InvalidFieldError(name, "on land")
    if record.aphorism not in APHORISM_SET:
        raise InvalidFieldError(name, "unknown aphorism")

    position = Position(x=record.x, y=record.y)
    if position in occupied:
        raise InvalidFieldError(name, "on boat")
    if position in seen_positions or record.aphorism in seen_aphorisms:
        raise InvalidFieldError(name, "duplicate")
    return ReflectionMarker(position=position, aphorism=record.aphorism)


def _decode_markers(data: dict, land, occupied: set[Position]) -> list[ReflectionMarker]:
    raw = data.get("markers")
    if not isinstance(raw, list):
        if "markers" in data:
            logger.info("field_repaired", field="markers", reason="not a list")
        return []

    markers: list[ReflectionMarker] = []
    seen_positions: set[Position] = set()
    seen_aphorisms: set[str] = set()

    for index, item in enumerate(raw):
        try:
            marker = _check_marker(
                index, item, land, occupied, seen_positions, seen_aphorisms
            )
        except InvalidFieldError as exc:
            logger.info("field_repaired", field=exc.field, reason=exc.reason)
            continue
        seen_positions.add(marker.position)
        seen_aphorisms.add(marker.aphorism)
        markers.append(marker)

    return markers


def _decode_aphorism(data: dict) -> ActiveAphorism:
    raw = _section(data, "active_aphorism")
    text = raw.get("text")
    if text is not None and not (isinstance(text, str) and text in APHORISM_SET):
        logger.info("field_repaired", field="active_aphorism.text", reason="unknown aphorism")
        text = None
    visible = _read(raw, "visible", _BOOL, False, name="active_aphorism.visible")
    return ActiveAphorism(text=text, visible=visible and text is not None)


def _decode_revealed(data: dict) -> list[str]:
    raw = data.get("revealed")
    if not isinstance(raw, list):
        if "revealed" in data:
            logger.info("field_repaired", field="revealed", reason="not a list")
        return []

    revealed: list[str] = []
    for index, text in enumerate(raw):
        if not (isinstance(text, str) and text in APHORISM_SET):
            logger.info("field_repaired", field=f"revealed[{index}]", reason="unknown aphorism")
            continue
        if text in revealed:
            logger.info("field_repaired", field=f"revealed[{index}]", reason="duplicate")
            continue
        revealed.append(text)
    return revealed


def decode_voyage(
    raw: str,
    now_ms: float,
    config: VoyageConfig | None = None,
) -> Voyage:
    """Rebuild a voyage from a saved payload, repairing bad fields.

    Args:
        raw: JSON payload from the save slot.
        now_ms: Wall clock in milliseconds, used for missing due times.
        config: Voyage configuration.

    Returns:
        A playable voyage.

    Raises:
        PersistedPayloadError: If the payload is not a JSON object or has
            no usable integer seed.
    """
    config = config or VoyageConfig()
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise PersistedPayloadError(f"Payload is not JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PersistedPayloadError("Payload is not an object")
    try:
        seed = _check(_INT, "seed", data.get("seed"))
    except InvalidFieldError as exc:
        raise PersistedPayloadError(f"Unusable seed: {exc.reason}") from exc

    land = generate_map(seed, config.map)
    start = find_water_start(land)
    boat = _decode_boat(data, land, start)
    schedule = config.schedule

    voyage = Voyage(
        seed=seed,
        land=land,
        boat=boat,
        weather_mask=generate_weather_mask(seed, config.map.height, config.weather),
        next_boat_move_at=_decode_due(
            data, "next_boat_move_at", now_ms, max(schedule.boat_step_ms, schedule.front_step_ms)
        ),
        next_weather_move_at=_decode_due(
            data, "next_weather_move_at", now_ms, schedule.weather_step_ms
        ),
        front_offset=_read(data, "front_offset", _INT, 0) % config.map.width,
        markers=_decode_markers(data, land, {start, boat.position}),
        active_aphorism=_decode_aphorism(data),
        revealed=_decode_revealed(data),
        regenerations=max(_read(data, "regenerations", _INT, 0), 0),
        config=config,
    )

    if not voyage.markers:
        voyage.regenerate_reflections()
    else:
        found = _read(data, "reflections_found", _INT, 0)
        total = _read(data, "reflections_total", _INT, 0)
        voyage.reflections_found = max(found, 0)
        voyage.reflections_total = max(total, voyage.reflections_found + len(voyage.markers))

    logger.info(
        "voyage_loaded",
        seed=seed,
        version=data.get("version"),
        position=str(voyage.boat.position),
        reflections_left=len(voyage.markers),
    )
    return voyage


def save_voyage(
    store: KeyValueStore,
    voyage: Voyage,
    key: str | None = None,
) -> None:
    """Write the voyage to the save slot."""
    store.set(key or voyage.config.session.storage_key, encode_voyage(voyage))


def load_voyage(
    store: KeyValueStore,
    now_ms: float,
    config: VoyageConfig | None = None,
    key: str | None = None,
) -> Voyage:
    """Load the saved voyage, or start a fresh one.

    An empty slot or an unparseable payload yields a new voyage seeded
    from the wall clock.
    """
    config = config or VoyageConfig()
    raw = store.get(key or config.session.storage_key)
    if raw is None:
        return new_voyage(new_seed(now_ms), now_ms, config)

    try:
        return decode_voyage(raw, now_ms, config)
    except PersistedPayloadError as exc:
        logger.warning("payload_unparseable", error=str(exc))
        return new_voyage(new_seed(now_ms), now_ms, config)

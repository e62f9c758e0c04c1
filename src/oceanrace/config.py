"""Voyage configuration models and TOML loading."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from .exceptions import ConfigError

CONFIGS_DIR = Path(__file__).parent / "configs"


class MapConfig(BaseModel):
    """Archipelago generation parameters."""

    width: int = Field(default=160, description="World width in cells")
    height: int = Field(default=45, description="World height in cells")
    island_count_min: int = Field(default=9, description="Minimum islands")
    island_count_max: int = Field(default=12, description="Maximum islands")
    center_margin_x: int = Field(default=8, description="Island centre margin (x)")
    center_margin_y: int = Field(default=6, description="Island centre margin (y)")
    blobs_min: int = Field(default=2, description="Minimum blobs per island")
    blobs_max: int = Field(default=5, description="Maximum blobs per island")
    blob_offset_x: int = Field(default=10, description="Max blob offset from centre (x)")
    blob_offset_y: int = Field(default=6, description="Max blob offset from centre (y)")
    blob_rx_min: int = Field(default=4, description="Minimum blob semi-axis (x)")
    blob_rx_max: int = Field(default=12, description="Maximum blob semi-axis (x)")
    blob_ry_min: int = Field(default=2, description="Minimum blob semi-axis (y)")
    blob_ry_max: int = Field(default=7, description="Maximum blob semi-axis (y)")
    edge_margin: int = Field(default=2, description="Blob centre margin from grid edges")


class WeatherConfig(BaseModel):
    """Weather front mask parameters."""

    front_width: int = Field(default=48, description="Mask width in cells")
    thickness_min_ratio: float = Field(default=0.4, description="Band min width / front width")
    thickness_max_ratio: float = Field(default=0.8, description="Band max width / front width")
    thickness_floor: int = Field(default=3, description="Absolute minimum band width")
    holes_min: int = Field(default=8, description="Minimum number of holes")
    hole_area_divisor: int = Field(default=18, description="One hole per this many mask cells")
    hole_width_min: int = Field(default=2, description="Minimum hole width")
    hole_width_max: int = Field(default=3, description="Maximum hole width")
    hole_height_min: int = Field(default=1, description="Minimum hole height")
    hole_height_max: int = Field(default=2, description="Maximum hole height")
    smooth_threshold: int = Field(
        default=4, description="Cells in 3x3 neighbourhood needed to stay in the front"
    )


class ScheduleConfig(BaseModel):
    """Tick timing, all in milliseconds."""

    boat_step_ms: int = Field(default=30_000, gt=0, description="Boat interval in clear seas")
    front_step_ms: int = Field(default=15_000, gt=0, description="Boat interval inside the front")
    weather_step_ms: int = Field(default=20_000, gt=0, description="Front scroll interval")
    max_catchup_ms: int = Field(default=2 * 60 * 60 * 1000, ge=0, description="Catch-up window")


class ReflectionConfig(BaseModel):
    """Reflection marker parameters."""

    count_min: int = Field(default=5, description="Minimum markers per voyage")
    count_max: int = Field(default=8, description="Maximum markers per voyage")


class SparkleConfig(BaseModel):
    """Cosmetic sparkle parameters."""

    rate: float = Field(default=7.0, description="Expected sparkles per second")
    lifetime_min_ms: int = Field(default=200, description="Minimum sparkle lifetime")
    lifetime_max_ms: int = Field(default=800, description="Maximum sparkle lifetime")
    glyphs: tuple[str, str] = Field(default=("*", "+"), description="Sparkle glyphs")


class SessionConfig(BaseModel):
    """Interactive session settings."""

    storage_key: str = "tl-ocean-solo-race-v1"
    notice_ms: int = 1800
    reset_notice_ms: int = 2200
    reset_confirm_ms: int = 2000
    frames_per_second: float = 4.0


class VoyageConfig(BaseModel):
    """Complete configuration for a voyage."""

    map: MapConfig = Field(default_factory=MapConfig)
    weather: WeatherConfig = Field(default_factory=WeatherConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)
    reflections: ReflectionConfig = Field(default_factory=ReflectionConfig)
    sparkles: SparkleConfig = Field(default_factory=SparkleConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)


def load_config(config_path: Path) -> VoyageConfig:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed VoyageConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return VoyageConfig.model_validate(data)


def find_config(name: str) -> Path:
    """Find a config file by name.

    Searches in the following order:
    1. Exact path if name contains path separator or ends in .toml
    2. oceanrace/configs/{name}.toml

    Raises:
        ConfigError: If config file is not found.
    """
    if "/" in name or name.endswith(".toml"):
        path = Path(name)
        if path.exists():
            return path
        raise ConfigError(f"Config file not found: {name}")

    config_path = CONFIGS_DIR / f"{name}.toml"
    if config_path.exists():
        return config_path

    raise ConfigError(
        f"Config '{name}' not found in {CONFIGS_DIR}. "
        f"Available configs: {list_configs()}"
    )


def list_configs() -> list[str]:
    """List available config names."""
    if not CONFIGS_DIR.exists():
        return []
    return sorted(p.stem for p in CONFIGS_DIR.glob("*.toml"))

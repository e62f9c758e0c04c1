"""Text presentation: a pure render model, then drawing it to a frame.

build_*_model() never touches a display; render_*() turns a model into
the full-screen character buffer a terminal (or any monospace surface)
can show.
"""

from dataclasses import dataclass

from .config import MapConfig
from .generation import coverage_grid
from .state import Voyage
from .types import HEADING_GLYPHS, Position

TITLE = "TL Ocean Solo Race"
HELP = "Arrow keys steer | A = Anchor | R = Reset"

WATER_GLYPH = "."
LAND_GLYPH = "#"
FRONT_GLYPH = "~"
MARKER_GLYPH = "?"

START_LABEL = "[ START SAILING ]"
START_HINT = "Press Enter / Space / S"

INTRO_TEXT = (
    "TL OCEAN SOLO RACE",
    "",
    "> Inspired by historic solo ocean races.",
    "> A single sailor.",
    "> A changing world.",
    "",
    "No crowds.",
    "No timers.",
    "No pressure.",
    "",
    "Each reset generates a new archipelago.",
    "Each voyage stands alone.",
    "",
    "Navigate with patience.",
    "Anchor when needed.",
    "Sail at your own rhythm.",
    "",
    "Press START SAILING to begin.",
)


@dataclass(frozen=True)
class RenderModel:
    """Everything needed to draw one frame of a voyage."""

    width: int
    rows: tuple[str, ...]
    boat: Position
    boat_glyph: str
    status: str
    aphorism: str
    help: str = HELP
    title: str = TITLE


@dataclass(frozen=True)
class IntroModel:
    """Intro window with its start affordance.

    ``start_row``/``start_col`` locate the start label inside ``rows``.
    """

    width: int
    rows: tuple[str, ...]
    start_row: int
    start_col: int
    start_label: str = START_LABEL
    title: str = TITLE


def centered(text: str, width: int) -> str:
    if len(text) >= width:
        return text[:width]
    left = (width - len(text)) // 2
    return " " * left + text + " " * (width - len(text) - left)


def fit_line(text: str, width: int) -> str:
    if len(text) >= width:
        return text[:width]
    return text + " " * (width - len(text))


def status_line(voyage: Voyage, notice: str = "") -> str:
    """One-line summary of the boat and voyage progress."""
    boat = voyage.boat
    mode = "ANCHORED" if boat.anchored else "SAILING"
    parts = [
        f"DIR:{boat.heading.value} POS:{boat.position.x},{boat.position.y} "
        f"{mode} SEED:{voyage.seed}",
        f"REFLECTIONS:{voyage.reflections_found}/{voyage.reflections_total}",
    ]
    if voyage.in_front(boat.position):
        parts.append("ROUGH SEAS")
    if notice:
        parts.append(notice)
    return " | ".join(parts)


def build_render_model(voyage: Voyage, notice: str = "") -> RenderModel:
    """Compose map glyphs and overlays for the current voyage state.

    Draw order, lowest first: water/land, front, sparkles, markers, boat.
    The boat cell keeps its underlying glyph in ``rows``; its glyph is
    reported separately so a surface can style it.
    """
    front = coverage_grid(voyage.weather_mask, voyage.front_offset, voyage.width)
    cells = [
        [
            LAND_GLYPH if voyage.land[y, x] else FRONT_GLYPH if front[y, x] else WATER_GLYPH
            for x in range(voyage.width)
        ]
        for y in range(voyage.height)
    ]

    for sparkle in voyage.sparkles:
        p = sparkle.position
        if not voyage.land[p.y, p.x]:
            cells[p.y][p.x] = sparkle.glyph

    for marker in voyage.markers:
        p = marker.position
        cells[p.y][p.x] = MARKER_GLYPH

    active = voyage.active_aphorism
    aphorism = f"“{active.text}”" if active.visible and active.text else ""

    return RenderModel(
        width=voyage.width,
        rows=tuple("".join(row) for row in cells),
        boat=voyage.boat.position,
        boat_glyph=HEADING_GLYPHS[voyage.boat.heading],
        status=status_line(voyage, notice),
        aphorism=aphorism,
    )


def _boxed(width: int, title: str, body: list[str]) -> str:
    lines = [f"┌{'─' * width}┐", f"│{centered(title, width)}│"]
    lines.extend(f"│{fit_line(line, width)}│" for line in body)
    lines.append(f"└{'─' * width}┘")
    return "\n".join(lines)


def render_text(model: RenderModel) -> str:
    """Draw a voyage frame as plain text."""
    body = list(model.rows)
    b = model.boat
    row = body[b.y]
    body[b.y] = row[: b.x] + model.boat_glyph + row[b.x + 1 :]
    body.extend([model.status, model.aphorism, model.help])
    return _boxed(model.width, model.title, body)


def build_intro_model(config: MapConfig | None = None) -> IntroModel:
    """Lay out the intro window centred on the map area."""
    config = config or MapConfig()
    width, height = config.width, config.height

    content_width = max(max(len(line) for line in INTRO_TEXT), len(START_LABEL), len(START_HINT))
    window_width = content_width + 4
    window_height = len(INTRO_TEXT) + 6
    inner = window_width - 2
    left_pad = (width - window_width) // 2
    top_pad = (height - window_height) // 2

    rows = []
    start_row = start_col = -1
    for y in range(height):
        local_y = y - top_pad
        if not 0 <= local_y < window_height:
            rows.append(" " * width)
            continue

        if local_y in (0, window_height - 1):
            line = "+" + "-" * inner + "+"
        else:
            content_row = local_y - 1
            text_index = content_row - 1
            text = ""
            if 0 <= text_index < len(INTRO_TEXT):
                text = INTRO_TEXT[text_index]
            elif content_row == len(INTRO_TEXT) + 2:
                text = START_LABEL
                start_row = y
                start_col = left_pad + 1 + (inner - len(START_LABEL)) // 2
            elif content_row == len(INTRO_TEXT) + 3:
                text = START_HINT
            line = "|" + centered(text, inner) + "|"

        rows.append(fit_line(" " * left_pad + line, width))

    return IntroModel(width=width, rows=tuple(rows), start_row=start_row, start_col=start_col)


def render_intro(model: IntroModel) -> str:
    """Draw the intro screen as plain text."""
    return _boxed(model.width, model.title, list(model.rows) + ["", "", ""])

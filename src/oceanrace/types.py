"""Core types for the voyage simulation."""

from enum import Enum

from pydantic import BaseModel


class Heading(str, Enum):
    """4-direction boat heading, stored by its compass letter."""

    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"


# Heading deltas for movement calculation
# Coordinate system: +X is East, +Y is South
HEADING_DELTAS: dict[Heading, tuple[int, int]] = {
    Heading.NORTH: (0, -1),
    Heading.EAST: (1, 0),
    Heading.SOUTH: (0, 1),
    Heading.WEST: (-1, 0),
}


HEADING_GLYPHS: dict[Heading, str] = {
    Heading.NORTH: "▲",
    Heading.EAST: "▶",
    Heading.SOUTH: "▼",
    Heading.WEST: "◀",
}


class Position(BaseModel, frozen=True):
    """Immutable 2D tile coordinate."""

    x: int
    y: int

    def offset(self, heading: Heading) -> "Position":
        """Return new position offset by heading (no wrapping)."""
        dx, dy = HEADING_DELTAS[heading]
        return Position(x=self.x + dx, y=self.y + dy)

    def __hash__(self) -> int:
        return hash((self.x, self.y))

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"

    def __repr__(self) -> str:
        return f"Position(x={self.x}, y={self.y})"


class ReflectionMarker(BaseModel, frozen=True):
    """Collectible tile paired with the aphorism it reveals."""

    position: Position
    aphorism: str

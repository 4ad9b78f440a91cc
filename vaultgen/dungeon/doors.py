"""Compass directions, grid coordinates and the Door connector model.

A Door is an unattached connection point of a room that has been placed (or is
pending placement) on the grid. It knows the coordinate of the room it belongs
to, the side it faces and how many door steps that room is from the start.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple


class Direction(Enum):
    """Cardinal side of a room."""
    NORTH = "north"  # +Y
    SOUTH = "south"  # -Y
    EAST = "east"    # +X
    WEST = "west"    # -X

    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def offset(self) -> Tuple[int, int]:
        return _OFFSETS[self]

    @property
    def is_horizontal(self) -> bool:
        return self in (Direction.EAST, Direction.WEST)

    @property
    def letter(self) -> str:
        return self.value[0].upper()

    @classmethod
    def parse(cls, raw) -> "Direction":
        """Accept a Direction, 'north', 'NORTH' or a single letter like 'N'."""
        if isinstance(raw, Direction):
            return raw
        if not isinstance(raw, str):
            raise ValueError(f"invalid direction: {raw!r}")
        key = raw.strip().lower()
        for d in cls:
            if key == d.value or key == d.value[0]:
                return d
        raise ValueError(f"invalid direction: {raw!r}")


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_OFFSETS = {
    Direction.NORTH: (0, 1),
    Direction.SOUTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.WEST: (-1, 0),
}

# Fixed iteration order for anything that walks all four sides
ALL_DIRECTIONS = (Direction.NORTH, Direction.EAST, Direction.SOUTH, Direction.WEST)


class Coord(NamedTuple):
    x: int
    y: int

    def neighbor(self, direction: Direction) -> "Coord":
        dx, dy = direction.offset
        return Coord(self.x + dx, self.y + dy)


ORIGIN = Coord(0, 0)


@dataclass(frozen=True)
class Door:
    coord: Coord
    direction: Direction
    distance: int = 0  # door steps from the start room to the owning room

    def matching_direction(self) -> Direction:
        """Side a neighbouring room needs a door on to attach here."""
        return self.direction.opposite()

    def target_coordinate(self) -> Coord:
        return self.coord.neighbor(self.direction)

    def is_matching(self, other: "Door") -> bool:
        """True when the two doors face each other across adjacent cells."""
        return self.target_coordinate() == other.coord and other.target_coordinate() == self.coord

    def is_horizontal(self) -> bool:
        return self.direction.is_horizontal

    def to_dict(self):
        return {"x": self.coord.x, "y": self.coord.y, "direction": self.direction.value, "distance": self.distance}


__all__ = ["Direction", "ALL_DIRECTIONS", "Coord", "ORIGIN", "Door"]

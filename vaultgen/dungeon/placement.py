"""Presentation collaborators.

The generator never draws anything itself. Once a layout is accepted it
replays the placements through a ``Presenter``:

    place_room(template, coord)  -> handle
    place_hallway(door)          -> handle   (horizontal or vertical variant)
    release_all(handles)                     (before the next generation)

Two presenters ship with the package: ``RecordingPresenter`` keeps JSON-ready
handle records (used by the HTTP and Socket.IO layers) and ``TextPresenter``
draws an ASCII map (used by the CLI).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .doors import Coord, Door
from .rooms import RoomCatalog, RoomTemplate

HORIZONTAL = "horizontal"
VERTICAL = "vertical"


@dataclass(frozen=True)
class PresentationHandle:
    kind: str        # 'room' or 'hallway'
    name: str        # template name, or hallway variant
    x: float
    y: float

    def to_dict(self):
        return {"kind": self.kind, "name": self.name, "x": self.x, "y": self.y}


def hallway_variant(door: Door) -> str:
    return HORIZONTAL if door.is_horizontal() else VERTICAL


def hallway_position(door: Door) -> Tuple[float, float]:
    """Midpoint between the door's room and the cell it opens onto."""
    dx, dy = door.direction.offset
    return door.coord.x + dx / 2, door.coord.y + dy / 2


class Presenter:
    def place_room(self, template: RoomTemplate, coord: Coord) -> PresentationHandle:
        raise NotImplementedError

    def place_hallway(self, door: Door) -> PresentationHandle:
        raise NotImplementedError

    def release_all(self, handles: Iterable[PresentationHandle]) -> None:
        raise NotImplementedError


class RecordingPresenter(Presenter):
    """Keeps every live handle in realization order."""

    def __init__(self):
        self.live: List[PresentationHandle] = []
        self.released = 0

    def place_room(self, template, coord):
        h = PresentationHandle("room", template.name, float(coord.x), float(coord.y))
        self.live.append(h)
        return h

    def place_hallway(self, door):
        x, y = hallway_position(door)
        h = PresentationHandle("hallway", hallway_variant(door), x, y)
        self.live.append(h)
        return h

    def release_all(self, handles):
        gone = set(handles)
        self.released += len(gone)
        self.live = [h for h in self.live if h not in gone]

    def to_list(self):
        return [h.to_dict() for h in self.live]


class TextPresenter(Presenter):
    """Draws rooms and hallways on a character grid, north up.

    Each grid cell maps to a glyph at twice its coordinate so hallways fit in
    between. ``S`` start, ``T`` target, ``#`` any other room.
    """

    def __init__(self, catalog: Optional[RoomCatalog] = None):
        self.catalog = catalog
        self._glyphs: Dict[Tuple[int, int], str] = {}

    def _room_glyph(self, template: RoomTemplate) -> str:
        if self.catalog is not None:
            if template == self.catalog.start:
                return "S"
            if template == self.catalog.target:
                return "T"
        return "#"

    def place_room(self, template, coord):
        self._glyphs[(coord.x * 2, coord.y * 2)] = self._room_glyph(template)
        return PresentationHandle("room", template.name, float(coord.x), float(coord.y))

    def place_hallway(self, door):
        x, y = hallway_position(door)
        variant = hallway_variant(door)
        self._glyphs[(int(x * 2), int(y * 2))] = "-" if variant == HORIZONTAL else "|"
        return PresentationHandle("hallway", variant, x, y)

    def release_all(self, handles):
        for h in handles:
            self._glyphs.pop((int(h.x * 2), int(h.y * 2)), None)

    def render(self) -> str:
        if not self._glyphs:
            return ""
        xs = [p[0] for p in self._glyphs]
        ys = [p[1] for p in self._glyphs]
        lines = []
        for gy in range(max(ys), min(ys) - 1, -1):
            row = "".join(self._glyphs.get((gx, gy), " ") for gx in range(min(xs), max(xs) + 1))
            lines.append(row.rstrip())
        return "\n".join(lines)


__all__ = [
    "PresentationHandle",
    "Presenter",
    "RecordingPresenter",
    "TextPresenter",
    "hallway_variant",
    "hallway_position",
    "HORIZONTAL",
    "VERTICAL",
]

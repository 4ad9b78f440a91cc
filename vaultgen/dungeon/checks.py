"""Structural checks for accepted layouts (diagnostics script and tests)."""
from __future__ import annotations

from typing import Dict, List, Tuple

from .doors import ALL_DIRECTIONS, Coord, Direction
from .rooms import RoomCatalog, RoomTemplate


def door_mismatches(cells: Dict[Coord, RoomTemplate]) -> List[Tuple[Coord, Direction]]:
    """Sides where one of two adjacent rooms has a door and the other does not."""
    out = []
    for coord, template in cells.items():
        for side in ALL_DIRECTIONS:
            other = cells.get(coord.neighbor(side))
            if other is None:
                continue
            if template.has_door_on_side(side) != other.has_door_on_side(side.opposite()):
                out.append((coord, side))
    return out


def dangling_doors(cells: Dict[Coord, RoomTemplate]) -> List[Tuple[Coord, Direction]]:
    """Doors that open onto an empty cell."""
    return [
        (coord, side)
        for coord, template in cells.items()
        for side in ALL_DIRECTIONS
        if template.has_door_on_side(side) and coord.neighbor(side) not in cells
    ]


def analyze(layout, catalog: RoomCatalog) -> dict:
    cells = layout.cells
    target_cells = [c for c, t in cells.items() if t == catalog.target]
    issues = {
        "door_mismatches": len(door_mismatches(cells)),
        "dangling_doors": len(dangling_doors(cells)),
        "target_count_off": 0 if len(target_cells) == 1 else 1,
        "target_too_close": 0 if target_cells and layout.distance_to(target_cells[0]) >= 5 else 1,
        "start_misplaced": 0 if cells.get(Coord(0, 0)) == catalog.start else 1,
    }
    return {"rooms": len(cells), "issues": issues, "ok": all(v == 0 for v in issues.values())}


__all__ = ["door_mismatches", "dangling_doors", "analyze"]

from typing import Dict, Iterator, Optional, Tuple

from .doors import Coord
from .rooms import RoomTemplate


class OccupancyMap:
    """Grid coordinate -> room template for the layout being searched.

    Only the search engine mutates it: ``place`` before recursing, ``remove``
    when that branch fails.
    """
    __slots__ = ("_cells",)

    def __init__(self):
        self._cells: Dict[Coord, RoomTemplate] = {}

    def place(self, coord: Coord, template: RoomTemplate) -> None:
        assert coord not in self._cells, f"cell {coord} already occupied"
        self._cells[coord] = template

    def remove(self, coord: Coord) -> RoomTemplate:
        assert coord in self._cells, f"cell {coord} is empty"
        return self._cells.pop(coord)

    def get(self, coord: Coord) -> Optional[RoomTemplate]:
        return self._cells.get(coord)

    def clear(self) -> None:
        self._cells.clear()

    def snapshot(self) -> Dict[Coord, RoomTemplate]:
        return dict(self._cells)

    def items(self) -> Iterator[Tuple[Coord, RoomTemplate]]:
        return iter(self._cells.items())

    def __contains__(self, coord) -> bool:
        return coord in self._cells

    def __len__(self) -> int:
        return len(self._cells)


__all__ = ["OccupancyMap"]

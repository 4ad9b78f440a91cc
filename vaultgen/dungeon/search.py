"""Backtracking search over partial layouts.

The engine is pure: it only touches the per-attempt ``SearchState`` it is
handed and returns the accepted placements. Realizing rooms is left to the
generation controller, which replays the result through a presenter.

One recursive call is one state transition:

    1. count the call against the iteration budget (abort the attempt when spent)
    2. drop stale doors, then succeed/fail on an empty frontier by depth
    3. pop the last door; an occupied target cell fails the branch, and so
       does (with prune_blocked) a second pending door aiming at the same cell
    4. try each candidate room: occupy, recurse with the grown frontier,
       roll the cell back on failure
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .cells import OccupancyMap
from .doors import ALL_DIRECTIONS, Coord, Door
from .rooms import RoomCatalog, RoomTemplate
from .selector import MIN_DEPTH, CandidateSelector

logger = logging.getLogger(__name__)

Frontier = Tuple[Door, ...]


class IterationBudgetExceeded(Exception):
    """Raised when one generation attempt spends its iteration budget."""

    def __init__(self, iterations: int, threshold: int):
        super().__init__(f"iteration budget exceeded ({iterations} > {threshold})")
        self.iterations = iterations
        self.threshold = threshold


@dataclass(frozen=True)
class Placement:
    """A room accepted at ``coord``, attached through ``door``."""
    template: RoomTemplate
    coord: Coord
    door: Door

    def to_dict(self):
        return {
            "room": self.template.name,
            "x": self.coord.x,
            "y": self.coord.y,
            "distance": self.door.distance + 1,
            "door": self.door.to_dict(),
        }


@dataclass
class SearchState:
    """Bookkeeping owned by exactly one generation attempt."""
    occupancy: OccupancyMap
    iterations: int = 0
    target_coord: Optional[Coord] = None

    @property
    def target_placed(self) -> bool:
        return self.target_coord is not None


def doors_of(template: RoomTemplate, coord: Coord, distance: int) -> Frontier:
    """Doors exposed by ``template`` placed at ``coord``, in fixed compass order."""
    return tuple(Door(coord, d, distance) for d in ALL_DIRECTIONS if d in template.doors)


class BacktrackingSearch:
    def __init__(
        self,
        catalog: RoomCatalog,
        selector: CandidateSelector,
        *,
        iteration_threshold: int,
        max_size: Optional[int] = None,
        prune_blocked: bool = False,
    ):
        self.catalog = catalog
        self.selector = selector
        self.iteration_threshold = iteration_threshold
        self.max_size = max_size
        self.prune_blocked = prune_blocked

    def run(self, state: SearchState, start_doors: Iterable[Door]) -> Optional[Tuple[Placement, ...]]:
        """Search from the start room's doors at depth 1.

        Returns the accepted placements in discovery order, or None when the
        layout dead-ends. Raises IterationBudgetExceeded when the budget runs out.
        """
        result = self._search(state, tuple(start_doors), 1)
        logger.debug(
            "search finished: iterations=%d success=%s rooms=%d",
            state.iterations, result is not None, len(state.occupancy),
        )
        return result

    def _search(self, state: SearchState, frontier: Frontier, depth: int) -> Optional[Tuple[Placement, ...]]:
        state.iterations += 1
        if state.iterations > self.iteration_threshold:
            raise IterationBudgetExceeded(state.iterations, self.iteration_threshold)

        occupancy = state.occupancy
        frontier = tuple(d for d in frontier if d.coord in occupancy)
        if not frontier:
            return () if depth >= MIN_DEPTH else None
        # Each pending door still needs a room of its own
        if self.max_size is not None and len(occupancy) + len(frontier) > self.max_size:
            return None

        door, rest = frontier[-1], frontier[:-1]
        cell = door.target_coordinate()
        if cell in occupancy:
            return None
        # Another pending door aiming at the same cell can never be resolved once this one is
        if self.prune_blocked and any(d.target_coordinate() == cell for d in rest):
            return None

        for template in self.selector.candidates(door, state.target_placed, occupancy):
            occupancy.place(cell, template)
            is_target = template == self.catalog.target
            if is_target:
                state.target_coord = cell
            opened = tuple(d for d in doors_of(template, cell, door.distance + 1) if not d.is_matching(door))
            placed = self._search(state, rest + opened, depth + 1)
            if placed is not None:
                return (Placement(template, cell, door),) + placed
            occupancy.remove(cell)
            if is_target:
                state.target_coord = None
        return None


__all__ = [
    "IterationBudgetExceeded",
    "Placement",
    "SearchState",
    "BacktrackingSearch",
    "doors_of",
]

"""Weighted, randomized candidate ordering for a single open door."""
from __future__ import annotations

import random
from typing import List, Optional

from .cells import OccupancyMap
from .doors import Door
from .rooms import RoomCatalog, RoomTemplate

# Minimum number of door steps between the start room and the target room.
# Also the minimum search depth an exhausted frontier must reach.
MIN_DEPTH = 5


class CandidateSelector:
    def __init__(self, catalog: RoomCatalog, rng: Optional[random.Random] = None, *, prune_blocked: bool = False):
        self.catalog = catalog
        self.rng = rng if rng is not None else random.Random()
        self.prune_blocked = prune_blocked

    def candidates(
        self,
        door: Door,
        target_placed: bool,
        occupancy: Optional[OccupancyMap] = None,
    ) -> List[RoomTemplate]:
        """Return templates to try at ``door``'s target cell, best first.

        Every eligible regular template appears ``weight`` times and the pool
        is shuffled uniformly, so heavier rooms tend to come up first. The
        target template is put in front once the new room would sit at least
        MIN_DEPTH steps from the start.
        """
        side = door.matching_direction()
        eligible = [t for t in self.catalog.rooms if self.catalog.has_door_on_side(t, side)]
        if self.prune_blocked and occupancy is not None:
            eligible = [t for t in eligible if not self._opens_onto_occupied(t, door, occupancy)]
        pool: List[RoomTemplate] = []
        for t in eligible:
            pool.extend([t] * max(1, self.catalog.weight(t)))
        self.rng.shuffle(pool)
        target = self.catalog.target
        if (
            not target_placed
            and door.distance + 1 >= MIN_DEPTH
            and self.catalog.has_door_on_side(target, side)
            and not (self.prune_blocked and occupancy is not None and self._opens_onto_occupied(target, door, occupancy))
        ):
            pool.insert(0, target)
        return pool

    @staticmethod
    def _opens_onto_occupied(template: RoomTemplate, door: Door, occupancy: OccupancyMap) -> bool:
        # A door facing an occupied cell (other than the room we attach to) can never be resolved
        cell = door.target_coordinate()
        for side in template.doors:
            if side == door.matching_direction():
                continue
            if cell.neighbor(side) in occupancy:
                return True
        return False


__all__ = ["MIN_DEPTH", "CandidateSelector"]

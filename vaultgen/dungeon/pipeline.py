"""Generation controller.

Owns the end-to-end attempt loop around the backtracking search and replays
an accepted layout through the presenter. An attempt is thrown away and
restarted from scratch when it

  * spends its iteration budget,
  * dead-ends (no arrangement closes every door deep enough), or
  * closes every door without ever placing the target room.

The loop is bounded by ``GeneratorConfig.max_attempts``; running out raises
``InfeasibleConfigurationError`` instead of spinning forever. Setting it to
None restores the unbounded retry.
"""
from __future__ import annotations

import itertools
import random
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from vaultgen.logging_utils import get_logger

from .cells import OccupancyMap
from .config import GeneratorConfig
from .doors import ORIGIN, Coord
from .metrics import init_metrics
from .placement import PresentationHandle, Presenter, RecordingPresenter
from .rooms import RoomCatalog, RoomTemplate, default_catalog
from .search import BacktrackingSearch, IterationBudgetExceeded, Placement, SearchState, doors_of
from .selector import CandidateSelector

log = get_logger("vaultgen.dungeon")


class InfeasibleConfigurationError(RuntimeError):
    """No attempt produced an acceptable layout within ``max_attempts``."""

    def __init__(self, attempts: int, seed: int):
        super().__init__(
            f"no layout with a target room after {attempts} attempts (seed={seed}); "
            "check the catalog, iteration threshold and max size"
        )
        self.attempts = attempts
        self.seed = seed


@dataclass
class DungeonLayout:
    seed: int
    start: RoomTemplate
    placements: Tuple[Placement, ...]
    target_coord: Coord
    attempts: int
    iterations: int
    cells: Dict[Coord, RoomTemplate] = field(init=False)
    distances: Dict[Coord, int] = field(init=False)

    def __post_init__(self):
        self.cells = {ORIGIN: self.start}
        self.distances = {ORIGIN: 0}
        for p in self.placements:
            self.cells[p.coord] = p.template
            self.distances[p.coord] = p.door.distance + 1

    @property
    def rooms(self) -> int:
        return len(self.cells)

    @property
    def target_distance(self) -> int:
        return self.distances[self.target_coord]

    def distance_to(self, coord: Coord) -> Optional[int]:
        return self.distances.get(coord)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "attempts": self.attempts,
            "iterations": self.iterations,
            "start": {"room": self.start.name, "x": ORIGIN.x, "y": ORIGIN.y},
            "target": {
                "x": self.target_coord.x,
                "y": self.target_coord.y,
                "distance": self.target_distance,
            },
            "rooms": self.rooms,
            "placements": [p.to_dict() for p in self.placements],
        }


class DungeonGenerator:
    def __init__(
        self,
        config: GeneratorConfig | None = None,
        *,
        catalog: RoomCatalog | None = None,
        presenter: Presenter | None = None,
        seed: int | None = None,
    ):
        config = config if config is not None else GeneratorConfig()
        # Copy so a shared config object keeps its own seed
        self.config = replace(config, seed=seed) if seed is not None else config
        if catalog is None:
            catalog = (
                RoomCatalog.from_json(self.config.catalog_path) if self.config.catalog_path else default_catalog()
            )
        self.catalog = catalog
        self.presenter = presenter if presenter is not None else RecordingPresenter()
        # Local RNG so unrelated random usage cannot disturb a seeded run
        self._rng = random.Random()
        self.selector = CandidateSelector(catalog, self._rng, prune_blocked=self.config.prune_blocked)
        self.search = BacktrackingSearch(
            catalog,
            self.selector,
            iteration_threshold=self.config.iteration_threshold,
            max_size=self.config.max_size,
            prune_blocked=self.config.prune_blocked,
        )
        self.handles: List[PresentationHandle] = []
        self.layout: Optional[DungeonLayout] = None
        self.metrics: Dict[str, Any] = {}
        self.seed: Optional[int] = None

    def generate(self, seed: int | None = None) -> DungeonLayout:
        """Run attempts until one is accepted, then realize it through the presenter."""
        if seed is None:
            seed = self.config.seed
        # 0 is a valid deterministic seed; None => random
        if seed is None:
            seed = random.randint(0, 2**31 - 1)
        self.seed = seed
        self._rng.seed(seed)
        self.metrics = init_metrics() if self.config.enable_metrics else {}
        started = time.perf_counter()

        if self.handles:
            self.presenter.release_all(self.handles)
        self.handles = []
        self.layout = None

        search_started = time.perf_counter()
        layout = self._attempt_loop(seed)
        replay_started = time.perf_counter()
        self._replay(layout)
        done = time.perf_counter()

        self.layout = layout
        if self.config.enable_metrics:
            self.metrics['rooms'] = layout.rooms
            self.metrics['target_distance'] = layout.target_distance
            self.metrics['runtime_ms'] = int((done - started) * 1000)
            self.metrics['phase_ms'] = {
                'search': int((replay_started - search_started) * 1000),
                'replay': int((done - replay_started) * 1000),
            }
        log.debug(
            event="generation_complete",
            seed=seed,
            attempts=layout.attempts,
            rooms=layout.rooms,
            target_distance=layout.target_distance,
        )
        return layout

    def _attempt_loop(self, seed: int) -> DungeonLayout:
        start = self.catalog.start
        limit = self.config.max_attempts
        for attempt in itertools.count(1):
            if limit is not None and attempt > limit:
                log.warn(event="generation_infeasible", seed=seed, attempts=limit)
                raise InfeasibleConfigurationError(limit, seed)
            self._count('attempts')
            occupancy = OccupancyMap()
            occupancy.place(ORIGIN, start)
            state = SearchState(occupancy)
            try:
                placements = self.search.run(state, doors_of(start, ORIGIN, 0))
            except IterationBudgetExceeded:
                reason = 'budget_aborts'
                placements = None
            except RecursionError:
                # One frame per placed room; deeper than the interpreter allows counts as a spent budget
                log.warn(event="generation_too_deep", attempt=attempt, iterations=state.iterations)
                reason = 'budget_aborts'
                placements = None
            else:
                if placements is None:
                    reason = 'dead_end_attempts'
                elif not state.target_placed:
                    reason = 'missing_target_attempts'
                else:
                    reason = None
            finally:
                self._record_iterations(state.iterations)
            if reason is None:
                return DungeonLayout(
                    seed=seed,
                    start=start,
                    placements=placements,
                    target_coord=state.target_coord,
                    attempts=attempt,
                    iterations=state.iterations,
                )
            self._count(reason)
            log.debug(event="generation_attempt_failed", attempt=attempt, reason=reason, iterations=state.iterations)

    def _replay(self, layout: DungeonLayout) -> None:
        self.handles.append(self.presenter.place_room(layout.start, ORIGIN))
        for p in layout.placements:
            self.handles.append(self.presenter.place_hallway(p.door))
            self.handles.append(self.presenter.place_room(p.template, p.coord))

    def _count(self, key: str) -> None:
        if self.config.enable_metrics:
            self.metrics[key] += 1

    def _record_iterations(self, iterations: int) -> None:
        if self.config.enable_metrics:
            self.metrics['iterations_last'] = iterations
            self.metrics['iterations_total'] += iterations


__all__ = ["DungeonGenerator", "DungeonLayout", "InfeasibleConfigurationError"]

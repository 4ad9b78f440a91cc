"""Public dungeon package interface.

Room-template layout generation by backtracking search, plus the presenter
collaborators that realize an accepted layout.
"""

from .cells import OccupancyMap
from .config import GeneratorConfig
from .doors import ALL_DIRECTIONS, ORIGIN, Coord, Direction, Door
from .pipeline import DungeonGenerator, DungeonLayout, InfeasibleConfigurationError
from .placement import PresentationHandle, Presenter, RecordingPresenter, TextPresenter
from .rooms import CatalogError, RoomCatalog, RoomTemplate, default_catalog
from .search import BacktrackingSearch, IterationBudgetExceeded, Placement, SearchState
from .selector import MIN_DEPTH, CandidateSelector

__all__ = [
    "ALL_DIRECTIONS",
    "ORIGIN",
    "MIN_DEPTH",
    "BacktrackingSearch",
    "CandidateSelector",
    "CatalogError",
    "Coord",
    "Direction",
    "Door",
    "DungeonGenerator",
    "DungeonLayout",
    "GeneratorConfig",
    "InfeasibleConfigurationError",
    "IterationBudgetExceeded",
    "OccupancyMap",
    "Placement",
    "PresentationHandle",
    "Presenter",
    "RecordingPresenter",
    "RoomCatalog",
    "RoomTemplate",
    "SearchState",
    "TextPresenter",
    "default_catalog",
]

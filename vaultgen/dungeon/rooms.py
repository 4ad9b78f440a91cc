import json
from dataclasses import dataclass
from itertools import combinations
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from .doors import ALL_DIRECTIONS, Direction


class CatalogError(ValueError):
    """Raised when a catalog document is malformed."""


@dataclass(frozen=True)
class RoomTemplate:
    name: str
    doors: FrozenSet[Direction]
    weight: int = 1

    def __post_init__(self):
        object.__setattr__(self, "doors", frozenset(Direction.parse(d) for d in self.doors))
        # Weights below 1 are floored so every eligible room stays reachable
        object.__setattr__(self, "weight", max(1, int(self.weight)))

    def has_door_on_side(self, direction: Direction) -> bool:
        return direction in self.doors

    @property
    def door_letters(self) -> str:
        return "".join(d.letter for d in ALL_DIRECTIONS if d in self.doors)

    def to_dict(self):
        return {
            "name": self.name,
            "doors": [d.value for d in ALL_DIRECTIONS if d in self.doors],
            "weight": self.weight,
        }


class RoomCatalog:
    """Immutable set of room templates plus the unique start and target templates.

    ``rooms`` holds the regular templates only; start and target are never
    offered as ordinary candidates.
    """

    def __init__(self, rooms: Iterable[RoomTemplate], start: RoomTemplate, target: RoomTemplate):
        self.rooms: Tuple[RoomTemplate, ...] = tuple(rooms)
        self.start = start
        self.target = target
        names = [start.name, target.name] + [r.name for r in self.rooms]
        if start.name == target.name:
            raise CatalogError("start and target templates must differ")
        dupes = sorted({n for n in names if names.count(n) > 1})
        if dupes:
            raise CatalogError(f"duplicate template names: {', '.join(dupes)}")
        self._by_name: Dict[str, RoomTemplate] = {t.name: t for t in (start, target) + self.rooms}

    def __contains__(self, template) -> bool:
        return isinstance(template, RoomTemplate) and self._by_name.get(template.name) == template

    def __len__(self):
        return len(self._by_name)

    def get(self, name: str) -> Optional[RoomTemplate]:
        return self._by_name.get(name)

    def has_door_on_side(self, template: RoomTemplate, direction: Direction) -> bool:
        assert template in self, f"unknown template {template!r}"
        return template.has_door_on_side(direction)

    def weight(self, template: RoomTemplate) -> int:
        assert template in self, f"unknown template {template!r}"
        return template.weight

    def to_dict(self):
        return {
            "start": self.start.to_dict(),
            "target": self.target.to_dict(),
            "rooms": [r.to_dict() for r in self.rooms],
        }

    @classmethod
    def from_dict(cls, data) -> "RoomCatalog":
        if not isinstance(data, dict):
            raise CatalogError("catalog must be an object")
        for key in ("start", "target"):
            if key not in data:
                raise CatalogError(f"catalog missing '{key}' template")
        rooms = data.get("rooms", [])
        if not isinstance(rooms, list):
            raise CatalogError("'rooms' must be a list")
        return cls(
            rooms=[_template_from_dict(r) for r in rooms],
            start=_template_from_dict(data["start"]),
            target=_template_from_dict(data["target"]),
        )

    @classmethod
    def from_json(cls, path) -> "RoomCatalog":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogError(f"invalid catalog JSON in {path}: {e}") from e
        except OSError as e:
            raise CatalogError(f"cannot read catalog {path}: {e}") from e
        return cls.from_dict(data)


def _template_from_dict(raw) -> RoomTemplate:
    if not isinstance(raw, dict) or not isinstance(raw.get("name"), str) or not raw["name"].strip():
        raise CatalogError(f"template needs a non-empty name: {raw!r}")
    doors = raw.get("doors", [])
    if not isinstance(doors, list):
        raise CatalogError(f"template {raw['name']}: 'doors' must be a list")
    weight = raw.get("weight", 1)
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise CatalogError(f"template {raw['name']}: 'weight' must be an integer")
    try:
        return RoomTemplate(raw["name"].strip(), frozenset(doors), weight)
    except ValueError as e:
        raise CatalogError(f"template {raw['name']}: {e}") from e


# Door-count weighting for the built-in catalog: dead ends are favoured so
# branches tend to close before the size cap is reached.
DEFAULT_WEIGHTS = {1: 6, 2: 3, 3: 1, 4: 1}
_KIND = {1: "dead_end", 2: "hall", 3: "junction", 4: "crossing"}


def default_catalog() -> RoomCatalog:
    rooms: List[RoomTemplate] = []
    for count in range(1, 5):
        for sides in combinations(ALL_DIRECTIONS, count):
            letters = "".join(d.letter for d in sides).lower()
            rooms.append(RoomTemplate(f"{_KIND[count]}_{letters}", frozenset(sides), DEFAULT_WEIGHTS[count]))
    start = RoomTemplate("entrance", frozenset(ALL_DIRECTIONS))
    target = RoomTemplate("vault", frozenset(ALL_DIRECTIONS))
    return RoomCatalog(rooms, start, target)


__all__ = ["CatalogError", "RoomTemplate", "RoomCatalog", "default_catalog", "DEFAULT_WEIGHTS"]

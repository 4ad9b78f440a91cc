import os
from dataclasses import dataclass, fields
from typing import Optional

# Keys shared by environment variables and Flask app.config
ENV_KEYS = {
    "DUNGEON_ITERATION_THRESHOLD": "iteration_threshold",
    "DUNGEON_MAX_SIZE": "max_size",
    "DUNGEON_MAX_ATTEMPTS": "max_attempts",
    "DUNGEON_PRUNE_BLOCKED": "prune_blocked",
    "DUNGEON_SEED": "seed",
    "DUNGEON_CATALOG": "catalog_path",
    "DUNGEON_ENABLE_GENERATION_METRICS": "enable_metrics",
}

_FALSY = {"0", "false", "no", "off", ""}


@dataclass
class GeneratorConfig:
    iteration_threshold: int = 5000
    # Cap on rooms per layout (start included); None lifts it
    max_size: Optional[int] = 30
    # Whole-attempt retries before giving up; None retries forever
    max_attempts: Optional[int] = 100
    # Fail early on doors that could never be resolved; same accepted layouts, fewer iterations
    prune_blocked: bool = True
    seed: Optional[int] = None
    catalog_path: Optional[str] = None
    enable_metrics: bool = True

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """Raise ValueError for out-of-range limits (re-run after applying overrides)."""
        if self.iteration_threshold < 1:
            raise ValueError("iteration_threshold must be >= 1")
        if self.max_size is not None and self.max_size < 1:
            raise ValueError("max_size must be >= 1 or None")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1 or None")

    def apply(self, key: str, raw) -> None:
        """Set the field mapped to ``key`` from an env/app.config value."""
        attr = ENV_KEYS[key]
        if attr in ("prune_blocked", "enable_metrics"):
            value = raw if isinstance(raw, bool) else str(raw).strip().lower() not in _FALSY
        elif attr == "catalog_path":
            value = str(raw) if raw else None
        else:
            value = _optional_int(raw)
            # 0 means "no cap" for the two optional limits
            if attr in ("max_size", "max_attempts") and value == 0:
                value = None
            if attr == "iteration_threshold" and value is None:
                return
        setattr(self, attr, value)

    @classmethod
    def from_env(cls, environ=None, **overrides) -> "GeneratorConfig":
        environ = os.environ if environ is None else environ
        cfg = cls(**overrides)
        for key in ENV_KEYS:
            if key in environ:
                cfg.apply(key, environ[key])
        cfg.validate()
        return cfg

    @classmethod
    def from_mapping(cls, mapping, base: "GeneratorConfig" = None) -> "GeneratorConfig":
        """Layer DUNGEON_* keys of ``mapping`` (e.g. app.config) over ``base``."""
        cfg = cls(**{f.name: getattr(base, f.name) for f in fields(cls)}) if base else cls()
        for key in ENV_KEYS:
            if key in mapping:
                cfg.apply(key, mapping[key])
        cfg.validate()
        return cfg


def _optional_int(raw) -> Optional[int]:
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw
    s = str(raw).strip()
    if not s or s.lower() == "none":
        return None
    return int(s)


__all__ = ["GeneratorConfig", "ENV_KEYS"]

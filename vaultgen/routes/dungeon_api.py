"""
project: VaultGen
module: dungeon_api.py
License: MIT

Dungeon layout API routes.

Endpoints:
    GET  /api/dungeon/layout        current layout (generated on first use)
    POST /api/dungeon/regenerate    throw the layout away and build a new one
    GET  /api/dungeon/catalog       room templates the generator draws from
    GET  /api/dungeon/gen/metrics   attempt / iteration counters of the last run

A single in-process generator serves every request. Generation is serialized
with a lock: an attempt owns its search state exclusively.
"""

import threading

from flask import Blueprint, current_app, jsonify, request

from vaultgen.dungeon import (
    CatalogError,
    DungeonGenerator,
    GeneratorConfig,
    InfeasibleConfigurationError,
    RecordingPresenter,
)
from vaultgen.logging_utils import get_logger

bp_dungeon = Blueprint("dungeon", __name__)
log = get_logger("vaultgen.routes")

_generator_lock = threading.Lock()
_current = {"generator": None, "config": None}


def _app_config() -> GeneratorConfig:
    return GeneratorConfig.from_mapping(current_app.config)


def _get_generator() -> DungeonGenerator:
    """Return the shared generator, rebuilding it when app.config changed. Caller holds the lock."""
    cfg = _app_config()
    gen = _current["generator"]
    if gen is None or _current["config"] != cfg:
        gen = DungeonGenerator(cfg, presenter=RecordingPresenter())
        _current["generator"] = gen
        _current["config"] = cfg
    return gen


def reset_generator() -> None:
    with _generator_lock:
        _current["generator"] = None
        _current["config"] = None


def regenerate(seed=None) -> DungeonGenerator:
    """Entry point for every 'regenerate requested' trigger (HTTP, Socket.IO)."""
    with _generator_lock:
        gen = _get_generator()
        gen.generate(seed)
        return gen


def current_generator() -> DungeonGenerator:
    with _generator_lock:
        gen = _get_generator()
        if gen.layout is None:
            gen.generate()
        return gen


def layout_payload(gen: DungeonGenerator) -> dict:
    data = gen.layout.to_dict()
    data["handles"] = gen.presenter.to_list()
    return data


def _error(message: str, status: int):
    return jsonify({"error": message}), status


@bp_dungeon.route("/api/dungeon/layout")
def dungeon_layout():
    """
    Return the current layout.
    Response: { 'seed', 'attempts', 'iterations', 'start', 'target', 'rooms', 'placements', 'handles' }
    """
    try:
        gen = current_generator()
    except (InfeasibleConfigurationError, CatalogError) as e:
        return _error(str(e), 422)
    return jsonify(layout_payload(gen))


@bp_dungeon.route("/api/dungeon/regenerate", methods=["POST"])
def dungeon_regenerate():
    """Regenerate the layout.

    Body JSON (optional): { "seed": <int|str|null> }
    A missing or null seed picks a random one.
    """
    from vaultgen.routes.seed_api import coerce_seed

    data = request.get_json(silent=True) or {}
    seed = coerce_seed(data.get("seed"))
    try:
        gen = regenerate(seed)
    except (InfeasibleConfigurationError, CatalogError) as e:
        log.warn(event="regenerate_failed", seed=seed, error=str(e))
        return _error(str(e), 422)
    log.info(event="regenerate", seed=seed, rooms=gen.layout.rooms)
    return jsonify(layout_payload(gen))


@bp_dungeon.route("/api/dungeon/catalog")
def dungeon_catalog():
    """Return the room catalog: { 'start': {...}, 'target': {...}, 'rooms': [...] }"""
    try:
        with _generator_lock:
            gen = _get_generator()
    except CatalogError as e:
        return _error(str(e), 422)
    return jsonify(gen.catalog.to_dict())


@bp_dungeon.route("/api/dungeon/gen/metrics")
def dungeon_metrics():
    """Return { 'seed': <int|null>, 'metrics': {...} } for the most recent generation."""
    with _generator_lock:
        gen = _current["generator"]
        if gen is None:
            return jsonify({"seed": None, "metrics": {}})
        return jsonify({"seed": gen.seed, "metrics": dict(gen.metrics)})

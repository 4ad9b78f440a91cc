"""Seed management API routes.

Lets a client pin the dungeon seed (numeric or any string) and regenerate the
layout from it in one call.
"""
import hashlib
import random

from flask import Blueprint, jsonify, request

from vaultgen.dungeon import CatalogError, InfeasibleConfigurationError
from vaultgen.routes.dungeon_api import regenerate

bp_seed = Blueprint('seed_api', __name__)

MAX_SEED = 9223372036854775807


def coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded non-negative int."""
    if payload_seed is None or isinstance(payload_seed, bool):
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, int):
        return payload_seed % MAX_SEED
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % MAX_SEED
        h = hashlib.sha256(s.encode('utf-8')).digest()
        return int.from_bytes(h[:8], 'big') % MAX_SEED
    # Fallback
    return random.randint(1, 1_000_000)


@bp_seed.route('/api/dungeon/seed', methods=['POST'])
def set_seed():
    """Set (or generate) the dungeon seed and regenerate.

    Body JSON (all optional):
      { "seed": <int|str|null>, "regenerate": <bool> }
    - If seed omitted or null and regenerate true => random seed.
    - If seed provided (int or string) => deterministic hashing.

    Response: { "seed": <int>, "rooms": <int> }
    """
    data = request.get_json(silent=True) or {}
    provided = data.get('seed', None)
    if provided is None and not data.get('regenerate'):
        return jsonify({"error": "provide a seed or set regenerate"}), 400
    seed = coerce_seed(provided)
    try:
        gen = regenerate(seed)
    except (InfeasibleConfigurationError, CatalogError) as e:
        return jsonify({"error": str(e), "seed": seed}), 422
    return jsonify({"seed": seed, "rooms": gen.layout.rooms})

"""Socket.IO dungeon handlers.

Events:
    - regenerate: build a new layout; payload { seed? }

Emits:
    - layout: layout JSON (same shape as GET /api/dungeon/layout)
    - error: invalid payload or infeasible generator configuration
"""

from flask_socketio import emit

from vaultgen import socketio
from vaultgen.dungeon import CatalogError, InfeasibleConfigurationError
from vaultgen.logging_utils import get_logger
from vaultgen.routes.dungeon_api import layout_payload, regenerate
from vaultgen.routes.seed_api import coerce_seed

from .validation import REGENERATE, validate

_log = get_logger("vaultgen.websockets")


@socketio.on('regenerate')
def handle_regenerate(data=None):
    ok, result = validate(data, REGENERATE)
    if not ok:
        emit('error', {'message': f"Invalid regenerate: {result['error']}", 'field': result['field'], 'code': result['code']})
        return
    seed = coerce_seed(result.get('seed'))
    try:
        gen = regenerate(seed)
    except (InfeasibleConfigurationError, CatalogError) as e:
        emit('error', {'message': str(e), 'field': 'seed', 'code': 'infeasible'})
        return
    _log.info(event="ws_regenerate", seed=seed, rooms=gen.layout.rooms)
    emit('layout', layout_payload(gen))

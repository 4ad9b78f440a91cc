"""
project: VaultGen
module: __init__.py
License: MIT

Flask application factory and core extensions setup.

Wires the Flask app and Flask-SocketIO together. Configuration comes from
environment variables (optionally via a local .env) with development
defaults. The dungeon generator reads its DUNGEON_* keys from app.config.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO

from vaultgen.dungeon.config import ENV_KEYS

# Load .env if present so DUNGEON_* settings can be supplied without exporting
# shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only installs still work; only file logging needs the folder
    pass

app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    JSON_SORT_KEYS=False,
)
# Generator settings: only forward what the environment actually sets so the
# GeneratorConfig defaults stay authoritative otherwise.
for _key in ENV_KEYS:
    if os.getenv(_key) is not None:
        app.config[_key] = os.getenv(_key)

# Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    ping_interval=20,
    ping_timeout=10,
)

# Register HTTP blueprints once app and socketio exist
from vaultgen.routes.dungeon_api import bp_dungeon  # noqa: E402
from vaultgen.routes.seed_api import bp_seed  # noqa: E402

app.register_blueprint(bp_dungeon)
app.register_blueprint(bp_seed)

# Import websocket handlers so their event decorators register with Socket.IO (side-effect)
from vaultgen.websockets import dungeon as _ws_dungeon  # noqa: F401,E402


def create_app():
    """Return the Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500

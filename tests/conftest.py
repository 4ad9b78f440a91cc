import os
import sys

import pytest

# Ensure repository root importable early (run.py lives there)
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from vaultgen import create_app  # noqa: E402
from vaultgen.dungeon import Direction, RoomCatalog, RoomTemplate  # noqa: E402
from vaultgen.dungeon.config import ENV_KEYS  # noqa: E402
from vaultgen.routes.dungeon_api import reset_generator  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture(autouse=True)
def _clean_generator_state(test_app, monkeypatch):
    """Fresh shared generator and no DUNGEON_* overrides leaking between tests."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    saved = {k: test_app.config[k] for k in ENV_KEYS if k in test_app.config}
    for k in saved:
        del test_app.config[k]
    reset_generator()
    yield
    for k in ENV_KEYS:
        test_app.config.pop(k, None)
    test_app.config.update(saved)
    reset_generator()


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def chain_catalog():
    """Start opens north only, one straight hall, target only attaches from the south.

    Every layout is the same straight line with the target five steps north.
    """
    start = RoomTemplate("gate", frozenset({Direction.NORTH}))
    hall = RoomTemplate("hall_ns", frozenset({Direction.NORTH, Direction.SOUTH}))
    target = RoomTemplate("throne", frozenset({Direction.SOUTH}))
    return RoomCatalog([hall], start, target)

"""Lightweight websocket payload validation.

Minimal schema checking with consistent error responses; not a general JSON
Schema implementation. Returns (ok, value_or_error) tuples and leaves it to the
caller whether to emit an error event.

Schema mini-language:
{
  'field_name': (types, required: bool)
}
``types`` is a name from PRIMITIVES or a tuple of names.

If invalid: (False, {'field': 'seed', 'error': 'expected int or str', 'code': 'type'})
If valid: (True, normalized_data)
"""
from __future__ import annotations
from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': str,
    'int': int,
    'bool': bool,
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def _matches(value: Any, type_name: str) -> bool:
    # bool is an int subclass; keep them apart
    if type_name == 'int' and isinstance(value, bool):
        return False
    return isinstance(value, PRIMITIVES[type_name])


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, (types, required) in schema.items():
        names = (types,) if isinstance(types, str) else tuple(types)
        value = payload.get(name)
        if value is None:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        if not any(_matches(value, t) for t in names):
            return _fail(name, f"expected {' or '.join(names)}", 'type')
        out[name] = value.strip() if isinstance(value, str) else value
    return True, out


REGENERATE = {
    'seed': (('int', 'str'), False),
}

"""
gateway.config
~~~~~~~~~~~~~~
Gateway settings read from a JSON file.  Loading never fails: an
unreadable or malformed file is reported and the defaults are used.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Tuple

from .acls import AclEntry, build_chain
from .logger import get_logger


class ValueKind(Enum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    NULL = "null"


def value_kind(value: Any) -> ValueKind:
    # bool first: True/False are ints to Python but not to JSON
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.REAL
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    if isinstance(value, dict):
        return ValueKind.OBJECT
    return ValueKind.NULL


def _port(value: int) -> int:
    return value & 0xFFFF


@dataclass(frozen=True, slots=True)
class Config:
    redis_host: str = "127.0.0.1"
    redis_port: int = 6379
    redis_auth: str | None = None
    http_host: str = "0.0.0.0"
    http_port: int = 7379
    acls: Tuple[AclEntry, ...] = ()


# key -> (expected kind, converter)
_FIELDS: Dict[str, Tuple[ValueKind, Callable[[Any], Any]]] = {
    "redis_host": (ValueKind.STRING, str),
    "redis_port": (ValueKind.INTEGER, _port),
    "redis_auth": (ValueKind.STRING, str),
    "http_host": (ValueKind.STRING, str),
    "http_port": (ValueKind.INTEGER, _port),
}


def _read_document(path: str | os.PathLike) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_config(path: str | os.PathLike) -> Config:
    log = get_logger()
    name = os.fspath(path)
    config = Config()

    try:
        doc = _read_document(path)
    except json.JSONDecodeError as e:
        log.config_error(name, e.msg, e.lineno, e.colno)
        return config
    except (OSError, UnicodeDecodeError) as e:
        log.config_error(name, f"unable to open {name}: {getattr(e, 'strerror', None) or e}")
        return config
    except (RecursionError, ValueError) as e:
        # nesting too deep, or an integer literal too long to convert
        log.config_error(name, str(e))
        return config

    if value_kind(doc) is not ValueKind.OBJECT:
        log.log.debug("%s: root is a JSON %s, using defaults", name, value_kind(doc).value)
        return config

    updates: Dict[str, Any] = {}
    for key, value in doc.items():
        kind = value_kind(value)
        if key == "acl":
            if kind is ValueKind.ARRAY:
                updates["acls"] = build_chain(value)
            continue
        expected = _FIELDS.get(key)
        if expected is None or expected[0] is not kind:
            continue  # unknown key or wrong kind: keep the default
        updates[key] = expected[1](value)

    config = replace(config, **updates)
    log.config_loaded(name, len(config.acls))
    return config


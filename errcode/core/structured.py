"""Narrowing helpers for untyped input.

Payloads and config files arrive as whatever ``json.loads`` or
``tomllib.loads`` produced. Everything here checks shape at runtime and
narrows the type for the checker, so the codec and config loader never
index into ``object``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d)


def as_str_dict(obj: object) -> StrDict | None:
    return obj if is_str_dict(obj) else None


def as_obj_list(obj: object) -> ObjList | None:
    """JSON arrays decode to lists; tuples and other sequences are rejected."""
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def first_non_str_entry(obj: Mapping[object, object]) -> tuple[object, object] | None:
    """First (key, value) pair where either side is not a str, in order."""
    for k, v in obj.items():
        if not isinstance(k, str) or not isinstance(v, str):
            return (k, v)
    return None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Nested table under ``key``, or None if missing or not a table."""
    return as_str_dict(table.get(key))


def json_type(obj: object) -> str:
    """Name of the JSON type ``obj`` decoded from, for error messages."""
    match obj:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case str():
            return "string"
        case list():
            return "array"
        case dict():
            return "object"
        case _:
            return type(obj).__name__

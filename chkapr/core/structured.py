"""Narrowing helpers for untyped JSON and TOML payloads.

GraphQL responses and config files arrive as plain ``object`` trees. These
helpers check shapes at runtime so decoders can stay free of casts.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    if is_str_dict(obj):
        return obj
    return None


def as_obj_list(obj: object) -> ObjList | None:
    if isinstance(obj, list):
        return cast(ObjList, obj)
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value, stripped.

    Returns None if missing, not a str, or empty after stripping. Use this for
    config values where blank means "unset".
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_raw_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value exactly as sent.

    Unlike ``get_str`` an empty string is kept: the gate has to see an empty
    tag name to reject the release.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    return value


def get_int(table: Mapping[str, object], key: str) -> int | None:
    value = table.get(key)
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def get_bool(table: Mapping[str, object], key: str) -> bool | None:
    value = table.get(key)
    if not isinstance(value, bool):
        return None
    return value


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys)."""
    return as_str_dict(table.get(key))


def get_list(table: Mapping[str, object], key: str) -> ObjList | None:
    return as_obj_list(table.get(key))


def get_nodes(table: Mapping[str, object], key: str) -> list[StrDict] | None:
    """Unwrap a GraphQL connection ``{key: {nodes: [...]}}``.

    Returns None when the connection or its ``nodes`` list is missing or null,
    and the list of object entries otherwise (possibly empty). Entries that are
    not objects are dropped.
    """
    connection = get_table(table, key)
    if connection is None:
        return None
    nodes = get_list(connection, "nodes")
    if nodes is None:
        return None
    out: list[StrDict] = []
    for item in nodes:
        d = as_str_dict(item)
        if d is not None:
            out.append(d)
    return out

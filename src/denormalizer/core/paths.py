"""
Path helpers - read and write values at a field path inside nested data.

Works with dicts, lists (integer segments) and plain objects (attributes).
Writes never mutate: set_path copies only the containers along the path.
"""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Mapping, MutableSequence, Sequence
from typing import Any


def _index(segment: Any) -> int:
    return segment if isinstance(segment, int) else int(segment)


def _is_sequence(obj: Any) -> bool:
    return isinstance(obj, Sequence) and not isinstance(obj, (str, bytes))


def _get_one(segment: Any, obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(segment)
    if _is_sequence(obj):
        try:
            return obj[_index(segment)]
        except (ValueError, IndexError):
            return None
    return getattr(obj, str(segment), None)


def get_path(path: Sequence[Any], obj: Any) -> Any:
    """
    Get the value at path, or None if any step along it is missing.

    Example:
        get_path(["nestedData", "comments"], {"nestedData": {"comments": ["a"]}})
        -> ["a"]
    """
    current = obj
    for segment in path:
        if current is None:
            return None
        current = _get_one(segment, current)
    return current


def _set_one(segment: Any, value: Any, obj: Any) -> Any:
    if isinstance(obj, Mapping):
        updated = dict(obj)
        updated[segment] = value
        return updated
    if isinstance(obj, MutableSequence):
        updated = list(obj)
        updated[_index(segment)] = value
        return updated
    if _is_sequence(obj):
        updated = list(obj)
        updated[_index(segment)] = value
        return tuple(updated)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.replace(obj, **{str(segment): value})
    updated = copy.copy(obj)
    setattr(updated, str(segment), value)
    return updated


def set_path(path: Sequence[Any], value: Any, obj: Any) -> Any:
    """
    Return a copy of obj with the value at path replaced.

    Only the containers along the path are copied; everything else is
    shared with obj. The path must exist: a missing intermediate raises
    KeyError, IndexError or AttributeError.
    """
    if not path:
        return value
    head, rest = path[0], path[1:]
    if not rest:
        return _set_one(head, value, obj)

    if isinstance(obj, Mapping):
        child = obj[head]
    elif _is_sequence(obj):
        child = obj[_index(head)]
    else:
        child = getattr(obj, str(head))
    return _set_one(head, set_path(rest, value, child), obj)

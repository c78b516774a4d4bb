# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
FlowMessage — The in-flight message envelope.

A message is an arbitrary nested dict. Nodes only touch it through
dot-separated paths (``payload.entity_id``, ``data.attributes``) and the
``topic`` field, so they never depend on its overall shape.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from hass_flow.core.errors import PlacementError

_MISSING = object()


def split_path(path: str) -> List[str]:
    """Split a dot-separated path, rejecting empty segments."""
    parts = path.split(".") if path else []
    if not parts or any(p == "" for p in parts):
        raise PlacementError(path, "empty path segment")
    return parts


def get_path(data: Any, path: str, default: Any = None) -> Any:
    """Read a dot-separated path from nested dicts/lists."""
    value = data
    for part in path.split("."):
        if isinstance(value, dict):
            value = value.get(part, _MISSING)
        elif isinstance(value, list):
            try:
                value = value[int(part)]
            except (ValueError, IndexError):
                value = _MISSING
        else:
            value = _MISSING
        if value is _MISSING:
            return default
    return value


def set_path(data: Dict[str, Any], path: str, value: Any) -> None:
    """
    Write a value at a dot-separated path.

    Missing intermediate segments are created as dicts. An intermediate
    that exists but is not a dict raises PlacementError.
    """
    parts = split_path(path)
    target = data
    for part in parts[:-1]:
        if part not in target or target[part] is None:
            target[part] = {}
        target = target[part]
        if not isinstance(target, dict):
            raise PlacementError(path, f"'{part}' is not a dictionary")
    target[parts[-1]] = value


class FlowMessage:
    """
    Thin wrapper around a message dict.

    The wrapped dict is used by reference; ``to_dict()`` returns it as-is.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data = data if data is not None else {}
        self._data.setdefault("_msgid", uuid.uuid4().hex)

    @property
    def msgid(self) -> str:
        return self._data["_msgid"]

    @property
    def topic(self) -> Any:
        return self._data.get("topic")

    @topic.setter
    def topic(self, value: Any) -> None:
        self._data["topic"] = value

    def get(self, path: str, default: Any = None) -> Any:
        return get_path(self._data, path, default)

    def set(self, path: str, value: Any) -> None:
        set_path(self._data, path, value)

    def has(self, path: str) -> bool:
        return get_path(self._data, path, _MISSING) is not _MISSING

    def to_dict(self) -> Dict[str, Any]:
        return self._data

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FlowMessage):
            return self._data == other._data
        return NotImplemented

    def __repr__(self) -> str:
        return f"FlowMessage(msgid={self.msgid!r}, topic={self.topic!r})"

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""Value casting for entity states and compare values."""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Optional

from hass_flow.core.config import settings

_NUMBER_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

TYPE_ALIASES = {
    "string": "str",
    "number": "num",
    "boolean": "bool",
}


def normalize_type(type_tag: Optional[str]) -> Optional[str]:
    """Map long type names onto the editor's short tags."""
    if not type_tag:
        return type_tag
    return TYPE_ALIASES.get(type_tag, type_tag)


def parse_number(value: Any) -> float:
    """
    Parse a leading number. ``"21.5 °C"`` -> 21.5, ``"abc"`` -> NaN.
    Booleans are not numbers here.
    """
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER_PREFIX.match(str(value)) if value is not None else None
    if match is None:
        return math.nan
    return float(match.group(1))


def is_ha_true(value: Any, boolean_states: Optional[Iterable[str]] = None) -> bool:
    states = boolean_states if boolean_states is not None else settings.HA_BOOLEAN_STATES
    return str(value).lower() in {s.lower() for s in states}


def cast_value(
    type_tag: Optional[str],
    value: Any,
    boolean_states: Optional[Iterable[str]] = None,
) -> Any:
    """
    Cast ``value`` to the type named by ``type_tag``.

    num    -> float (NaN when unparsable)
    str    -> str
    bool   -> truthiness of the raw value
    habool -> membership in the Home Assistant truthy states
    Unknown or empty tags return the value unchanged.
    """
    tag = normalize_type(type_tag)
    if not tag:
        return value
    if tag == "num":
        return parse_number(value)
    if tag == "str":
        return "" if value is None else str(value)
    if tag == "bool":
        return bool(value)
    if tag == "habool":
        return is_ha_true(value, boolean_states)
    return value

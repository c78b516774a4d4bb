# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Comparator — Evaluates "if state <operator> <value>" conditions.

The compare value arrives as an untyped string from the node config and is
resolved according to its compare type first: parsed as a number/boolean/
list/regex, or looked up in the message, the entity snapshot or a context
store. Only then is the operator applied to the actual value.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from hass_flow.memory.context_store import ContextStores
from hass_flow.protocols.message import FlowMessage, get_path
from hass_flow.runtime.casting import is_ha_true, normalize_type, parse_number

logger = logging.getLogger("hass.comparator")

OPERATORS = (
    "is", "is_not",
    "lt", "lte", "gt", "gte",
    "includes", "does_not_include",
    "cont", "starts_with",
)


@dataclass
class ComparisonContext:
    """Values a comparator may reference besides the compared value."""
    message: FlowMessage
    entity: Dict[str, Any] = field(default_factory=dict)


def strict_equals(a: Any, b: Any) -> bool:
    """Equality without cross-type coercion (``1 != "1"``, ``True != 1``)."""
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a == b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    return type(a) is type(b) and a == b


def _as_number(value: Any) -> float:
    return math.nan if value is None else parse_number(value)


class ComparatorEvaluator:
    """
    Resolves compare values and applies comparison operators.

    ``stores`` and ``flow_id`` are needed only for the ``flow`` and
    ``global`` compare types.
    """

    def __init__(
        self,
        stores: Optional[ContextStores] = None,
        flow_id: str = "",
        boolean_states: Optional[Iterable[str]] = None,
    ) -> None:
        self._stores = stores
        self._flow_id = flow_id
        self._boolean_states = list(boolean_states) if boolean_states is not None else None

    async def evaluate(
        self,
        operator: str,
        compare_value: Any,
        actual: Any,
        compare_type: Optional[str],
        context: ComparisonContext,
    ) -> bool:
        ctype = normalize_type(compare_type) or "str"
        resolved = await self.resolve_compare_value(ctype, compare_value, context)
        if ctype == "habool":
            actual = is_ha_true(actual, self._boolean_states)
        return self.compare(operator or "is", resolved, actual, ctype)

    async def resolve_compare_value(
        self,
        compare_type: str,
        value: Any,
        context: ComparisonContext,
    ) -> Any:
        if compare_type == "num":
            return parse_number(value)
        if compare_type in ("bool", "habool"):
            return value is True or value == "true"
        if compare_type == "re":
            return re.compile(str(value))
        if compare_type == "list":
            return [item.strip() for item in str(value).split(",")]
        if compare_type == "msg":
            return context.message.get(str(value))
        if compare_type == "entity":
            return get_path(context.entity, str(value))
        if compare_type in ("flow", "global"):
            if self._stores is None:
                raise RuntimeError(f"Compare type '{compare_type}' needs context stores")
            store = (
                self._stores.flow(self._flow_id)
                if compare_type == "flow"
                else self._stores.global_()
            )
            return await store.get(str(value))
        return value

    def compare(self, operator: str, resolved: Any, actual: Any, compare_type: str = "str") -> bool:
        if operator in ("is", "is_not"):
            if compare_type == "re":
                matched = resolved.search(str(actual)) is not None
            else:
                matched = strict_equals(resolved, actual)
            return matched if operator == "is" else not matched

        if operator in ("includes", "does_not_include"):
            items: List[Any] = resolved if isinstance(resolved, list) else [resolved]
            included = any(strict_equals(item, actual) for item in items)
            return included if operator == "includes" else not included

        if operator == "cont":
            return str(resolved) in str(actual)

        if operator == "starts_with":
            return isinstance(actual, str) and actual.startswith(str(resolved))

        if operator in ("lt", "lte", "gt", "gte"):
            left, right = _as_number(actual), _as_number(resolved)
            if math.isnan(left) or math.isnan(right):
                return False
            if operator == "lt":
                return left < right
            if operator == "lte":
                return left <= right
            if operator == "gt":
                return left > right
            return left >= right

        logger.warning("Unknown comparator operator: %s", operator)
        return False

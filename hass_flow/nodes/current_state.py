# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Current State Node — Read an entity's state and route on it.

Pipeline per message:
  resolve entity id -> fetch snapshot -> shape (elapsed time, cast)
  -> evaluate halt condition -> override topic, place state and snapshot
  -> send on output 1 (continue) or output 2 (halted).

A missing server drops the message. A missing or unknown entity sends
``{"payload": {}}`` on output 1.
"""

from __future__ import annotations

import copy
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from hass_flow.core.config import settings
from hass_flow.memory.context_store import ContextStores
from hass_flow.nodes.base import BaseNode, InputSpec, NodeResult, Outcome, ParsedInput
from hass_flow.protocols.message import FlowMessage
from hass_flow.protocols.schema import CurrentStateConfig
from hass_flow.runtime.casting import cast_value
from hass_flow.runtime.comparator import ComparatorEvaluator, ComparisonContext
from hass_flow.runtime.placement import ContextWriter
from hass_flow.runtime.server import ServiceHandle


def parse_timestamp_ms(value: Any) -> Optional[float]:
    """Milliseconds since the epoch for an ISO 8601 string; None if unparsable."""
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000


def shape_snapshot(
    snapshot: Mapping[str, Any],
    state_type: Optional[str],
    now_ms: float,
    boolean_states: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """
    Return a shaped deep copy of ``snapshot``; the input is never mutated.

    Adds ``timeSinceChangedMs`` (None when ``last_changed`` is unusable;
    negative values are kept). When ``state_type`` is given the state is
    cast and the raw value kept in ``original_state``.
    """
    shaped = copy.deepcopy(dict(snapshot))
    changed_ms = parse_timestamp_ms(shaped.get("last_changed"))
    shaped["timeSinceChangedMs"] = int(now_ms - changed_ms) if changed_ms is not None else None

    if state_type:
        shaped["original_state"] = shaped.get("state")
        shaped["state"] = cast_value(state_type, shaped.get("state"), boolean_states)
    return shaped


class CurrentStateNode(BaseNode):
    node_type = "api-current-state"
    name = "Current State"
    description = "Fetches the current state of an entity and halts or continues the flow on it"
    config_model = CurrentStateConfig
    output_count = 2
    inputs = {
        "entity_id": InputSpec(message_prop="payload.entity_id", config_prop="entity_id"),
    }

    config: CurrentStateConfig

    def __init__(
        self,
        node_id: str,
        config=None,
        *,
        flow_id: Optional[str] = None,
        server: Optional[ServiceHandle] = None,
        stores: Optional[ContextStores] = None,
        clock: Callable[[], float] = time.time,
        boolean_states: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(node_id, config, flow_id=flow_id, server=server, stores=stores)
        self._clock = clock
        self._boolean_states = list(boolean_states) if boolean_states is not None else list(settings.HA_BOOLEAN_STATES)
        self.comparator = ComparatorEvaluator(stores, self.flow_id, self._boolean_states)
        self.writer = ContextWriter(stores, self.flow_id, node_id)

    async def on_input(self, message: FlowMessage, parsed: Dict[str, ParsedInput]) -> NodeResult:
        config = self.config
        entity_id = config.entity_id or parsed["entity_id"].value

        if self.server is None:
            self.log.error("No valid server selected.")
            return NodeResult.dropped(error_message="No valid server selected.")

        if not entity_id:
            return self._continue_empty(
                message,
                "entity ID not set, cannot get current state, sending empty payload",
            )

        current = await self.server.get_states(entity_id) or {}
        if not current.get("entity_id"):
            return self._continue_empty(
                message,
                f"entity could not be found in cache for entity_id: {entity_id}, sending empty payload",
            )

        snapshot = shape_snapshot(
            current,
            config.state_type if config.casts_state else None,
            self._clock() * 1000,
            self._boolean_states,
        )

        halt = config.halt_condition
        should_halt = halt.is_configured and await self.comparator.evaluate(
            halt.operator,
            halt.compare_value,
            snapshot["state"],
            halt.compare_type,
            ComparisonContext(message=message, entity=snapshot),
        )

        if config.override_topic:
            message.topic = entity_id

        await self.writer.place(snapshot["state"], config.override_payload, config.state_location, message)
        await self.writer.place(snapshot, config.override_data, config.entity_location, message)

        if should_halt:
            self.log.debug(
                'Get current state: halting processing due to current state of %s matches "halt if state" option',
                entity_id,
                extra={"entity_id": entity_id},
            )
            status = self.set_status_failed(snapshot["state"])
            return NodeResult(outcome=Outcome.HALTED, outputs=[None, message], status=status)

        status = self.set_status_success(snapshot["state"])
        return NodeResult(outcome=Outcome.CONTINUED, outputs=[message, None], status=status)

    def _continue_empty(self, message: FlowMessage, warning: str) -> NodeResult:
        self.log.warning(warning)
        empty = FlowMessage({"_msgid": message.msgid, "payload": {}})
        return NodeResult(outcome=Outcome.CONTINUED, outputs=[empty, None])

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Placement — Writes a value to a message path or a context store.

Destinations (PlacementMode):
  NONE     nothing is written
  MESSAGE  the in-flight message, at ``location``
  NODE     the node's own context store
  FLOW     the flow context store
  GLOBAL   the global context store
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from hass_flow.memory.context_store import ContextStore, ContextStores
from hass_flow.protocols.message import FlowMessage
from hass_flow.protocols.schema import PlacementMode

logger = logging.getLogger("hass.placement")


class ContextWriter:
    """Placement bound to one node (for NODE scope) within one flow."""

    def __init__(
        self,
        stores: Optional[ContextStores],
        flow_id: str,
        node_id: str,
    ) -> None:
        self._stores = stores
        self._flow_id = flow_id
        self._node_id = node_id

    def _store_for(self, mode: PlacementMode) -> ContextStore:
        if self._stores is None:
            raise RuntimeError(f"Placement mode '{mode.value}' needs context stores")
        if mode is PlacementMode.NODE:
            return self._stores.node(self._flow_id, self._node_id)
        if mode is PlacementMode.FLOW:
            return self._stores.flow(self._flow_id)
        return self._stores.global_()

    async def place(
        self,
        value: Any,
        mode: PlacementMode,
        location: str,
        message: FlowMessage,
    ) -> None:
        """Write ``value`` to ``location`` in the destination named by ``mode``."""
        mode = PlacementMode.parse(mode)
        if mode is PlacementMode.NONE:
            return
        if mode is PlacementMode.MESSAGE:
            message.set(location, value)
            return
        await self._store_for(mode).set(location, value)
        logger.debug("Placed value at %s:%s", mode.value, location)

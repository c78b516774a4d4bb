# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Home Assistant Server — The service handle nodes read entity states from.

The server owns an in-process StateCache. Whatever connects to the hub
(outside this package) feeds the cache with full snapshots or
``state_changed`` event data; nodes only ever read from it.

Usage:
    server = HomeAssistantServer("home")
    server.cache.set_states([{"entity_id": "light.kitchen", "state": "on", ...}])
    snapshot = await server.get_states("light.kitchen")
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union, runtime_checkable

logger = logging.getLogger("hass.server")


@runtime_checkable
class ServiceHandle(Protocol):
    """What a node needs from a server."""

    async def get_states(
        self, entity_id: Optional[str] = None,
    ) -> Union[Dict[str, Any], Dict[str, Dict[str, Any]], None]:
        ...


class StateCache:
    """
    Last known snapshot per entity_id.

    Snapshots are stored as given; readers must copy before mutating.
    """

    def __init__(self) -> None:
        self._states: Dict[str, Dict[str, Any]] = {}

    def set_states(self, states: Iterable[Dict[str, Any]]) -> int:
        """Replace the whole cache. Entries without entity_id are skipped."""
        fresh = {}
        for state in states:
            entity_id = state.get("entity_id")
            if not entity_id:
                logger.warning("Skipping state without entity_id: %r", state)
                continue
            fresh[entity_id] = state
        self._states = fresh
        return len(fresh)

    def set_state(self, state: Dict[str, Any]) -> None:
        entity_id = state.get("entity_id")
        if not entity_id:
            raise ValueError("state must carry an entity_id")
        self._states[entity_id] = state

    def apply_state_changed(self, event_data: Dict[str, Any]) -> None:
        """
        Apply the data of a ``state_changed`` event.

        ``new_state`` of None means the entity was removed.
        """
        entity_id = event_data.get("entity_id")
        if not entity_id:
            return
        new_state = event_data.get("new_state")
        if new_state is None:
            self._states.pop(entity_id, None)
            logger.debug("Entity removed from cache: %s", entity_id)
        else:
            self._states[entity_id] = new_state

    def remove(self, entity_id: str) -> None:
        self._states.pop(entity_id, None)

    def get(self, entity_id: str) -> Optional[Dict[str, Any]]:
        return self._states.get(entity_id)

    def all(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._states)

    def entity_ids(self) -> List[str]:
        return sorted(self._states)

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._states


class HomeAssistantServer:
    """A named Home Assistant connection as seen by nodes."""

    def __init__(self, server_id: str, cache: Optional[StateCache] = None) -> None:
        self.server_id = server_id
        self.cache = cache if cache is not None else StateCache()

    async def get_states(
        self, entity_id: Optional[str] = None,
    ) -> Union[Dict[str, Any], Dict[str, Dict[str, Any]], None]:
        """
        Snapshot of one entity, or every cached entity when ``entity_id``
        is None. Unknown entities return None.
        """
        if entity_id is None:
            return self.cache.all()
        return self.cache.get(entity_id)

    def __repr__(self) -> str:
        return f"HomeAssistantServer(server_id={self.server_id!r}, entities={len(self.cache)})"

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Context Store — Redis-backed node, flow and global context.

Each scope is a Redis hash (see kernel.namespace). The first segment of a
dotted path is the hash field; deeper segments live inside the field's JSON
value, so ``set("kitchen.light", {...})`` rewrites the ``kitchen`` field.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import redis.asyncio as aioredis

from hass_flow.kernel.namespace import get_flow_key, get_global_key, get_node_key
from hass_flow.protocols.message import get_path, set_path, split_path

logger = logging.getLogger("hass.context_store")


class ContextStore:
    """
    One context scope stored under a single Redis key.

    ``ttl`` of 0 keeps keys forever; otherwise the TTL is refreshed on
    every write.
    """

    def __init__(self, redis: aioredis.Redis, key: str, ttl: int = 0) -> None:
        self._redis = redis
        self._key = key
        self._ttl = ttl

    @property
    def key(self) -> str:
        return self._key

    async def get(self, path: str, default: Any = None) -> Any:
        """Read a dotted path. Missing fields return ``default``."""
        parts = split_path(path)
        raw = await self._redis.hget(self._key, parts[0])
        if raw is None:
            return default
        value = _loads(raw)
        if len(parts) == 1:
            return value
        return get_path(value, ".".join(parts[1:]), default)

    async def set(self, path: str, value: Any) -> None:
        """Write a dotted path, creating intermediate dicts as needed."""
        parts = split_path(path)
        field = parts[0]
        if len(parts) == 1:
            new_value = value
        else:
            raw = await self._redis.hget(self._key, field)
            current = _loads(raw) if raw is not None else {}
            container = {field: current if current is not None else {}}
            set_path(container, path, value)
            new_value = container[field]

        await self._redis.hset(self._key, field, json.dumps(new_value, ensure_ascii=False))
        if self._ttl:
            await self._redis.expire(self._key, self._ttl)

    async def delete(self, key: str) -> None:
        """Remove a top-level field."""
        await self._redis.hdel(self._key, key)

    async def keys(self) -> List[str]:
        return sorted(await self._redis.hkeys(self._key))

    async def get_all(self) -> Dict[str, Any]:
        raw_dict = await self._redis.hgetall(self._key)
        return {k: _loads(v) for k, v in raw_dict.items()}

    async def clear(self) -> None:
        await self._redis.delete(self._key)


def _loads(raw: str) -> Any:
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return raw


class ContextStores:
    """
    Factory for the three scopes a node can see.

    ``node(flow_id, node_id)``, ``flow(flow_id)``, ``global_()``.
    """

    def __init__(self, redis: aioredis.Redis, ttl: int = 0) -> None:
        self._redis = redis
        self._ttl = ttl

    def node(self, flow_id: str, node_id: str) -> ContextStore:
        return ContextStore(self._redis, get_node_key(flow_id, node_id), self._ttl)

    def flow(self, flow_id: str) -> ContextStore:
        return ContextStore(self._redis, get_flow_key(flow_id), self._ttl)

    def global_(self) -> ContextStore:
        return ContextStore(self._redis, get_global_key(), self._ttl)

    async def clear_flow(self, flow_id: str, node_ids: Optional[List[str]] = None) -> None:
        """Delete a flow's context and the node contexts of ``node_ids``."""
        await self.flow(flow_id).clear()
        for node_id in node_ids or []:
            await self.node(flow_id, node_id).clear()
        logger.info("Cleared context for flow %s", flow_id)

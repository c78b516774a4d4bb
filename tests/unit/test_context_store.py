# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.
"""Unit tests for ContextStore."""

import pytest

from hass_flow.core.errors import PlacementError
from hass_flow.memory.context_store import ContextStore, ContextStores


class TestContextStore:
    @pytest.mark.asyncio
    async def test_set_and_get(self, mock_redis):
        store = ContextStore(mock_redis, "hass:f1:flow")
        await store.set("temperature", 21.5)
        assert await store.get("temperature") == 21.5

    @pytest.mark.asyncio
    async def test_nested_set_creates_structure(self, mock_redis):
        store = ContextStore(mock_redis, "hass:f1:flow")
        await store.set("rooms.kitchen.light", "on")
        assert await store.get("rooms") == {"kitchen": {"light": "on"}}
        assert await store.get("rooms.kitchen.light") == "on"

    @pytest.mark.asyncio
    async def test_nested_set_keeps_siblings(self, mock_redis):
        store = ContextStore(mock_redis, "hass:f1:flow")
        await store.set("rooms.kitchen", "on")
        await store.set("rooms.hall", "off")
        assert await store.get("rooms") == {"kitchen": "on", "hall": "off"}

    @pytest.mark.asyncio
    async def test_nested_set_through_scalar_raises(self, mock_redis):
        store = ContextStore(mock_redis, "hass:f1:flow")
        await store.set("rooms", "none")
        with pytest.raises(PlacementError):
            await store.set("rooms.kitchen", "on")

    @pytest.mark.asyncio
    async def test_missing_returns_default(self, mock_redis):
        store = ContextStore(mock_redis, "hass:f1:flow")
        assert await store.get("nope") is None
        assert await store.get("nope.deeper", "x") == "x"

    @pytest.mark.asyncio
    async def test_delete_and_keys(self, mock_redis):
        store = ContextStore(mock_redis, "hass:f1:flow")
        await store.set("b", 2)
        await store.set("a", 1)
        assert await store.keys() == ["a", "b"]
        await store.delete("a")
        assert await store.get_all() == {"b": 2}

    @pytest.mark.asyncio
    async def test_ttl_applied(self, mock_redis):
        store = ContextStore(mock_redis, "hass:f1:flow", ttl=60)
        await store.set("a", 1)
        assert 0 < await mock_redis.ttl("hass:f1:flow") <= 60

    @pytest.mark.asyncio
    async def test_no_ttl_by_default(self, mock_redis):
        store = ContextStore(mock_redis, "hass:f1:flow")
        await store.set("a", 1)
        assert await mock_redis.ttl("hass:f1:flow") == -1


class TestContextStores:
    @pytest.mark.asyncio
    async def test_scopes_are_isolated(self, stores):
        await stores.node("f1", "n1").set("v", "node")
        await stores.flow("f1").set("v", "flow")
        await stores.global_().set("v", "global")
        assert await stores.node("f1", "n1").get("v") == "node"
        assert await stores.node("f1", "n2").get("v") is None
        assert await stores.flow("f1").get("v") == "flow"
        assert await stores.flow("f2").get("v") is None
        assert await stores.global_().get("v") == "global"

    @pytest.mark.asyncio
    async def test_clear_flow(self, stores):
        await stores.flow("f1").set("v", 1)
        await stores.node("f1", "n1").set("v", 1)
        await stores.global_().set("v", 1)
        await stores.clear_flow("f1", ["n1"])
        assert await stores.flow("f1").get_all() == {}
        assert await stores.node("f1", "n1").get_all() == {}
        assert await stores.global_().get("v") == 1

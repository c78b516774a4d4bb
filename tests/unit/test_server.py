# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.
"""Unit tests for HomeAssistantServer and StateCache."""

import pytest

from hass_flow.runtime.server import HomeAssistantServer, ServiceHandle, StateCache


class TestStateCache:
    def test_set_states_skips_invalid(self):
        cache = StateCache()
        count = cache.set_states([
            {"entity_id": "light.kitchen", "state": "on"},
            {"state": "orphan"},
        ])
        assert count == 1
        assert cache.entity_ids() == ["light.kitchen"]

    def test_set_states_replaces(self):
        cache = StateCache()
        cache.set_states([{"entity_id": "a.one", "state": "1"}])
        cache.set_states([{"entity_id": "b.two", "state": "2"}])
        assert "a.one" not in cache
        assert len(cache) == 1

    def test_apply_state_changed(self):
        cache = StateCache()
        cache.apply_state_changed({
            "entity_id": "light.kitchen",
            "old_state": None,
            "new_state": {"entity_id": "light.kitchen", "state": "on"},
        })
        assert cache.get("light.kitchen")["state"] == "on"

        cache.apply_state_changed({"entity_id": "light.kitchen", "new_state": None})
        assert cache.get("light.kitchen") is None

    def test_set_state_requires_entity_id(self):
        with pytest.raises(ValueError):
            StateCache().set_state({"state": "on"})


class TestHomeAssistantServer:
    @pytest.mark.asyncio
    async def test_get_single(self, ha_server):
        state = await ha_server.get_states("light.kitchen")
        assert state["state"] == "on"

    @pytest.mark.asyncio
    async def test_get_unknown(self, ha_server):
        assert await ha_server.get_states("light.nope") is None

    @pytest.mark.asyncio
    async def test_get_all(self, ha_server):
        states = await ha_server.get_states()
        assert set(states) == {
            "sensor.living_room_temperature", "light.kitchen", "binary_sensor.front_door",
        }

    def test_is_service_handle(self, ha_server):
        assert isinstance(ha_server, ServiceHandle)

    def test_shared_cache(self):
        cache = StateCache()
        server = HomeAssistantServer("home", cache)
        cache.set_state({"entity_id": "a.b", "state": "x"})
        assert "a.b" in server.cache

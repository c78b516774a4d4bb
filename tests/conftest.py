# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Shared test fixtures for all hass-flow tests.
"""

from datetime import datetime, timezone

import pytest
import fakeredis
import fakeredis.aioredis

from hass_flow.kernel.redis_client import inject_redis_for_test
from hass_flow.core.context import init_runtime
from hass_flow.core.metrics import platform_metrics
from hass_flow.memory.context_store import ContextStores
from hass_flow.runtime.server import HomeAssistantServer

NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc).timestamp()

SAMPLE_STATES = [
    {
        "entity_id": "sensor.living_room_temperature",
        "state": "21.5",
        "attributes": {"unit_of_measurement": "°C", "friendly_name": "Living Room"},
        "last_changed": "2026-01-01T11:59:00+00:00",
        "last_updated": "2026-01-01T11:59:00+00:00",
    },
    {
        "entity_id": "light.kitchen",
        "state": "on",
        "attributes": {"brightness": 180},
        "last_changed": "2026-01-01T11:00:00+00:00",
        "last_updated": "2026-01-01T11:30:00+00:00",
    },
    {
        "entity_id": "binary_sensor.front_door",
        "state": "off",
        "attributes": {},
        "last_changed": "2026-01-01T10:00:00Z",
        "last_updated": "2026-01-01T10:00:00Z",
    },
]


@pytest.fixture
def mock_redis():
    """Provide a FakeRedis async instance and initialize the FlowRuntime."""
    r = fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    inject_redis_for_test(r)
    init_runtime(r)
    platform_metrics.reset()
    return r


@pytest.fixture
def stores(mock_redis) -> ContextStores:
    return ContextStores(mock_redis)


@pytest.fixture
def ha_server() -> HomeAssistantServer:
    """A server whose cache holds SAMPLE_STATES (fresh copies per test)."""
    server = HomeAssistantServer("home")
    server.cache.set_states([dict(s, attributes=dict(s["attributes"])) for s in SAMPLE_STATES])
    return server


@pytest.fixture
def clock():
    """Frozen clock at 2026-01-01T12:00:00Z."""
    return lambda: NOW

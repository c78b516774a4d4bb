# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
hass-flow Entry Point.

Sets up logging and Redis, initializes the FlowRuntime with the builtin
node types, adds the given servers and builds every flow found in a
directory of YAML files.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from hass_flow.core.config import settings
from hass_flow.core.context import FlowRuntime, init_runtime
from hass_flow.core.logging import setup_logging
from hass_flow.core.metrics import platform_metrics
from hass_flow.kernel.flow_loader import load_flow_from_yaml
from hass_flow.kernel.redis_client import close_redis_pool, get_redis_pool
from hass_flow.runtime.server import HomeAssistantServer

logger = logging.getLogger("hass.main")


async def bootstrap(
    flows_dir: Optional[Path] = None,
    servers: Iterable[HomeAssistantServer] = (),
    configure_logging: bool = True,
) -> FlowRuntime:
    """Start the runtime. Servers must be added before flows are built."""
    if configure_logging:
        setup_logging(settings.LOG_LEVEL)

    redis = await get_redis_pool()
    runtime = init_runtime(redis)
    for server in servers:
        runtime.add_server(server)

    if flows_dir is not None and flows_dir.exists():
        for yaml_file in sorted(flows_dir.glob("*.yaml")):
            flow_def = load_flow_from_yaml(yaml_file)
            runtime.build_flow(flow_def)
            platform_metrics.inc("flows_loaded")

    logger.info(
        "hass-flow started (env=%s, flows=%d)", settings.HASS_ENV, len(runtime.list_flows()),
    )
    return runtime


async def shutdown() -> None:
    await close_redis_pool()
    logger.info("hass-flow stopped")

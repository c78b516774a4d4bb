# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Flow Runtime — Singleton that holds all core component references.

Owns the node type registry, the Home Assistant servers, the context
stores and every node instance built from a flow definition.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Union

import redis.asyncio as aioredis

from hass_flow.core.config import settings
from hass_flow.core.errors import FlowValidationError, NodeNotFoundError
from hass_flow.core.metrics import platform_metrics
from hass_flow.kernel.flow_loader import FlowDefinition, validate_flow
from hass_flow.kernel.node_registry import NodeRegistry
from hass_flow.memory.context_store import ContextStores
from hass_flow.nodes.base import BaseNode, NodeResult
from hass_flow.nodes.current_state import CurrentStateNode
from hass_flow.protocols.message import FlowMessage
from hass_flow.runtime.server import HomeAssistantServer

logger = logging.getLogger("hass.runtime")

BUILTIN_NODE_TYPES = (CurrentStateNode,)


class FlowRuntime:
    """
    Holds all runtime references.
    Created once at startup, used by whatever feeds messages into nodes.
    """

    def __init__(self, redis: aioredis.Redis) -> None:
        self.redis = redis
        self.node_registry = NodeRegistry()
        self.stores = ContextStores(redis, ttl=settings.CONTEXT_TTL)
        self._servers: Dict[str, HomeAssistantServer] = {}
        self._flows: Dict[str, FlowDefinition] = {}
        self._nodes: Dict[str, BaseNode] = {}

    def register_builtin_types(self) -> None:
        for node_cls in BUILTIN_NODE_TYPES:
            self.node_registry.register_type(node_cls)
        platform_metrics.set_gauge("node_types_registered", len(self.node_registry))

    # ── Servers ─────────────────────────────────────────────────

    def add_server(self, server: HomeAssistantServer) -> None:
        self._servers[server.server_id] = server
        logger.info("Added Home Assistant server: %s", server.server_id)

    def get_server(self, server_id: Optional[str]) -> Optional[HomeAssistantServer]:
        if not server_id:
            return None
        return self._servers.get(server_id)

    # ── Flow Management ─────────────────────────────────────────

    def build_flow(self, flow_def: FlowDefinition) -> List[BaseNode]:
        """
        Validate a flow and instantiate its nodes.

        Nodes whose server is not known to the runtime are still built;
        they drop every message until the flow is rebuilt.
        """
        errors = validate_flow(flow_def, self.node_registry.list_type_names())
        if errors:
            raise FlowValidationError(errors)

        built = []
        for node_def in flow_def.nodes:
            server_id = node_def.config.get("server")
            server = self.get_server(server_id)
            if server_id and server is None:
                logger.warning(
                    "Server '%s' for node '%s' is not available", server_id, node_def.node_id,
                )
            node = self.node_registry.create(
                node_def.node_type,
                node_def.node_id,
                node_def.config,
                flow_id=flow_def.flow_id,
                server=server,
                stores=self.stores,
            )
            self._nodes[node.node_id] = node
            built.append(node)

        self._flows[flow_def.flow_id] = flow_def
        platform_metrics.set_gauge("nodes_active", len(self._nodes))
        logger.info("Built flow %s with %d nodes", flow_def.flow_id, len(built))
        return built

    def get_flow(self, flow_id: str) -> Optional[FlowDefinition]:
        return self._flows.get(flow_id)

    def list_flows(self) -> List[Dict[str, Any]]:
        return [
            {"flow_id": fid, "name": f.name, "description": f.description, "nodes": len(f.nodes)}
            for fid, f in self._flows.items()
        ]

    def get_node(self, node_id: str) -> Optional[BaseNode]:
        return self._nodes.get(node_id)

    # ── Node Execution ──────────────────────────────────────────

    async def deliver(
        self,
        node_id: str,
        message: Union[FlowMessage, Dict[str, Any]],
    ) -> NodeResult:
        """
        Hand a message to a node and return its result.
        Collaborator failures are logged, counted and re-raised.
        """
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)

        node_type = node.node_type
        platform_metrics.inc(f"node_exec:{node_type}")
        start = time.time()
        try:
            result = await node.handle(message)
        except Exception:
            platform_metrics.inc(f"node_error:{node_type}")
            logger.exception(
                "Node %s failed", node_id,
                extra={"node_id": node_id, "flow_id": node.flow_id, "node_type": node_type},
            )
            raise

        elapsed = (time.time() - start) * 1000
        platform_metrics.record_node_run(node_type, result.outcome.value, elapsed)
        return result


# ── Global singleton ────────────────────────────────────────

_runtime: Optional[FlowRuntime] = None


def init_runtime(redis: aioredis.Redis) -> FlowRuntime:
    global _runtime
    _runtime = FlowRuntime(redis)
    _runtime.register_builtin_types()
    return _runtime


def get_runtime() -> FlowRuntime:
    if _runtime is None:
        raise RuntimeError("FlowRuntime not initialized. Call init_runtime() first.")
    return _runtime

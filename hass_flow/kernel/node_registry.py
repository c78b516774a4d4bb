# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Node Registry — Maps node type names to node classes.

Resolves `api-current-state` → CurrentStateNode and builds instances
from a node id and a raw config dict.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from hass_flow.memory.context_store import ContextStores
from hass_flow.nodes.base import BaseNode
from hass_flow.runtime.server import ServiceHandle

logger = logging.getLogger("hass.node_registry")


class NodeRegistry:
    """
    Registered node types, keyed by ``node_type``.
    """

    def __init__(self) -> None:
        self._types: Dict[str, Type[BaseNode]] = {}

    # ── Registration ────────────────────────────────────────────

    def register_type(self, node_cls: Type[BaseNode], node_type: Optional[str] = None) -> None:
        """Register a node class under its ``node_type`` (or an explicit name)."""
        type_name = node_type or node_cls.node_type
        if not type_name:
            raise ValueError(f"{node_cls.__name__} has no node_type")
        self._types[type_name] = node_cls
        logger.info("Registered node type: %s (%s)", type_name, node_cls.name)

    # ── Lookup ──────────────────────────────────────────────────

    def get_type(self, node_type: str) -> Optional[Type[BaseNode]]:
        return self._types.get(node_type)

    def create(
        self,
        node_type: str,
        node_id: str,
        config: Optional[Mapping[str, Any]] = None,
        *,
        flow_id: Optional[str] = None,
        server: Optional[ServiceHandle] = None,
        stores: Optional[ContextStores] = None,
    ) -> BaseNode:
        """Instantiate a registered node type. Unknown types raise KeyError."""
        node_cls = self._types.get(node_type)
        if node_cls is None:
            raise KeyError(f"Unknown node type: {node_type}")
        return node_cls(node_id, config, flow_id=flow_id, server=server, stores=stores)

    # ── Listing ─────────────────────────────────────────────────

    def list_all(self) -> List[Dict[str, Any]]:
        """List all registered node types."""
        return [
            {
                "node_type": type_name,
                "name": cls.name,
                "description": cls.description,
                "outputs": cls.output_count,
            }
            for type_name, cls in self._types.items()
        ]

    def list_type_names(self) -> set[str]:
        return set(self._types.keys())

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, node_type: str) -> bool:
        return node_type in self._types

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Flow Loader — Load and validate YAML flow definitions.

Example:
    id: kitchen
    name: Kitchen lights
    servers: [home]
    nodes:
      - id: light_state
        type: api-current-state
        config:
          server: home
          entity_id: light.kitchen
          halt_if: "off"
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

import yaml

logger = logging.getLogger("hass.flow_loader")


@dataclass
class NodeDefinition:
    node_id: str
    node_type: str
    config: Dict[str, Any] = field(default_factory=dict)


class FlowDefinition:
    """Parsed flow definition."""

    def __init__(self, config: Dict[str, Any]) -> None:
        config = config or {}
        self.flow_id: str = str(config.get("id") or config.get("name") or "default")
        self.name: str = config.get("name", self.flow_id)
        self.description: str = config.get("description", "")
        self.servers: List[str] = [str(s) for s in config.get("servers", [])]
        self.nodes: List[NodeDefinition] = [
            NodeDefinition(
                node_id=str(raw.get("id", "")),
                node_type=str(raw.get("type", "")),
                config=dict(raw.get("config") or {}),
            )
            for raw in config.get("nodes", [])
        ]
        self.raw_config = config

    def get_node(self, node_id: str) -> Optional[NodeDefinition]:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def node_ids(self) -> List[str]:
        return [n.node_id for n in self.nodes]


def load_flow_from_yaml(path: str | Path) -> FlowDefinition:
    """Load a flow definition from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)
    return FlowDefinition(config)


def load_flow_from_string(yaml_content: str) -> FlowDefinition:
    """Load a flow definition from a YAML string."""
    config = yaml.safe_load(yaml_content)
    return FlowDefinition(config)


def validate_flow(
    flow: FlowDefinition,
    registered_types: Optional[Set[str]] = None,
) -> List[str]:
    """
    Validate a flow definition. Returns list of error messages (empty = valid).

    Checks:
      1. Must have at least 1 node
      2. Every node has an id, ids are unique
      3. Every node config's ``server`` is declared under ``servers``
      4. If registered_types provided, every node type must be registered
    """
    errors = []

    if not flow.nodes:
        errors.append("Flow must have at least 1 node")

    seen: Set[str] = set()
    declared_servers = set(flow.servers)
    for index, node in enumerate(flow.nodes):
        if not node.node_id:
            errors.append(f"Node #{index} has no id")
        elif node.node_id in seen:
            errors.append(f"Duplicate node id: '{node.node_id}'")
        seen.add(node.node_id)

        server = node.config.get("server")
        if server and server not in declared_servers:
            errors.append(f"Node '{node.node_id}' references undeclared server '{server}'")

        if registered_types is not None and node.node_type not in registered_types:
            errors.append(f"Node type '{node.node_type}' not registered (node '{node.node_id}')")

    return errors

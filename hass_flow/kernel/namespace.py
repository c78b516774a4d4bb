# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Namespace Helper — Context store key isolation.

Keys are namespaced per scope:
  node   -> hass:{flow_id}:node:{node_id}
  flow   -> hass:{flow_id}:flow
  global -> hass:global
"""

from __future__ import annotations

KEY_PREFIX = "hass"


def get_node_key(flow_id: str, node_id: str) -> str:
    """
    Build a node-scoped context key.

    Example:
        get_node_key("f1", "n1") -> "hass:f1:node:n1"
    """
    return f"{KEY_PREFIX}:{flow_id}:node:{node_id}"


def get_flow_key(flow_id: str) -> str:
    """
    Build a flow-scoped context key.

    Example:
        get_flow_key("f1") -> "hass:f1:flow"
    """
    return f"{KEY_PREFIX}:{flow_id}:flow"


def get_global_key() -> str:
    """Key of the global context store, shared by every flow."""
    return f"{KEY_PREFIX}:global"

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.
"""Unit tests for namespace helper."""

from hass_flow.kernel.namespace import get_flow_key, get_global_key, get_node_key


class TestNamespace:
    def test_node_key(self):
        assert get_node_key("f1", "n1") == "hass:f1:node:n1"

    def test_flow_key(self):
        assert get_flow_key("f1") == "hass:f1:flow"

    def test_global_key(self):
        assert get_global_key() == "hass:global"

    def test_flows_isolated(self):
        assert get_flow_key("a") != get_flow_key("b")
        assert get_node_key("a", "n1") != get_node_key("b", "n1")

    def test_node_and_flow_keys_differ(self):
        assert get_node_key("f1", "flow") != get_flow_key("f1")

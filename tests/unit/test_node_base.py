# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.
"""Unit tests for BaseNode input handling and results."""

from typing import Dict

import pytest
from pydantic import BaseModel

from hass_flow.core.errors import ConfigError
from hass_flow.nodes.base import (
    BaseNode, InputSpec, NodeResult, Outcome, ParsedInput,
)
from hass_flow.protocols.message import FlowMessage


class _EchoConfig(BaseModel):
    name: str = ""
    target: str = "default"
    count: int = 1


class _EchoNode(BaseNode):
    node_type = "test-echo"
    name = "Echo"
    config_model = _EchoConfig
    inputs = {
        "target": InputSpec(message_prop="payload.target", config_prop="target"),
        "lenient": InputSpec(message_prop="payload.lenient", schema=int, halt_on_fail=False),
    }

    async def on_input(self, message: FlowMessage, parsed: Dict[str, ParsedInput]) -> NodeResult:
        message.set("parsed", {k: (v.value, v.source, v.valid) for k, v in parsed.items()})
        return NodeResult(outcome=Outcome.CONTINUED, outputs=[message])


class TestInputParsing:
    @pytest.mark.asyncio
    async def test_config_fallback(self):
        node = _EchoNode("e1", {"target": "from_config"})
        result = await node.handle({})
        assert result.primary.get("parsed")["target"] == ("from_config", "config", True)
        assert result.primary.get("parsed")["lenient"] == (None, "missing", True)

    @pytest.mark.asyncio
    async def test_message_value_wins(self):
        node = _EchoNode("e1", {"target": "from_config"})
        result = await node.handle({"payload": {"target": "from_msg"}})
        assert result.primary.get("parsed")["target"] == ("from_msg", "message", True)

    @pytest.mark.asyncio
    async def test_halt_on_fail_drops(self):
        node = _EchoNode("e1")
        result = await node.handle({"payload": {"target": ["not", "a", "string"]}})
        assert result.outcome is Outcome.DROPPED
        assert result.is_dropped
        assert "payload.target" in result.error_message
        assert node.status.fill == "red"

    @pytest.mark.asyncio
    async def test_lenient_input_passes_invalid_value(self):
        node = _EchoNode("e1")
        result = await node.handle({"payload": {"lenient": "abc"}})
        assert result.primary.get("parsed")["lenient"] == ("abc", "message", False)


class TestConfigLoading:
    def test_invalid_config_raises(self):
        with pytest.raises(ConfigError) as exc:
            _EchoNode("e1", {"count": "many"})
        assert exc.value.code == "CONFIG_ERROR"
        assert exc.value.details["errors"]

    def test_model_instance_accepted(self):
        cfg = _EchoConfig(target="x")
        assert _EchoNode("e1", cfg).config is cfg

    def test_default_flow_id(self):
        assert _EchoNode("e1").flow_id == "default"


class TestNodeResult:
    def test_primary_secondary(self):
        msg = FlowMessage()
        result = NodeResult(outcome=Outcome.HALTED, outputs=[None, msg])
        assert result.primary is None
        assert result.secondary is msg
        assert not result.is_dropped

    def test_dropped(self):
        result = NodeResult.dropped("boom")
        assert result.outputs == [None, None]
        assert result.error_message == "boom"


class TestStatus:
    def test_success_and_failed(self):
        node = _EchoNode("e1")
        ok = node.set_status_success("on")
        assert (ok.fill, ok.shape) == ("green", "dot")
        assert ok.text.startswith("on at: ")
        failed = node.set_status_failed(21.5)
        assert (failed.fill, failed.shape) == ("red", "ring")
        assert node.status is failed

    def test_get_info(self):
        info = _EchoNode("e1", {"name": "Mine"}, flow_id="f9").get_info()
        assert info == {
            "node_id": "e1",
            "node_type": "test-echo",
            "name": "Mine",
            "description": "",
            "flow_id": "f9",
        }

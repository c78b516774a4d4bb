# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
BaseNode — Abstract base class for all built-in nodes.

Every node is constructed once from a validated config and then handles
messages through handle(), which validates declared inputs and delegates
to on_input(). A node returns a NodeResult whose ``outputs`` list has one
slot per output port; ``None`` means nothing is sent on that port.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from hass_flow.core.config import settings
from hass_flow.core.errors import ConfigError, InputValidationError
from hass_flow.memory.context_store import ContextStores
from hass_flow.protocols.message import FlowMessage
from hass_flow.runtime.server import ServiceHandle


class NodeLogAdapter(logging.LoggerAdapter):
    """Adds node context to every record; per-call ``extra`` is merged on top."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


class Outcome(str, Enum):
    CONTINUED = "continued"
    HALTED = "halted"
    DROPPED = "dropped"


@dataclass
class NodeStatus:
    """Status badge shown under a node in the editor."""
    fill: str  # "green" | "red" | "yellow" | "grey"
    shape: str = "dot"  # "dot" | "ring"
    text: str = ""


@dataclass
class NodeResult:
    """Result returned by every message a node handles."""

    outcome: Outcome
    outputs: List[Optional[FlowMessage]] = field(default_factory=lambda: [None, None])
    status: Optional[NodeStatus] = None
    error_message: Optional[str] = None

    @property
    def primary(self) -> Optional[FlowMessage]:
        return self.outputs[0] if self.outputs else None

    @property
    def secondary(self) -> Optional[FlowMessage]:
        return self.outputs[1] if len(self.outputs) > 1 else None

    @property
    def is_dropped(self) -> bool:
        return all(out is None for out in self.outputs)

    @classmethod
    def dropped(cls, error_message: Optional[str] = None, status: Optional[NodeStatus] = None) -> NodeResult:
        return cls(outcome=Outcome.DROPPED, status=status, error_message=error_message)


@dataclass(frozen=True)
class InputSpec:
    """
    An input read from the message, falling back to the node config.

    Message values are validated against ``schema``; numbers are coerced
    to strings when the schema is ``str``.
    """
    message_prop: str
    config_prop: Optional[str] = None
    schema: Any = str
    halt_on_fail: bool = True

    def validate(self, value: Any) -> Any:
        adapter = TypeAdapter(self.schema, config=ConfigDict(coerce_numbers_to_str=True))
        return adapter.validate_python(value)


@dataclass
class ParsedInput:
    value: Any = None
    source: str = "missing"  # "message" | "config" | "missing"
    valid: bool = True


class BaseNode(ABC):
    """
    Abstract base class for all built-in nodes.

    Subclasses set class-level attributes and implement on_input().
    """

    node_type: str = ""
    name: str = ""
    description: str = ""
    config_model: Type[BaseModel] = BaseModel
    inputs: Dict[str, InputSpec] = {}
    output_count: int = 1

    def __init__(
        self,
        node_id: str,
        config: Union[Mapping[str, Any], BaseModel, None] = None,
        *,
        flow_id: Optional[str] = None,
        server: Optional[ServiceHandle] = None,
        stores: Optional[ContextStores] = None,
    ) -> None:
        self.node_id = node_id
        self.flow_id = flow_id or settings.DEFAULT_FLOW_ID
        self.server = server
        self.stores = stores
        self.status: Optional[NodeStatus] = None
        self.config = self._load_config(config)
        self.log = NodeLogAdapter(
            logging.getLogger(f"hass.nodes.{self.node_type or 'node'}"),
            {"node_id": node_id, "flow_id": self.flow_id, "node_type": self.node_type},
        )

    def _load_config(self, config: Union[Mapping[str, Any], BaseModel, None]) -> BaseModel:
        if isinstance(config, self.config_model):
            return config
        try:
            return self.config_model.model_validate(dict(config or {}))
        except ValidationError as e:
            raise ConfigError(
                f"Invalid config for {self.node_type} node '{self.node_id}'",
                {"errors": e.errors(include_url=False)},
            ) from e

    # ── Message handling ────────────────────────────────────────

    async def handle(self, message: Union[FlowMessage, Dict[str, Any]]) -> NodeResult:
        """Validate declared inputs, then run the node logic."""
        if not isinstance(message, FlowMessage):
            message = FlowMessage(message)
        try:
            parsed = self.parse_input(message)
        except InputValidationError as e:
            self.log.error("Input validation failed: %s", e.message)
            self.set_status_failed("Error")
            return NodeResult.dropped(error_message=e.message, status=self.status)
        return await self.on_input(message, parsed)

    def parse_input(self, message: FlowMessage) -> Dict[str, ParsedInput]:
        """
        Resolve every declared input.

        A value present on the message wins and is validated; otherwise the
        config value is used as-is.
        """
        parsed: Dict[str, ParsedInput] = {}
        for key, spec in self.inputs.items():
            raw = message.get(spec.message_prop)
            if raw is not None:
                try:
                    parsed[key] = ParsedInput(spec.validate(raw), "message")
                except ValidationError as e:
                    if spec.halt_on_fail:
                        raise InputValidationError(spec.message_prop, str(e.errors()[0]["msg"])) from e
                    parsed[key] = ParsedInput(raw, "message", valid=False)
            elif spec.config_prop is not None:
                value = getattr(self.config, spec.config_prop, None)
                parsed[key] = ParsedInput(value, "config" if value is not None else "missing")
            else:
                parsed[key] = ParsedInput()
        return parsed

    @abstractmethod
    async def on_input(self, message: FlowMessage, parsed: Dict[str, ParsedInput]) -> NodeResult:
        """Node logic for one message."""
        ...

    # ── Status ──────────────────────────────────────────────────

    def set_status(self, fill: str, shape: str, text: Any) -> NodeStatus:
        stamp = datetime.now().strftime("%b %d, %H:%M")
        self.status = NodeStatus(fill=fill, shape=shape, text=f"{text} at: {stamp}")
        return self.status

    def set_status_success(self, text: Any = "Success") -> NodeStatus:
        return self.set_status("green", "dot", text)

    def set_status_failed(self, text: Any = "Failed") -> NodeStatus:
        return self.set_status("red", "ring", text)

    def get_info(self) -> Dict[str, Any]:
        """Return node metadata for registry listing."""
        return {
            "node_id": self.node_id,
            "node_type": self.node_type,
            "name": getattr(self.config, "name", "") or self.name,
            "description": self.description,
            "flow_id": self.flow_id,
        }

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Error hierarchy for hass-flow.

Node soft-failures (missing entity, missing server) are not exceptions;
they are outcomes on NodeResult. These exceptions cover the remaining
cases that callers are expected to see.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class HassFlowError(Exception):
    """Base error with a stable code and optional details."""

    code = "HASS_FLOW_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigError(HassFlowError):
    """A node configuration failed validation."""

    code = "CONFIG_ERROR"


class InputValidationError(HassFlowError):
    """An inbound message property failed its declared validation."""

    code = "INPUT_VALIDATION_ERROR"

    def __init__(self, prop: str, message: str):
        self.prop = prop
        super().__init__(f"Invalid '{prop}': {message}", {"prop": prop})


class PlacementError(HassFlowError):
    """A value could not be written to its configured location."""

    code = "PLACEMENT_ERROR"

    def __init__(self, location: str, reason: str):
        self.location = location
        super().__init__(f"Cannot set '{location}': {reason}", {"location": location})


class NodeNotFoundError(HassFlowError):
    code = "NODE_NOT_FOUND"

    def __init__(self, node_id: str):
        super().__init__(f"Node '{node_id}' not found", {"node_id": node_id})


class FlowValidationError(HassFlowError):
    """Raised when a YAML flow definition is invalid."""

    code = "FLOW_VALIDATION_ERROR"

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Flow definition has validation errors", {"errors": errors})

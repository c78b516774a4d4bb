# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Node Configuration Schema — Validated, immutable node settings.

Design decisions:
  - Configs accept the flow-editor keys (``halt_if``, ``override_payload`` ...)
    so existing flow exports load unchanged.
  - Legacy defaults are resolved once, at validation time. The resulting
    model is frozen; nodes never write back into their config.
  - Placement destinations are a closed enum, parsed from the editor's
    string tags or from the older boolean ``override_*`` flags.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

STRING_TYPES = ("str", "string")


class PlacementMode(str, Enum):
    """Where a placed value ends up."""

    NONE = "none"
    MESSAGE = "msg"
    NODE = "node"
    FLOW = "flow"
    GLOBAL = "global"

    @classmethod
    def parse(cls, value: Any) -> "PlacementMode":
        """
        Parse an editor tag or legacy flag.

        True  -> MESSAGE, False/None -> NONE,
        "msg" | "message" | "overwrite" -> MESSAGE, otherwise the enum value.
        """
        if isinstance(value, cls):
            return value
        if value is True:
            return cls.MESSAGE
        if value is None or value is False:
            return cls.NONE
        tag = str(value).strip().lower()
        if tag in ("msg", "message", "overwrite"):
            return cls.MESSAGE
        try:
            return cls(tag)
        except ValueError:
            raise ValueError(f"Unknown placement mode '{value}'")


class HaltCondition(BaseModel):
    """Comparator used to divert messages to the second output."""

    model_config = ConfigDict(frozen=True)

    operator: str = "is"
    compare_type: str = "str"
    compare_value: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.compare_value)


def _resolve_location(data: Dict[str, Any], location_key: str, mode_key: str, default: str) -> None:
    location = data.get(location_key)
    if location is None or location == "":
        data[location_key] = default
        data[mode_key] = PlacementMode.NONE if data.get(mode_key) is False else PlacementMode.MESSAGE
    elif data.get(mode_key) is None:
        data[mode_key] = PlacementMode.MESSAGE


class CurrentStateConfig(BaseModel):
    """
    Configuration of the Current State node.

    Keys follow the flow editor; see ``_resolve_defaults`` for how unset
    values are filled in.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    server: Optional[str] = Field(
        default=None,
        description="Id of the Home Assistant server this node reads from",
    )
    entity_id: str = ""
    state_type: str = Field(default="str", description="Cast applied to the state value")

    halt_if: str = Field(default="", description="Halt compare value (empty = never halt)")
    halt_if_type: str = "str"
    halt_if_compare: str = "is"

    override_topic: bool = True

    state_location: str = "payload"
    override_payload: PlacementMode = PlacementMode.MESSAGE
    entity_location: str = "data"
    override_data: PlacementMode = PlacementMode.MESSAGE

    # ── Validators ──────────────────────────────────────────────

    @model_validator(mode="before")
    @classmethod
    def _resolve_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        data["halt_if_compare"] = data.get("halt_if_compare") or "is"
        data["halt_if_type"] = data.get("halt_if_type") or "str"
        data["state_type"] = data.get("state_type") or "str"
        data["override_topic"] = data.get("override_topic") is not False

        if data.get("halt_if") is None:
            data["halt_if"] = ""
        if data.get("entity_id") is None:
            data["entity_id"] = ""
        if data.get("server") == "":
            data["server"] = None

        _resolve_location(data, "state_location", "override_payload", "payload")
        _resolve_location(data, "entity_location", "override_data", "data")
        return data

    @field_validator("halt_if", "entity_id", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        # YAML flows may carry numbers or booleans here
        if isinstance(v, bool):
            return str(v).lower()
        if isinstance(v, (int, float)):
            return str(v)
        return v

    @field_validator("override_payload", "override_data", mode="before")
    @classmethod
    def _parse_mode(cls, v: Any) -> PlacementMode:
        return PlacementMode.parse(v)

    # ── Derived views ───────────────────────────────────────────

    @property
    def halt_condition(self) -> HaltCondition:
        return HaltCondition(
            operator=self.halt_if_compare,
            compare_type=self.halt_if_type,
            compare_value=self.halt_if,
        )

    @property
    def casts_state(self) -> bool:
        return self.state_type not in STRING_TYPES

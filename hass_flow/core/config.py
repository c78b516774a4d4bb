# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
hass-flow Configuration — Environment-driven settings.

All configuration is loaded from environment variables (or .env file).
"""

from __future__ import annotations

from typing import List

from pydantic_settings import BaseSettings
from pydantic import Field


class HassFlowSettings(BaseSettings):
    """Runtime-wide configuration loaded from environment."""

    # --- Redis ---
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (node/flow/global context stores)",
    )
    REDIS_MAX_CONNECTIONS: int = Field(default=10)

    # --- Context stores ---
    CONTEXT_TTL: int = Field(
        default=0,
        description="TTL in seconds for context store keys (0 = never expire)",
    )
    DEFAULT_FLOW_ID: str = Field(
        default="default",
        description="Flow id used for nodes created outside a flow definition",
    )

    # --- Home Assistant ---
    HA_BOOLEAN_STATES: List[str] = Field(
        default=["y", "yes", "true", "on", "home", "open"],
        description="States treated as true by the habool cast and comparator",
    )

    # --- Platform ---
    LOG_LEVEL: str = Field(default="INFO")
    HASS_ENV: str = Field(
        default="dev",
        description="Environment: dev | prod",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


# Global singleton
settings = HassFlowSettings()

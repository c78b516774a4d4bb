# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
hass-flow — Home Assistant nodes for an async flow runtime.

The Current State node reads an entity snapshot from a server's state cache,
optionally casts the state, evaluates a halt condition and routes the
message to one of two outputs.
"""

__version__ = "0.1.0"

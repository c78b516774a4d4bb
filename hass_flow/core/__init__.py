# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""Core — settings, logging, metrics, errors and the flow runtime."""

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""Kernel — Redis connection, key namespaces, node registry and flow loading."""

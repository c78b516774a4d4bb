# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""Protocols — message envelope and node configuration schemas."""

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Runtime collaborators consumed by nodes: the Home Assistant server handle
and its state cache, value casting, comparator evaluation and placement.
"""

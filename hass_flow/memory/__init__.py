# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""Memory — Redis-backed node, flow and global context stores."""

# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""Built-in nodes."""

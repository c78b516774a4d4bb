# Copyright (c) 2026 TempoOS Contributors. All Rights Reserved.

"""
Metrics — In-memory counters for node observability.

Counters are keyed by name, e.g. ``node_exec:api-current-state`` or
``node_outcome:api-current-state:halted``.
"""

from __future__ import annotations

import time
from collections import defaultdict
from typing import Any, Dict


class Metrics:
    """Simple in-memory metrics collector."""

    def __init__(self):
        self._counters: Dict[str, int] = defaultdict(int)
        self._gauges: Dict[str, float] = {}
        self._histograms: Dict[str, list] = defaultdict(list)
        self._start_time = time.time()

    # ── Counters ────────────────────────────────────────────────

    def inc(self, name: str, amount: int = 1) -> None:
        """Increment a counter."""
        self._counters[name] += amount

    def get_counter(self, name: str) -> int:
        return self._counters.get(name, 0)

    # ── Gauges ──────────────────────────────────────────────────

    def set_gauge(self, name: str, value: float) -> None:
        self._gauges[name] = value

    def get_gauge(self, name: str) -> float:
        return self._gauges.get(name, 0.0)

    # ── Histograms (for latency) ────────────────────────────────

    def observe(self, name: str, value: float) -> None:
        """Record an observation (e.g. node latency in ms)."""
        self._histograms[name].append(value)
        # Keep only last 1000 observations
        if len(self._histograms[name]) > 1000:
            self._histograms[name] = self._histograms[name][-1000:]

    # ── Node runs ───────────────────────────────────────────────

    def record_node_run(self, node_type: str, outcome: str, latency_ms: float) -> None:
        """Count one handled message of ``node_type`` and its routing outcome."""
        self.inc(f"node_outcome:{node_type}:{outcome}")
        self.observe(f"node_latency:{node_type}", latency_ms)

    def node_summary(self, node_type: str) -> Dict[str, Any]:
        """Executions, errors, outcome counts and mean latency for one node type."""
        prefix = f"node_outcome:{node_type}:"
        outcomes = {
            name[len(prefix):]: count
            for name, count in self._counters.items()
            if name.startswith(prefix)
        }
        latencies = self._histograms.get(f"node_latency:{node_type}", [])
        return {
            "executions": self.get_counter(f"node_exec:{node_type}"),
            "errors": self.get_counter(f"node_error:{node_type}"),
            "outcomes": outcomes,
            "avg_latency_ms": round(sum(latencies) / len(latencies), 2) if latencies else None,
        }

    # ── Export ──────────────────────────────────────────────────

    def snapshot(self) -> Dict[str, Any]:
        """Export all metrics as a dict."""
        result = {
            "uptime_seconds": round(time.time() - self._start_time, 1),
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
        }
        for name, values in self._histograms.items():
            if values:
                result[f"histogram_{name}"] = {
                    "count": len(values),
                    "avg": round(sum(values) / len(values), 2),
                    "max": round(max(values), 2),
                    "min": round(min(values), 2),
                }
        return result

    def reset(self) -> None:
        """Drop all recorded values (used between test runs)."""
        self._counters.clear()
        self._gauges.clear()
        self._histograms.clear()


# Global singleton
platform_metrics = Metrics()

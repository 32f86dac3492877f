"""In-process metrics for request handling and command delivery.

Counters are kept per process and protected by a lock, so a warm host that
serves several requests in turn accumulates totals across them.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class SkillMetrics:
    """Container for skill request and delivery metrics."""

    # Request metrics, keyed by "<RequestKind>:<outcome>"
    requests: Counter[str] = field(default_factory=Counter)
    errors: Counter[str] = field(default_factory=Counter)

    # Command delivery metrics
    commands_delivered: Counter[str] = field(default_factory=Counter)
    commands_failed: Counter[str] = field(default_factory=Counter)
    publish_times: deque[float] = field(default_factory=lambda: deque(maxlen=500))

    started_at: datetime = field(default_factory=datetime.now)


class MetricsCollector:
    """Thread-safe metrics collection for one skill process."""

    def __init__(self, skill_name: str):
        self.skill_name = skill_name
        self.metrics = SkillMetrics()
        self._active_timers: dict[str, float] = {}
        self._lock = threading.Lock()
        self._logger = logging.getLogger(f"{__name__}.{skill_name}")

    def start_timer(self, operation: str) -> str:
        """Start timing an operation and return the timer id for ``end_timer``."""
        timer_id = f"{operation}_{time.perf_counter_ns()}_{threading.get_ident()}"
        with self._lock:
            self._active_timers[timer_id] = time.perf_counter()
        return timer_id

    def end_timer(self, timer_id: str) -> float | None:
        """End timing and return the duration in seconds, or None for an unknown timer."""
        with self._lock:
            start_time = self._active_timers.pop(timer_id, None)
            if start_time is None:
                return None
            return time.perf_counter() - start_time

    def record_request(self, kind: str, success: bool = True, error: Exception | None = None) -> None:
        """Record one routed request.

        Args:
            kind: Request kind value (e.g. "IntentRequest")
            success: Whether the request produced a response or acknowledgement
            error: Error that ended the request, counted by class name
        """
        with self._lock:
            self.metrics.requests[f"{kind}:{'success' if success else 'failure'}"] += 1
            if error is not None:
                self.metrics.errors[type(error).__name__] += 1

    def record_delivery(self, command: str, success: bool = True, duration: float | None = None) -> None:
        """Record the outcome of one command publish."""
        with self._lock:
            if success:
                self.metrics.commands_delivered[command] += 1
            else:
                self.metrics.commands_failed[command] += 1
            if duration is not None:
                self.metrics.publish_times.append(duration)

    def get_summary(self) -> dict[str, Any]:
        """Snapshot of all counters plus publish latency statistics."""
        with self._lock:
            publish_times = list(self.metrics.publish_times)
            summary: dict[str, Any] = {
                "skill_name": self.skill_name,
                "uptime_seconds": (datetime.now() - self.metrics.started_at).total_seconds(),
                "requests": dict(self.metrics.requests),
                "errors": dict(self.metrics.errors),
                "commands_delivered": dict(self.metrics.commands_delivered),
                "commands_failed": dict(self.metrics.commands_failed),
            }

        if publish_times:
            summary["publish_latency_ms"] = {
                "avg": sum(publish_times) / len(publish_times) * 1000,
                "max": max(publish_times) * 1000,
            }
        return summary

    def log_summary(self, level: int = logging.INFO) -> None:
        self._logger.log(level, "Metrics summary for %s: %s", self.skill_name, json.dumps(self.get_summary()))

    def reset(self) -> None:
        with self._lock:
            self.metrics = SkillMetrics()
            self._active_timers.clear()

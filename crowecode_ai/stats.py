"""
Request statistics for the AI endpoint.
"""
import logging
import statistics
import threading
import time
from collections import deque
from typing import Optional

logger = logging.getLogger(__name__)


class RequestStats:
    """
    Tracks request outcomes and latency.

    Recording is guarded by a lock since concurrent requests share one
    instance per app.
    """

    def __init__(self, latency_window: int = 1000):
        self._lock = threading.Lock()
        self._latencies: deque[int] = deque(maxlen=latency_window)
        self.start_time = time.time()
        self.total_requests = 0
        self.success_count = 0
        self.failure_count = 0
        self.by_mode: dict[str, int] = {"chat": 0, "analyze": 0}
        self.analysis_fallbacks = 0
        self.last_error: Optional[str] = None

    def record_success(self, mode: str, latency_ms: int, fallback: bool = False):
        with self._lock:
            self.total_requests += 1
            self.success_count += 1
            self.by_mode[mode] = self.by_mode.get(mode, 0) + 1
            if fallback:
                self.analysis_fallbacks += 1
            self._latencies.append(latency_ms)

    def record_failure(self, mode: str, latency_ms: int, error: str):
        with self._lock:
            self.total_requests += 1
            self.failure_count += 1
            self.by_mode[mode] = self.by_mode.get(mode, 0) + 1
            self.last_error = error
            self._latencies.append(latency_ms)
        logger.debug("Request failure recorded: mode=%s, error=%s", mode, error)

    def _percentile(self, sorted_latencies: list[int], p: float) -> int:
        idx = min(int(len(sorted_latencies) * p / 100), len(sorted_latencies) - 1)
        return sorted_latencies[idx]

    def get_summary(self) -> dict:
        with self._lock:
            latencies = sorted(self._latencies)
            summary = {
                "uptime_seconds": round(time.time() - self.start_time, 1),
                "requests": {
                    "total": self.total_requests,
                    "success": self.success_count,
                    "failure": self.failure_count,
                    "by_mode": dict(self.by_mode),
                },
                "analysis_fallbacks": self.analysis_fallbacks,
                "last_error": self.last_error,
                "latency_ms": {"avg": None, "p50": None, "p95": None, "max": None},
            }

        if latencies:
            summary["latency_ms"] = {
                "avg": round(statistics.mean(latencies), 1),
                "p50": self._percentile(latencies, 50),
                "p95": self._percentile(latencies, 95),
                "max": latencies[-1],
            }
        return summary

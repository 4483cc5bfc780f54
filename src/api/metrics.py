"""Metrics service for tracking scoring performance.

Singleton service to track recommendation calls and latency metrics.
"""

import threading
from typing import Dict


class MetricsService:
    """Singleton service for tracking API metrics.

    Thread-safe counters for scoring calls, their latency, and how many
    calls ended in an error.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(MetricsService, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._lock = threading.Lock()
        self._initialized = True
        self.reset()

    def record_scoring(self, latency_ms: float, num_recommendations: int = 0) -> None:
        """Record a scoring call with its latency.

        Args:
            latency_ms: Latency in milliseconds
            num_recommendations: Number of products returned
        """
        with self._lock:
            self._scoring_count += 1
            self._total_latency_ms += latency_ms
            self._total_recommendations += num_recommendations
            if num_recommendations == 0:
                self._empty_count += 1

            if latency_ms < self._min_latency_ms:
                self._min_latency_ms = latency_ms

            if latency_ms > self._max_latency_ms:
                self._max_latency_ms = latency_ms

    def record_error(self) -> None:
        with self._lock:
            self._error_count += 1

    def get_metrics(self) -> Dict:
        """Get current metrics.

        Returns:
            Dictionary with metrics including:
            - scoring_count: Total number of scoring calls
            - empty_count: Calls that returned no recommendations
            - error_count: Calls that failed
            - average_recommendations: Mean number of products returned
            - average_latency_ms: Average latency in milliseconds
            - min_latency_ms: Minimum latency observed
            - max_latency_ms: Maximum latency observed
        """
        with self._lock:
            count = self._scoring_count
            avg_latency = self._total_latency_ms / count if count > 0 else 0.0
            avg_recommendations = self._total_recommendations / count if count > 0 else 0.0

            return {
                "scoring_count": count,
                "empty_count": self._empty_count,
                "error_count": self._error_count,
                "average_recommendations": round(avg_recommendations, 2),
                "average_latency_ms": round(avg_latency, 2),
                "min_latency_ms": round(self._min_latency_ms, 2) if self._min_latency_ms != float('inf') else 0.0,
                "max_latency_ms": round(self._max_latency_ms, 2),
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._scoring_count = 0
            self._empty_count = 0
            self._error_count = 0
            self._total_recommendations = 0
            self._total_latency_ms = 0.0
            self._min_latency_ms = float('inf')
            self._max_latency_ms = 0.0


# Global singleton instance
metrics_service = MetricsService()

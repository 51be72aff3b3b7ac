"""Thread-safe in-memory metrics for HTTP server requests."""

from __future__ import annotations

import threading
from collections import Counter

LATENCY_BUCKETS_MS = (5, 10, 25, 50, 100, 250, 500, 1000, 2000, 5000)


class MetricsRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections_total = 0
        self._total_requests = 0
        self._status_counts: Counter[str] = Counter()
        self._latency_buckets: Counter[str] = Counter()
        self._bytes_sent_total = 0
        self._read_errors_by_type: Counter[str] = Counter()
        self._write_errors_by_type: Counter[str] = Counter()
        self._cgi_failures_total = 0

    def connection_opened(self) -> None:
        with self._lock:
            self._connections_total += 1

    def record_request(self, status_code: int, duration_ms: float, bytes_sent: int) -> None:
        with self._lock:
            self._total_requests += 1
            self._status_counts[str(status_code)] += 1
            self._bytes_sent_total += bytes_sent
            self._latency_buckets[self._bucket_label(duration_ms)] += 1

    def record_read_error(self, error_type: str) -> None:
        with self._lock:
            self._read_errors_by_type[error_type] += 1

    def record_write_error(self, error_type: str) -> None:
        with self._lock:
            self._write_errors_by_type[error_type] += 1

    def record_cgi_failure(self) -> None:
        with self._lock:
            self._cgi_failures_total += 1

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            return {
                "connections_total": self._connections_total,
                "requests_total": self._total_requests,
                "status_counts": dict(self._status_counts),
                "latency_buckets_ms": dict(self._latency_buckets),
                "bytes_sent_total": self._bytes_sent_total,
                "read_errors_by_type": dict(self._read_errors_by_type),
                "write_errors_by_type": dict(self._write_errors_by_type),
                "cgi_failures_total": self._cgi_failures_total,
            }

    @staticmethod
    def _bucket_label(duration_ms: float) -> str:
        for bucket in LATENCY_BUCKETS_MS:
            if duration_ms <= bucket:
                return f"le_{bucket}"
        return "gt_5000"

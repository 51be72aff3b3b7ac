"""Unit tests for in-process request metrics."""

from metrics import MetricsRegistry


def test_snapshot_counts_requests_and_errors() -> None:
    metrics = MetricsRegistry()

    metrics.connection_opened()
    metrics.connection_opened()
    metrics.record_request(status_code=200, duration_ms=3.0, bytes_sent=150)
    metrics.record_request(status_code=404, duration_ms=7000.0, bytes_sent=50)
    metrics.record_read_error("ConnectionClosedError")
    metrics.record_write_error("BrokenPipeError")
    metrics.record_cgi_failure()

    snapshot = metrics.snapshot()

    assert snapshot["connections_total"] == 2
    assert snapshot["requests_total"] == 2
    assert snapshot["status_counts"] == {"200": 1, "404": 1}
    assert snapshot["bytes_sent_total"] == 200
    assert snapshot["latency_buckets_ms"] == {"le_5": 1, "gt_5000": 1}
    assert snapshot["read_errors_by_type"] == {"ConnectionClosedError": 1}
    assert snapshot["write_errors_by_type"] == {"BrokenPipeError": 1}
    assert snapshot["cgi_failures_total"] == 1

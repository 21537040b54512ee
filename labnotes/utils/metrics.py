"""Prometheus metrics for note checks."""

from prometheus_client import Counter, Histogram

notes_scanned_total = Counter(
    "notes_scanned_total",
    "Total notes scanned by integrity checks",
)

findings_total = Counter(
    "findings_total",
    "Total findings reported by integrity checks",
    ["code", "severity"],
)

check_duration_ms = Histogram(
    "check_duration_ms",
    "Integrity check duration in milliseconds",
    buckets=[1, 5, 10, 50, 100, 500, 1000, 5000],
)


class PrometheusCheckMetrics:
    """Prometheus-based check metrics implementation."""

    def inc_scanned(self, count: int = 1) -> None:
        """Count scanned notes."""
        notes_scanned_total.inc(count)

    def inc_finding(self, code: str, severity: str) -> None:
        """Increment finding counter."""
        findings_total.labels(code=code, severity=severity).inc()

    def record_duration(self, duration_ms: float) -> None:
        """Record check duration."""
        check_duration_ms.observe(duration_ms)

from __future__ import annotations

from prometheus_client import Counter, Histogram

KMB_ETA_REQUESTS = Counter(
    "kmb_eta_requests_total",
    "ETA lookups issued against the KMB endpoint.",
    labelnames=("method", "result"),
)
KMB_ETA_REQUEST_LATENCY = Histogram(
    "kmb_eta_request_seconds",
    "Latency of ETA lookups, retries included.",
    labelnames=("method",),
)
KMB_ETA_RETRIES = Counter(
    "kmb_eta_retries_total",
    "Failed ETA tries that were followed by another try.",
    labelnames=("method",),
)
KMB_ETA_ENTRIES_DROPPED = Counter(
    "kmb_eta_entries_dropped_total",
    "Raw ETA entries discarded during normalization.",
    labelnames=("reason",),
)


def observe_eta_request(method: str, result: str, duration_seconds: float) -> None:
    """Record ETA lookup result and latency."""
    KMB_ETA_REQUESTS.labels(method=method, result=result).inc()
    KMB_ETA_REQUEST_LATENCY.labels(method=method).observe(duration_seconds)


def record_eta_retry(method: str) -> None:
    """Increment the retry counter."""
    KMB_ETA_RETRIES.labels(method=method).inc()


def record_dropped_entry(reason: str) -> None:
    """Increment the dropped entry counter."""
    KMB_ETA_ENTRIES_DROPPED.labels(reason=reason).inc()

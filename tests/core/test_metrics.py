"""Unit tests for metrics recording helpers."""

import httpx
from prometheus_client import CollectorRegistry, Counter, Histogram
import pytest

import kmb_eta.core.metrics as metrics


@pytest.fixture
def metric_registry(monkeypatch):
    """Provide a fresh registry and rebind module-level metrics."""
    registry = CollectorRegistry()

    monkeypatch.setattr(
        metrics,
        "KMB_ETA_REQUESTS",
        Counter(
            "kmb_eta_requests_total",
            "ETA requests",
            ["method", "result"],
            registry=registry,
        ),
    )
    monkeypatch.setattr(
        metrics,
        "KMB_ETA_REQUEST_LATENCY",
        Histogram(
            "kmb_eta_request_seconds",
            "ETA request latency",
            ["method"],
            registry=registry,
        ),
    )
    monkeypatch.setattr(
        metrics,
        "KMB_ETA_RETRIES",
        Counter("kmb_eta_retries_total", "ETA retries", ["method"], registry=registry),
    )
    monkeypatch.setattr(
        metrics,
        "KMB_ETA_ENTRIES_DROPPED",
        Counter(
            "kmb_eta_entries_dropped_total",
            "Dropped entries",
            ["reason"],
            registry=registry,
        ),
    )
    return registry


def test_observe_eta_request(metric_registry):
    metrics.observe_eta_request("GET", "success", 0.25)
    metrics.observe_eta_request("GET", "success", 0.5)

    assert (
        metric_registry.get_sample_value(
            "kmb_eta_requests_total", {"method": "GET", "result": "success"}
        )
        == 2.0
    )
    assert (
        metric_registry.get_sample_value("kmb_eta_request_seconds_sum", {"method": "GET"})
        == 0.75
    )


def test_record_eta_retry(metric_registry):
    metrics.record_eta_retry("POST")

    assert (
        metric_registry.get_sample_value("kmb_eta_retries_total", {"method": "POST"})
        == 1.0
    )


def test_record_dropped_entry(metric_registry):
    metrics.record_dropped_entry("no_time")
    metrics.record_dropped_entry("no_time")

    assert (
        metric_registry.get_sample_value(
            "kmb_eta_entries_dropped_total", {"reason": "no_time"}
        )
        == 2.0
    )


@pytest.mark.asyncio
async def test_client_records_retries_and_result(
    metric_registry, make_client, stop_route
):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(502)
        return httpx.Response(200, json=[{"eta": [{"t": "No departure"}]}])

    client = make_client(handler)
    await client.get_etas(stop_route, attempts=1)

    assert metric_registry.get_sample_value(
        "kmb_eta_retries_total", {"method": "GET"}
    ) == 1.0
    assert metric_registry.get_sample_value(
        "kmb_eta_requests_total", {"method": "GET", "result": "success"}
    ) == 1.0
    assert metric_registry.get_sample_value(
        "kmb_eta_entries_dropped_total", {"reason": "no_time"}
    ) == 1.0

"""Prometheus metrics for flows and model calls."""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

registry = CollectorRegistry(auto_describe=True)

FLOW_COUNTER = Counter(
    "flow_requests_total",
    "Flow invocations by terminal outcome",
    ["flow", "outcome"],
    registry=registry,
)
FLOW_LATENCY = Histogram(
    "flow_latency_seconds",
    "Flow latency seconds, validation through reply parsing",
    ["flow"],
    buckets=(0.05, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
    registry=registry,
)
MODEL_CALL_COUNTER = Counter(
    "model_calls_total",
    "External model calls",
    ["provider", "success"],
    registry=registry,
)


def observe_flow(flow: str, outcome: str, latency: float) -> None:
    FLOW_COUNTER.labels(flow=flow, outcome=outcome).inc()
    FLOW_LATENCY.labels(flow=flow).observe(latency)


def observe_model_call(provider: str, success: bool) -> None:
    MODEL_CALL_COUNTER.labels(provider=provider, success=str(success).lower()).inc()


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(registry), CONTENT_TYPE_LATEST

"""Prometheus metrics for Health Links.

Cardinality rule: no user input or request id ever becomes a label.
``outcome``, ``kind`` and ``status`` labels are bounded enums.
"""

from typing import Dict

import prometheus_client

# --- Metric singletons (created on first access) ---

_metrics: Dict[str, object] = {}


def _metric(name, metric_type, description, labelnames=()):
    """Get or create a Prometheus metric."""
    if name in _metrics:
        return _metrics[name]
    cls = getattr(prometheus_client, metric_type)
    m = cls(name, description, labelnames=labelnames)
    _metrics[name] = m
    return m


def quota_decisions_total():
    return _metric(
        "healthlinks_quota_decisions_total",
        "Counter",
        "Global daily quota decisions",
        labelnames=["outcome"],
    )


def generation_duration():
    return _metric(
        "healthlinks_generation_duration_seconds",
        "Histogram",
        "Answer generation call duration in seconds",
        labelnames=["kind", "status"],
    )


def requests_total():
    return _metric(
        "healthlinks_requests_total",
        "Counter",
        "Health link query requests by kind and response status",
        labelnames=["kind", "status_code"],
    )


def sources_dropped_total():
    return _metric(
        "healthlinks_sources_dropped_total",
        "Counter",
        "Registry-built source links rejected by the link validator",
    )


# --- Helper functions for recording metrics ---

def record_quota_decision(outcome: str):
    quota_decisions_total().labels(outcome=outcome).inc()


def record_generation(kind: str, status: str, duration: float):
    generation_duration().labels(kind=kind, status=status).observe(duration)


def record_request(kind: str, status_code: int):
    requests_total().labels(kind=kind, status_code=str(status_code)).inc()


def record_source_dropped():
    sources_dropped_total().inc()


def generate_metrics_text() -> str:
    """Generate Prometheus metrics text output."""
    return prometheus_client.generate_latest().decode("utf-8")

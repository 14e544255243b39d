"""Prometheus metrics backend for notifyy.

Metrics are rendered by the HTTP front door at ``GET /metrics`` when the
backend is enabled, so no separate exporter port is opened.

Usage:
    telemetry = PrometheusTelemetry()
    telemetry.incr("gate_suppressed_total", labels=(("reason", "duplicate"),))
    payload = telemetry.render()
"""

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Gauge, generate_latest

_PREFIX = "notifyy"


class PrometheusTelemetry:
    """Prometheus-backed telemetry.

    Each instance owns its own ``CollectorRegistry`` so several runtimes
    (tests, reloads) can coexist in one process.
    """

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self._metrics: dict[str, Counter | Gauge] = {}
        self._register_standard_metrics()

    def _register_standard_metrics(self) -> None:
        self._metrics["gate_accepted_total"] = Counter(
            f"{_PREFIX}_gate_accepted_total",
            "Messages the delivery gate allowed through",
            registry=self.registry,
        )
        self._metrics["gate_suppressed_total"] = Counter(
            f"{_PREFIX}_gate_suppressed_total",
            "Messages the delivery gate suppressed",
            labelnames=["reason"],  # reason=throttled/duplicate
            registry=self.registry,
        )
        self._metrics["delivery_failures_total"] = Counter(
            f"{_PREFIX}_delivery_failures_total",
            "Outbound sends that failed upstream",
            registry=self.registry,
        )
        self._metrics["registrations_total"] = Counter(
            f"{_PREFIX}_registrations_total",
            "Registration events handled",
            labelnames=["outcome"],  # outcome=new/existing
            registry=self.registry,
        )
        self._metrics["directory_recipients"] = Gauge(
            f"{_PREFIX}_directory_recipients",
            "Recipients known to the in-memory directory",
            registry=self.registry,
        )

    def incr(self, name: str, value: int = 1, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Increase a named counter."""
        metric = self._metrics.get(name)
        if metric is None:
            metric = Counter(
                f"{_PREFIX}_{name}",
                f"Counter: {name}",
                labelnames=[k for k, _ in labels],
                registry=self.registry,
            )
            self._metrics[name] = metric

        if labels:
            metric.labels(**dict(labels)).inc(value)
        else:
            metric.inc(value)

    def gauge(self, name: str, value: float, labels: tuple[tuple[str, str], ...] = ()) -> None:
        """Set a gauge value."""
        metric = self._metrics.get(name)
        if metric is None:
            metric = Gauge(
                f"{_PREFIX}_{name}",
                f"Gauge: {name}",
                labelnames=[k for k, _ in labels],
                registry=self.registry,
            )
            self._metrics[name] = metric

        if labels:
            metric.labels(**dict(labels)).set(value)
        else:
            metric.set(value)

    def render(self) -> bytes:
        """Serialize the registry in the Prometheus text exposition format."""
        return generate_latest(self.registry)

"""
Shared metrics configuration for the registry submission client.
"""

import threading
from typing import Dict, Any, Optional

from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry


class MetricsCollector:
    """Centralized metrics collector for the client.

    Metrics are kept in a private registry unless one is given, so the
    default process-wide scrape does not see them. To expose them, build the
    collector on the registry your exporter serves and hand it to the pipeline:

        metrics = get_metrics_collector("submission", registry=prometheus_client.REGISTRY)
        pipeline = SubmissionPipeline.from_config(config, metrics=metrics)

    Only one collector may be registered on a given registry.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up submission metrics."""

        # Service info
        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        self._metrics["registry_submissions_total"] = Counter(
            "registry_submissions_total",
            "Total document submissions",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["registry_submission_duration_seconds"] = Histogram(
            "registry_submission_duration_seconds",
            "Submission duration in seconds, including time spent waiting for a slot",
            registry=self.registry
        )

        self._metrics["registry_rate_limit_wait_seconds"] = Histogram(
            "registry_rate_limit_wait_seconds",
            "Time spent waiting for the rate gate",
            registry=self.registry
        )

        self._metrics["registry_in_flight_submissions"] = Gauge(
            "registry_in_flight_submissions",
            "Submissions currently holding a concurrency slot",
            registry=self.registry
        )

        # Error metrics
        self._metrics["registry_errors_total"] = Counter(
            "registry_errors_total",
            "Total submission errors",
            ["error_type"],
            registry=self.registry
        )

    def record_submission(self, outcome: str, duration: float):
        """Record a finished submission."""
        self._metrics["registry_submissions_total"].labels(outcome=outcome).inc()
        self._metrics["registry_submission_duration_seconds"].observe(duration)

    def record_rate_limit_wait(self, waited: float):
        """Record time spent in the rate gate."""
        self._metrics["registry_rate_limit_wait_seconds"].observe(waited)

    def record_error(self, error_type: str):
        """Record error metrics."""
        self._metrics["registry_errors_total"].labels(error_type=error_type).inc()

    def set_in_flight(self, value: int):
        """Set the in-flight submissions gauge."""
        with self._lock:
            self._metrics["registry_in_flight_submissions"].set(value)

    def sample(self, name: str, **labels) -> float:
        """Read the current value of a sample from the registry."""
        value = self.registry.get_sample_value(name, labels or None)
        return value if value is not None else 0.0


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)

"""Prometheus registry holding every series the exporter serves."""

from typing import Dict, Optional, Union

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

from ..commons.constants import SeriesKind, ServiceState
from ..commons.logging import get_logger
from .catalog import MetricCatalog, MetricFamily, SeriesWrite
from .schemas import CollectionResult


logger = get_logger(__name__)

PrometheusMetric = Union[Counter, Gauge, Histogram]

CYCLE_DURATION_BUCKETS = (1, 2.5, 5, 10, 15, 30, 45, 60, 90, 120, 300)


class ExportedMetricSet:
    """Process-wide set of exported series.

    Families are created from the catalog on construction; label tuples are
    created lazily on first write and never removed. Every write is delegated
    to a prometheus_client metric, which serialises concurrent writers of the
    same series.
    """

    def __init__(self, catalog: MetricCatalog, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry()
        self._families: Dict[str, PrometheusMetric] = {
            family.name: self._create_family(family) for family in catalog.families
        }

        self.cycle_duration = Histogram(
            "budelb_collection_cycle_duration_seconds",
            "Duration of a complete collection cycle in seconds",
            buckets=CYCLE_DURATION_BUCKETS,
            registry=self.registry,
        )
        self.discovered_services = Gauge(
            "budelb_discovered_services",
            "LoadBalancer services found in the last cycle by state",
            ["state"],
            registry=self.registry,
        )
        self.sample_failures = Counter(
            "budelb_sample_failures_total",
            "CloudWatch samples that could not be fetched",
            ["metric_name"],
            registry=self.registry,
        )
        self.last_successful_cycle = Gauge(
            "budelb_last_successful_cycle_timestamp_seconds",
            "Unix time at which the last collection cycle completed",
            registry=self.registry,
        )

    def _create_family(self, family: MetricFamily) -> PrometheusMetric:
        if family.kind == SeriesKind.COUNTER_ADD:
            return Counter(family.name, family.documentation, family.label_names, registry=self.registry)
        if family.kind == SeriesKind.GAUGE_SET:
            return Gauge(family.name, family.documentation, family.label_names, registry=self.registry)
        if family.kind == SeriesKind.HISTOGRAM_OBSERVE:
            return Histogram(family.name, family.documentation, family.label_names, registry=self.registry)
        raise ValueError(f"Unsupported series kind {family.kind}")

    def record(self, write: SeriesWrite, labels: Dict[str, str], value: float) -> None:
        """Apply one fetched value to the series selected by ``write`` and ``labels``.

        Args:
            write: Target family and operation.
            labels: Complete label set of the series.
            value: Value fetched from CloudWatch.

        Raises:
            KeyError: If the family is not part of this set.
            ValueError: If a negative value is added to a counter.
        """
        series = self._families[write.family].labels(**labels)
        if write.kind == SeriesKind.COUNTER_ADD:
            # prometheus_client rejects negative increments
            series.inc(value)
        elif write.kind == SeriesKind.GAUGE_SET:
            series.set(value)
        else:
            series.observe(value)

    def record_cycle(self, result: CollectionResult, finished_at: float) -> None:
        """Update the exporter's own metrics from a finished cycle."""
        self.cycle_duration.observe(result.duration_seconds)
        self.discovered_services.labels(state=ServiceState.READY).set(
            result.total_services - result.pending - result.unresolved
        )
        self.discovered_services.labels(state=ServiceState.PENDING).set(result.pending)
        self.discovered_services.labels(state=ServiceState.UNRESOLVED).set(result.unresolved)
        self.last_successful_cycle.set(finished_at)

    def record_failure(self, metric_name: str) -> None:
        """Count a sample of ``metric_name`` that could not be fetched."""
        self.sample_failures.labels(metric_name=metric_name).inc()

    def get_sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Return the current value of an exposed sample, or None if it does not exist yet."""
        return self.registry.get_sample_value(name, labels or {})

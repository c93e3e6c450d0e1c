"""Catalog of the CloudWatch ELB metrics that are exported to Prometheus.

Each definition pairs a CloudWatch metric and statistic with a ``SeriesWrite``
describing which exported family receives the value and how: counter add,
gauge set or histogram observe. New metrics are added by appending a
definition to ``DEFAULT_DEFINITIONS``; the fetch logic never changes.
"""

from typing import Dict, Iterator, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..commons.constants import SeriesKind, Statistic


# Labels every ELB family carries, filled in per service
SERVICE_LABELS: Tuple[str, ...] = ("elb_name", "svc_name", "namespace")


class MetricFamily(BaseModel):
    """An exported family, independent of the Prometheus client that backs it."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Exported family name")
    documentation: str = Field(..., description="Help text of the family")
    kind: SeriesKind = Field(..., description="Write operation the family supports")
    label_names: Tuple[str, ...] = Field(SERVICE_LABELS, description="Ordered label names")


class SeriesWrite(BaseModel):
    """Where and how a fetched value is written."""

    model_config = ConfigDict(frozen=True)

    kind: SeriesKind
    family: str
    static_labels: Dict[str, str] = Field(default_factory=dict)

    def labels_for(self, elb_name: str, svc_name: str, namespace: str) -> Dict[str, str]:
        """Return the full label set for one service."""
        return {**self.static_labels, "elb_name": elb_name, "svc_name": svc_name, "namespace": namespace}


class MetricDefinition(BaseModel):
    """A CloudWatch metric, the statistic to request, and the series it feeds."""

    model_config = ConfigDict(frozen=True)

    metric_name: str = Field(..., description="CloudWatch metric name")
    statistic: Statistic = Field(..., description="CloudWatch statistic to request")
    write: SeriesWrite


def counter_add(family: str, **static_labels: str) -> SeriesWrite:
    """Add the fetched value to a counter."""
    return SeriesWrite(kind=SeriesKind.COUNTER_ADD, family=family, static_labels=static_labels)


def gauge_set(family: str) -> SeriesWrite:
    """Overwrite a gauge with the fetched value."""
    return SeriesWrite(kind=SeriesKind.GAUGE_SET, family=family)


def histogram_observe(family: str) -> SeriesWrite:
    """Observe the fetched value in a histogram."""
    return SeriesWrite(kind=SeriesKind.HISTOGRAM_OBSERVE, family=family)


HTTP_REQUESTS = "urd_http_requests_total"
BACKEND_CONNECTION_ERRORS = "backend_connection_errors_total"
HEALTHY_HOSTS = "urd_healthy_hosts_count"
ELB_LATENCY = "urd_average_elb_latency"
REQUEST_COUNT = "urd_request_count"
SPILLOVER_COUNT = "urd_spillovercount_total"
SURGE_QUEUE_LENGTH = "urd_surge_queue_length"
UNHEALTHY_HOSTS = "urd_unhealthy_hosts_count"


DEFAULT_FAMILIES: Tuple[MetricFamily, ...] = (
    MetricFamily(
        name=HTTP_REQUESTS,
        documentation="Total of HTTP Requests",
        kind=SeriesKind.COUNTER_ADD,
        label_names=("status",) + SERVICE_LABELS,
    ),
    MetricFamily(
        name=BACKEND_CONNECTION_ERRORS,
        documentation="Total of Backend connection errors",
        kind=SeriesKind.COUNTER_ADD,
    ),
    MetricFamily(
        name=HEALTHY_HOSTS,
        documentation="The number of healthy instances registered with load balancer",
        kind=SeriesKind.GAUGE_SET,
    ),
    MetricFamily(
        name=ELB_LATENCY,
        documentation=(
            "Average latency in seconds from ELB sent the request to a instance until instance starts to respond"
        ),
        kind=SeriesKind.HISTOGRAM_OBSERVE,
    ),
    MetricFamily(
        name=REQUEST_COUNT,
        documentation="Total of requests in the last interval (60 seconds by default)",
        kind=SeriesKind.COUNTER_ADD,
    ),
    MetricFamily(
        name=SPILLOVER_COUNT,
        documentation="The total number of requests that were rejected because the surge queue is full",
        kind=SeriesKind.COUNTER_ADD,
    ),
    MetricFamily(
        name=SURGE_QUEUE_LENGTH,
        documentation="The total number of requests that are pending routing",
        kind=SeriesKind.COUNTER_ADD,
    ),
    MetricFamily(
        name=UNHEALTHY_HOSTS,
        documentation="The number of unhealthy instances registered with load balancer",
        kind=SeriesKind.GAUGE_SET,
    ),
)


DEFAULT_DEFINITIONS: Tuple[MetricDefinition, ...] = (
    MetricDefinition(
        metric_name="HTTPCode_Backend_2XX", statistic=Statistic.SUM, write=counter_add(HTTP_REQUESTS, status="2XX")
    ),
    MetricDefinition(
        metric_name="HTTPCode_Backend_3XX", statistic=Statistic.SUM, write=counter_add(HTTP_REQUESTS, status="3XX")
    ),
    MetricDefinition(
        metric_name="HTTPCode_Backend_4XX", statistic=Statistic.SUM, write=counter_add(HTTP_REQUESTS, status="4XX")
    ),
    MetricDefinition(
        metric_name="HTTPCode_Backend_5XX", statistic=Statistic.SUM, write=counter_add(HTTP_REQUESTS, status="5XX")
    ),
    MetricDefinition(
        metric_name="HTTPCode_ELB_4XX", statistic=Statistic.SUM, write=counter_add(HTTP_REQUESTS, status="ELB_4XX")
    ),
    MetricDefinition(
        metric_name="HTTPCode_ELB_5XX", statistic=Statistic.SUM, write=counter_add(HTTP_REQUESTS, status="ELB_5XX")
    ),
    MetricDefinition(
        metric_name="BackendConnectionErrors", statistic=Statistic.SUM, write=counter_add(BACKEND_CONNECTION_ERRORS)
    ),
    MetricDefinition(metric_name="HealthyHostCount", statistic=Statistic.AVERAGE, write=gauge_set(HEALTHY_HOSTS)),
    MetricDefinition(metric_name="Latency", statistic=Statistic.AVERAGE, write=histogram_observe(ELB_LATENCY)),
    MetricDefinition(metric_name="RequestCount", statistic=Statistic.SUM, write=counter_add(REQUEST_COUNT)),
    MetricDefinition(metric_name="SpilloverCount", statistic=Statistic.SUM, write=counter_add(SPILLOVER_COUNT)),
    # Kept as a counter fed by the Maximum statistic for dashboard compatibility
    MetricDefinition(
        metric_name="SurgeQueueLength", statistic=Statistic.MAXIMUM, write=counter_add(SURGE_QUEUE_LENGTH)
    ),
    MetricDefinition(metric_name="UnHealthyHostCount", statistic=Statistic.AVERAGE, write=gauge_set(UNHEALTHY_HOSTS)),
)


class MetricCatalog:
    """Immutable, validated set of metric definitions and the families they write to.

    Raises:
        ValueError: On construction, if a definition targets an unknown family, uses an
            operation the family does not support, or leaves one of its labels unset.
    """

    def __init__(self, definitions: Sequence[MetricDefinition], families: Sequence[MetricFamily]):
        self._definitions: Tuple[MetricDefinition, ...] = tuple(definitions)
        self._families: Dict[str, MetricFamily] = {}
        for family in families:
            if family.name in self._families:
                raise ValueError(f"Duplicate metric family {family.name}")
            self._families[family.name] = family
        self._validate()

    @classmethod
    def default(cls) -> "MetricCatalog":
        """Return the catalog of CloudWatch Classic ELB metrics."""
        return cls(DEFAULT_DEFINITIONS, DEFAULT_FAMILIES)

    def _validate(self) -> None:
        for definition in self._definitions:
            write = definition.write
            family = self._families.get(write.family)
            if family is None:
                raise ValueError(f"{definition.metric_name} writes to unknown family {write.family}")
            if family.kind != write.kind:
                raise ValueError(
                    f"{definition.metric_name} uses {write.kind} but family {family.name} is {family.kind}"
                )
            provided = set(write.static_labels) | set(SERVICE_LABELS)
            if provided != set(family.label_names):
                raise ValueError(
                    f"{definition.metric_name} provides labels {sorted(provided)}, "
                    f"family {family.name} expects {sorted(family.label_names)}"
                )

    @property
    def definitions(self) -> Tuple[MetricDefinition, ...]:
        """Definitions in catalog order."""
        return self._definitions

    @property
    def families(self) -> Tuple[MetricFamily, ...]:
        """Families the definitions write to."""
        return tuple(self._families.values())

    def family(self, name: str) -> MetricFamily:
        """Return a family by its exported name."""
        return self._families[name]

    def __iter__(self) -> Iterator[MetricDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

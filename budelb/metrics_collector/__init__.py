"""Metrics collection module for pulling ELB statistics from CloudWatch and exporting them to Prometheus."""

from .catalog import MetricCatalog
from .cloudwatch import CloudWatchClient
from .exporter import ExportedMetricSet
from .metrics_service import MetricsCollectionService
from .scheduler import CollectionScheduler


__all__ = [
    "CloudWatchClient",
    "CollectionScheduler",
    "ExportedMetricSet",
    "MetricCatalog",
    "MetricsCollectionService",
]

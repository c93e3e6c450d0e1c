"""Shared fixtures for budelb tests."""

from unittest.mock import MagicMock

import pytest

from budelb.metrics_collector.catalog import MetricCatalog
from budelb.metrics_collector.exporter import ExportedMetricSet


@pytest.fixture
def catalog():
    """Create the default metric catalog."""
    return MetricCatalog.default()


@pytest.fixture
def exported(catalog):
    """Create an exported metric set backed by its own registry."""
    return ExportedMetricSet(catalog)


@pytest.fixture
def discovery():
    """Create a mock Kubernetes handler with no services."""
    handler = MagicMock()
    handler.list_load_balancer_services.return_value = []
    return handler

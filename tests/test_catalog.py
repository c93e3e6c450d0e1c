"""Unit tests for the metric catalog."""

import pytest

from budelb.commons.constants import SeriesKind, Statistic
from budelb.metrics_collector.catalog import (
    DEFAULT_FAMILIES,
    HEALTHY_HOSTS,
    HTTP_REQUESTS,
    MetricCatalog,
    MetricDefinition,
    MetricFamily,
    SeriesWrite,
    counter_add,
    gauge_set,
)


class TestDefaultCatalog:
    """Test the built-in ELB catalog."""

    def test_contains_all_elb_metrics(self, catalog):
        """Test that every Classic ELB metric is defined once."""
        names = [definition.metric_name for definition in catalog]
        assert len(catalog) == 13
        assert len(set(names)) == 13
        assert "HTTPCode_Backend_2XX" in names
        assert "UnHealthyHostCount" in names

    def test_write_policy(self, catalog):
        """Test that counts are counters, host counts are gauges and latency is a histogram."""
        by_name = {definition.metric_name: definition for definition in catalog}
        assert by_name["RequestCount"].write.kind == SeriesKind.COUNTER_ADD
        assert by_name["HTTPCode_ELB_5XX"].write.static_labels == {"status": "ELB_5XX"}
        assert by_name["HealthyHostCount"].write.kind == SeriesKind.GAUGE_SET
        assert by_name["HealthyHostCount"].statistic == Statistic.AVERAGE
        assert by_name["Latency"].write.kind == SeriesKind.HISTOGRAM_OBSERVE
        assert by_name["SurgeQueueLength"].statistic == Statistic.MAXIMUM

    def test_family_names_match_existing_dashboards(self, catalog):
        """Test that the exported family names stay those of the existing exporter."""
        assert {family.name for family in catalog.families} == {
            "urd_http_requests_total",
            "backend_connection_errors_total",
            "urd_healthy_hosts_count",
            "urd_average_elb_latency",
            "urd_request_count",
            "urd_spillovercount_total",
            "urd_surge_queue_length",
            "urd_unhealthy_hosts_count",
        }

    def test_definitions_are_immutable(self, catalog):
        """Test that definitions cannot be modified after construction."""
        with pytest.raises(Exception):
            catalog.definitions[0].metric_name = "Other"
        assert isinstance(catalog.definitions, tuple)


class TestCatalogValidation:
    """Test that inconsistent catalogs are rejected."""

    def test_unknown_family(self):
        definition = MetricDefinition(metric_name="X", statistic=Statistic.SUM, write=counter_add("missing"))
        with pytest.raises(ValueError, match="unknown family"):
            MetricCatalog([definition], DEFAULT_FAMILIES)

    def test_kind_mismatch(self):
        definition = MetricDefinition(
            metric_name="HealthyHostCount",
            statistic=Statistic.AVERAGE,
            write=SeriesWrite(kind=SeriesKind.COUNTER_ADD, family=HEALTHY_HOSTS),
        )
        with pytest.raises(ValueError, match="uses"):
            MetricCatalog([definition], DEFAULT_FAMILIES)

    def test_missing_static_label(self):
        definition = MetricDefinition(
            metric_name="HTTPCode_Backend_2XX", statistic=Statistic.SUM, write=counter_add(HTTP_REQUESTS)
        )
        with pytest.raises(ValueError, match="expects"):
            MetricCatalog([definition], DEFAULT_FAMILIES)

    def test_duplicate_family(self):
        family = MetricFamily(name="dup", documentation="dup", kind=SeriesKind.GAUGE_SET)
        with pytest.raises(ValueError, match="Duplicate"):
            MetricCatalog([], [family, family])

    def test_custom_catalog(self):
        family = MetricFamily(name="custom_gauge", documentation="custom", kind=SeriesKind.GAUGE_SET)
        definition = MetricDefinition(
            metric_name="Custom", statistic=Statistic.MINIMUM, write=gauge_set("custom_gauge")
        )
        custom = MetricCatalog([definition], [family])
        assert list(custom) == [definition]
        assert custom.family("custom_gauge") == family


def test_labels_for_merges_static_labels():
    """Test that static labels are combined with the per-service labels."""
    write = counter_add(HTTP_REQUESTS, status="2XX")
    assert write.labels_for("elb", "web", "shop") == {
        "status": "2XX",
        "elb_name": "elb",
        "svc_name": "web",
        "namespace": "shop",
    }

"""Unit tests for ELB name resolution from load balancer hostnames."""

import pytest

from budelb.commons.exceptions import ElbNameResolutionError
from budelb.discovery.resolver import elb_name_from_hostname


@pytest.mark.parametrize(
    "hostname, expected",
    [
        (
            "internal-a8280213c611d114o7340onc0d34252-152337689.us-east-1.elb.amazonaws.com",
            "a8280213c611d114o7340onc0d34252",
        ),
        (
            "a8280213c611d114o7340onc0d34252-152337689.us-east-1.elb.amazonaws.com",
            "a8280213c611d114o7340onc0d34252",
        ),
        (
            "internal-abc123def456abc123def456abc123de-999999.us-east-1.elb.amazonaws.com",
            "abc123def456abc123def456abc123de",
        ),
        ("my-named-elb-1234567890.eu-west-1.elb.amazonaws.com", "my-named-elb"),
    ],
)
def test_elb_name_from_hostname(hostname, expected):
    """Test that the prefix and the numeric suffix are stripped."""
    assert elb_name_from_hostname(hostname) == expected


def test_internal_prefix_is_stripped_once():
    """Test that only the first internal- prefix is removed."""
    hostname = "internal-internal-abc123-123456789.us-east-1.elb.amazonaws.com"
    assert elb_name_from_hostname(hostname) == "internal-abc123"


def test_name_ends_before_first_numeric_group():
    """Test that the name is cut at the first dash followed by six digits."""
    hostname = "abc-123456-def-654321.us-east-1.elb.amazonaws.com"
    assert elb_name_from_hostname(hostname) == "abc"


@pytest.mark.parametrize(
    "hostname",
    [
        None,
        "",
        "internal-",
        "my-service.example.com",
        "abc-12345.us-east-1.elb.amazonaws.com",
        ".elb.amazonaws.com",
        "10.0.0.12",
    ],
)
def test_malformed_hostname_raises(hostname):
    """Test that malformed hostnames raise instead of producing a wrong name."""
    with pytest.raises(ElbNameResolutionError) as exc_info:
        elb_name_from_hostname(hostname)
    assert exc_info.value.hostname == hostname

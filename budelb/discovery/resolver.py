"""Derives CloudWatch load balancer names from ELB DNS hostnames."""

import re
from typing import Optional

from ..commons.constants import INTERNAL_ELB_PREFIX
from ..commons.exceptions import ElbNameResolutionError


# <internal->?<name>-<6+ digits>.<region>.elb.amazonaws.com
ELB_HOSTNAME_PATTERN = re.compile(rf"^(?:{re.escape(INTERNAL_ELB_PREFIX)})?([A-Za-z0-9-]+?)-[0-9]{{6}}")


def elb_name_from_hostname(hostname: Optional[str]) -> str:
    """Return the ELB name encoded in a load balancer hostname.

    The optional ``internal-`` prefix is stripped once and everything from the
    first dash followed by six digits onwards is discarded.

    Args:
        hostname: Hostname from the service's load balancer ingress status.

    Returns:
        The load balancer name as known to CloudWatch.

    Raises:
        ElbNameResolutionError: If the hostname is empty or does not follow the ELB naming scheme.

    Example:
        >>> elb_name_from_hostname("internal-a8280213c611d114o7340onc0d34252-152337689.us-east-1.elb.amazonaws.com")
        'a8280213c611d114o7340onc0d34252'
    """
    if not hostname:
        raise ElbNameResolutionError(hostname, "Load balancer hostname is empty")

    match = ELB_HOSTNAME_PATTERN.match(hostname)
    if match is None:
        raise ElbNameResolutionError(hostname)
    return match.group(1)

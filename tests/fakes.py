"""Test doubles shared by the budelb tests."""

import asyncio
from typing import Dict, List, Optional, Tuple

from budelb.discovery.schemas import ServiceRef


ELB_NAME = "a8280213c611d114o7340onc0d34252"
ELB_HOSTNAME = f"internal-{ELB_NAME}-152337689.us-east-1.elb.amazonaws.com"


class FakeFetcher:
    """Stands in for CloudWatchClient: returns canned values and records every call."""

    def __init__(
        self,
        values: Optional[Dict[Tuple[str, str], float]] = None,
        default: float = 0.0,
        errors: Optional[Dict[Tuple[str, str], Exception]] = None,
        delay: float = 0.0,
        delays: Optional[Dict[Tuple[str, str], float]] = None,
    ):
        self.values = values or {}
        self.default = default
        self.errors = errors or {}
        self.delay = delay
        self.delays = delays or {}
        self.calls: List[Tuple[str, str, str]] = []
        self.completed = 0
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, elb_name, metric_name, statistic):
        key = (elb_name, metric_name)
        self.calls.append((elb_name, metric_name, str(statistic)))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, self.delay))
            if key in self.errors:
                raise self.errors[key]
            return self.values.get(key, self.default)
        finally:
            self.in_flight -= 1
            self.completed += 1


def make_service(
    name: str, namespace: str = "default", elb_name: Optional[str] = None, hostname: Optional[str] = None
) -> ServiceRef:
    """Build a ServiceRef whose hostname resolves to ``elb_name`` unless a hostname is given."""
    if hostname is None and elb_name is not None:
        hostname = f"{elb_name}-123456789.us-east-1.elb.amazonaws.com"
    return ServiceRef(namespace=namespace, name=name, hostname=hostname)

"""Service for collecting ELB metrics of every LoadBalancer service in one cycle."""

import asyncio
import time
from typing import List, Optional, Tuple

from ..commons.config import app_settings
from ..commons.constants import SampleStatus
from ..commons.exceptions import ElbNameResolutionError
from ..commons.logging import get_logger
from ..discovery.kubernetes import KubernetesHandler
from ..discovery.resolver import elb_name_from_hostname
from ..discovery.schemas import ServiceRef
from .catalog import MetricCatalog
from .cloudwatch import CloudWatchClient
from .exporter import ExportedMetricSet
from .schemas import CollectionResult, SampleRequest, SampleResult


logger = get_logger(__name__)


class MetricsCollectionService:
    """Runs collection cycles: discover, fan out one fetch per (service, metric), join, export."""

    def __init__(
        self,
        discovery: KubernetesHandler,
        fetcher: CloudWatchClient,
        catalog: MetricCatalog,
        exported: ExportedMetricSet,
        max_concurrency: Optional[int] = None,
        fetch_timeout: Optional[float] = None,
    ):
        """Initialize metrics collection service.

        Args:
            discovery: Lists LoadBalancer services.
            fetcher: Fetches CloudWatch statistics.
            catalog: Metrics fetched for every service.
            exported: Registry the fetched values are written to.
            max_concurrency: Upper bound of in-flight fetches. Defaults to MAX_CONCURRENT_FETCHES.
            fetch_timeout: Seconds after which a single fetch is abandoned. Defaults to FETCH_TIMEOUT_SECONDS.
        """
        self.discovery = discovery
        self.fetcher = fetcher
        self.catalog = catalog
        self.exported = exported
        self.max_concurrency = max_concurrency or app_settings.max_concurrent_fetches
        self.fetch_timeout = fetch_timeout or app_settings.fetch_timeout

    def build_requests(self, services: List[ServiceRef]) -> Tuple[List[SampleRequest], int, int]:
        """Resolve ELB names and expand services into one request per catalog entry.

        Returns:
            The sample requests, the number of services pending provisioning and
            the number of services whose hostname could not be resolved.
        """
        requests: List[SampleRequest] = []
        pending = 0
        unresolved = 0

        for service in services:
            if not service.is_provisioned:
                pending += 1
                logger.info(f"Skipping service {service}: load balancer pending provisioning")
                continue

            try:
                elb_name = elb_name_from_hostname(service.hostname)
            except ElbNameResolutionError as e:
                unresolved += 1
                logger.warning(f"Skipping service {service}: {e}")
                continue

            requests.extend(
                SampleRequest(resource_id=elb_name, definition=definition, service=service)
                for definition in self.catalog
            )

        return requests, pending, unresolved

    async def _collect_sample(self, request: SampleRequest) -> SampleResult:
        definition = request.definition
        service = request.service
        value = await asyncio.wait_for(
            self.fetcher.fetch(request.resource_id, definition.metric_name, definition.statistic),
            timeout=self.fetch_timeout,
        )
        labels = definition.write.labels_for(request.resource_id, service.name, service.namespace)
        self.exported.record(definition.write, labels, value)
        return SampleResult(
            service=service,
            metric_name=definition.metric_name,
            status=SampleStatus.SUCCESS,
            value=value,
        )

    async def _collect_sample_safe(self, request: SampleRequest, semaphore: asyncio.Semaphore) -> SampleResult:
        """Collect one sample, converting any failure into a FAILED result.

        A failing sample is logged and counted; it never affects the other samples
        of the cycle.
        """
        async with semaphore:
            try:
                return await self._collect_sample(request)
            except asyncio.TimeoutError:
                error = f"timed out after {self.fetch_timeout}s"
            except Exception as e:
                error = str(e)

        metric_name = request.definition.metric_name
        logger.error(f"Failed to collect {metric_name} for {request.service} ({request.resource_id}): {error}")
        self.exported.record_failure(metric_name)
        return SampleResult(
            service=request.service,
            metric_name=metric_name,
            status=SampleStatus.FAILED,
            error=error,
        )

    async def collect_metrics(self) -> CollectionResult:
        """Run one complete collection cycle.

        Returns only after every sample request has finished.

        Raises:
            KubernetesException: If services cannot be discovered. The cycle is aborted.
        """
        start_time = time.monotonic()

        services = await asyncio.to_thread(self.discovery.list_load_balancer_services)
        requests, pending, unresolved = self.build_requests(services)

        logger.info(
            f"Collecting {len(self.catalog)} metrics for {len(services) - pending - unresolved} "
            f"of {len(services)} load balancer services ({len(requests)} requests)"
        )

        semaphore = asyncio.Semaphore(self.max_concurrency)
        samples = await asyncio.gather(*(self._collect_sample_safe(request, semaphore) for request in requests))

        successful = sum(1 for s in samples if s.status == SampleStatus.SUCCESS)
        failed = len(samples) - successful
        duration = time.monotonic() - start_time

        result = CollectionResult(
            total_services=len(services),
            pending=pending,
            unresolved=unresolved,
            requested=len(requests),
            successful=successful,
            failed=failed,
            samples=list(samples),
            duration_seconds=duration,
        )
        self.exported.record_cycle(result, finished_at=time.time())

        logger.info(
            f"Metrics collection completed: {successful}/{len(requests)} successful, "
            f"{failed} failed, duration: {duration:.2f}s"
        )
        return result

"""CloudWatch client for per-load-balancer ELB statistics."""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..commons.config import app_settings, secrets_settings
from ..commons.constants import Statistic
from ..commons.exceptions import CloudWatchException
from ..commons.logging import get_logger


logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CloudWatchClient:
    """Fetches a single statistic of an ELB metric over a trailing window."""

    def __init__(
        self,
        namespace: Optional[str] = None,
        dimension_name: Optional[str] = None,
        window_seconds: Optional[int] = None,
        timeout: Optional[float] = None,
        client: Any = None,
        clock: Callable[[], datetime] = _utcnow,
        max_workers: Optional[int] = None,
    ):
        """Initialize CloudWatch client.

        Args:
            namespace: CloudWatch namespace. Defaults to the CLOUDWATCH_NAMESPACE setting.
            dimension_name: Dimension holding the load balancer name. Defaults to CLOUDWATCH_DIMENSION.
            window_seconds: Length of the trailing window, also used as the period. Defaults to METRICS_WINDOW_SECONDS.
            timeout: Connect and read timeout of the underlying HTTP calls. Defaults to FETCH_TIMEOUT_SECONDS.
            client: Pre-built boto3 CloudWatch client. One is created from the settings if omitted.
            clock: Returns the current UTC time; the window ends at this instant.
            max_workers: Size of the thread pool running blocking requests. Defaults to MAX_CONCURRENT_FETCHES.
        """
        self.namespace = namespace or app_settings.cloudwatch_namespace
        self.dimension_name = dimension_name or app_settings.cloudwatch_dimension
        self.window_seconds = window_seconds or app_settings.metrics_window
        self.timeout = timeout or app_settings.fetch_timeout
        self.clock = clock
        self.client = client or self._create_client()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or app_settings.max_concurrent_fetches, thread_name_prefix="cloudwatch"
        )

    def _create_client(self) -> Any:
        session_kwargs: Dict[str, Any] = {}
        if secrets_settings.aws_access_key_id and secrets_settings.aws_secret_access_key:
            session_kwargs["aws_access_key_id"] = secrets_settings.aws_access_key_id
            session_kwargs["aws_secret_access_key"] = secrets_settings.aws_secret_access_key

        client_config = Config(
            connect_timeout=self.timeout,
            read_timeout=self.timeout,
            retries={"max_attempts": 0, "mode": "standard"},
        )
        try:
            return boto3.client(
                "cloudwatch",
                region_name=app_settings.aws_region,
                config=client_config,
                **session_kwargs,
            )
        except BotoCoreError as err:
            logger.error(f"Found error while creating CloudWatch client. {err}")
            raise CloudWatchException("Unable to create CloudWatch client") from err

    def get_statistic(self, elb_name: str, metric_name: str, statistic: Statistic) -> float:
        """Return one statistic of a metric for a load balancer over the trailing window.

        Args:
            elb_name: CloudWatch load balancer name.
            metric_name: CloudWatch metric name, e.g. ``RequestCount``.
            statistic: Statistic to request.

        Returns:
            The statistic value, or 0.0 when CloudWatch has no datapoint for the window.

        Raises:
            CloudWatchException: If the request fails.
        """
        end_time = self.clock()
        start_time = end_time - timedelta(seconds=self.window_seconds)
        try:
            response = self.client.get_metric_statistics(
                Namespace=self.namespace,
                MetricName=metric_name,
                Dimensions=[{"Name": self.dimension_name, "Value": elb_name}],
                StartTime=start_time,
                EndTime=end_time,
                Period=self.window_seconds,
                Statistics=[str(statistic)],
            )
        except (ClientError, BotoCoreError) as err:
            raise CloudWatchException(f"Failed to get {metric_name} {statistic} for {elb_name}: {err}") from err

        datapoints = response.get("Datapoints") or []
        if not datapoints:
            return 0.0

        latest = max(datapoints, key=lambda dp: dp.get("Timestamp") or start_time)
        value = latest.get(str(statistic))
        return float(value) if value is not None else 0.0

    async def fetch(self, elb_name: str, metric_name: str, statistic: Statistic) -> float:
        """Async variant of ``get_statistic``.

        The blocking request runs on the client's own thread pool, so no request
        waits for a worker while fewer than ``max_workers`` are in flight.
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.get_statistic, elb_name, metric_name, statistic)

    def close(self) -> None:
        """Shut down the thread pool without waiting for abandoned requests."""
        self._executor.shutdown(wait=False, cancel_futures=True)

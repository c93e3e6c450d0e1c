#  -----------------------------------------------------------------------------
#  Copyright (c) 2024 Bud Ecosystem Inc.
#  #
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#  #
#      http://www.apache.org/licenses/LICENSE-2.0
#  #
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
#  -----------------------------------------------------------------------------

"""Entrypoint of the budelb exporter: serves /metrics and runs collection cycles forever."""

import asyncio
import sys

from prometheus_client import start_http_server

from .commons.config import app_settings
from .commons.exceptions import CloudWatchException, KubernetesException
from .commons.logging import configure_logging, get_logger
from .discovery.kubernetes import KubernetesHandler
from .metrics_collector.catalog import MetricCatalog
from .metrics_collector.cloudwatch import CloudWatchClient
from .metrics_collector.exporter import ExportedMetricSet
from .metrics_collector.metrics_service import MetricsCollectionService
from .metrics_collector.scheduler import CollectionScheduler


logger = get_logger(__name__)


def build_service(exported: ExportedMetricSet, catalog: MetricCatalog) -> MetricsCollectionService:
    """Wire discovery and CloudWatch access into a collection service."""
    discovery = KubernetesHandler.from_kubeconfig_path(app_settings.kubeconfig_path)
    discovery.verify_cluster_connection()
    return MetricsCollectionService(
        discovery=discovery,
        fetcher=CloudWatchClient(max_workers=app_settings.max_concurrent_fetches),
        catalog=catalog,
        exported=exported,
        max_concurrency=app_settings.max_concurrent_fetches,
    )


def main() -> int:
    """Start the metrics server and the collection loop.

    Returns:
        Process exit status. Only returned on a fatal error or interrupt; the loop
        otherwise runs forever.
    """
    configure_logging()
    logger.info(f"Starting {app_settings.name} {app_settings.version}")

    catalog = MetricCatalog.default()
    exported = ExportedMetricSet(catalog)

    service = None
    try:
        service = build_service(exported, catalog)
        start_http_server(app_settings.metrics_port, addr=app_settings.metrics_addr, registry=exported.registry)
        logger.info(f"Listening on {app_settings.metrics_addr}:{app_settings.metrics_port}/metrics")

        scheduler = CollectionScheduler(service.collect_metrics, interval=app_settings.collection_interval)
        asyncio.run(scheduler.run_forever())
    except (KubernetesException, CloudWatchException) as e:
        logger.error(f"Exiting after fatal error: {e.message}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    finally:
        if service is not None:
            service.fetcher.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())

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

"""Defines constant values used throughout the project, including application-specific constants."""

from enum import StrEnum, auto


DEFAULT_KUBECONFIG_PATH = "/srv/kubernetes/kubeconfig"

# Kubernetes service type that provisions an external load balancer
LOAD_BALANCER_SERVICE_TYPE = "LoadBalancer"

INTERNAL_ELB_PREFIX = "internal-"


class LogLevel(StrEnum):
    """Logging levels accepted by the LOG_LEVEL setting."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Statistic(StrEnum):
    """CloudWatch aggregation statistics.

    The value is both the statistic name sent to CloudWatch and the key of the
    corresponding field in a returned datapoint.
    """

    SUM = "Sum"
    AVERAGE = "Average"
    MAXIMUM = "Maximum"
    MINIMUM = "Minimum"


class SeriesKind(StrEnum):
    """How a fetched value is written into an exported Prometheus series.

    Attributes:
        COUNTER_ADD: Add the value to a monotonic counter.
        GAUGE_SET: Overwrite a gauge with the value.
        HISTOGRAM_OBSERVE: Record the value as one histogram observation.
    """

    COUNTER_ADD = auto()
    GAUGE_SET = auto()
    HISTOGRAM_OBSERVE = auto()


class SampleStatus(StrEnum):
    """Outcome of a single (service, metric) sample in a collection cycle."""

    SUCCESS = auto()
    FAILED = auto()


class ServiceState(StrEnum):
    """Discovery state of a load balancer service within a cycle."""

    READY = auto()
    PENDING = auto()
    UNRESOLVED = auto()

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

"""Defines custom exceptions to handle specific error cases gracefully."""


class KubernetesException(Exception):
    """Base exception for kubernetes handler errors."""

    def __init__(self, message="Kubernetes error occurred"):
        """Initialize KubernetesException."""
        self.message = message
        super().__init__(self.message)


class CloudWatchException(Exception):
    """Raise when a CloudWatch statistics request fails."""

    def __init__(self, message="CloudWatch error occurred"):
        """Initialize CloudWatchException."""
        self.message = message
        super().__init__(self.message)


class ElbNameResolutionError(Exception):
    """Raise when an ELB name cannot be derived from a load balancer hostname.

    Attributes:
        hostname (str): The hostname that failed to resolve.
        message (str): A human-readable string describing the failure.
    """

    def __init__(self, hostname, message="Hostname does not match the ELB naming scheme"):
        """Initialize ElbNameResolutionError with the offending hostname."""
        self.hostname = hostname
        self.message = message
        super().__init__(self.message)

    def __str__(self):
        """Return a string representation of the resolution error."""
        return f"{self.message}: {self.hostname!r}"

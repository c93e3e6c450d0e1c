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

"""Manages application and secret configurations, utilizing environment variables and an optional .env file."""

from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, ConfigDict, Field
from pydantic_settings import BaseSettings

from budelb.__about__ import __version__

from .constants import DEFAULT_KUBECONFIG_PATH, LogLevel


load_dotenv()


class BaseConfig(BaseSettings):
    """Base Config to be used as a parent class for other Config classes. Extra fields are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # App Info
    name: str = __version__.split("@")[0]
    version: str = __version__.split("@")[-1]


class AppConfig(BaseConfig):
    description: str = "Exports CloudWatch ELB metrics of Kubernetes LoadBalancer services to Prometheus"

    # Logging
    log_level: LogLevel = Field(LogLevel.INFO, alias="LOG_LEVEL")
    debug: bool = Field(False, alias="DEBUG")

    # Cluster
    kubeconfig_path: str = Field(
        DEFAULT_KUBECONFIG_PATH, validation_alias=AliasChoices("URD_KUBECONFIG_PATH", "KUBECONFIG_PATH")
    )
    validate_certs: bool = Field(True, alias="VALIDATE_CERTS")

    # CloudWatch
    aws_region: Optional[str] = Field(None, alias="AWS_REGION")
    cloudwatch_namespace: str = Field("AWS/ELB", alias="CLOUDWATCH_NAMESPACE")
    cloudwatch_dimension: str = Field("LoadBalancerName", alias="CLOUDWATCH_DIMENSION")
    metrics_window: int = Field(60, alias="METRICS_WINDOW_SECONDS", gt=0)

    # Metrics Collection Configuration
    collection_interval: float = Field(60, alias="COLLECTION_INTERVAL_SECONDS", gt=0)
    fetch_timeout: float = Field(30, alias="FETCH_TIMEOUT_SECONDS", gt=0)
    max_concurrent_fetches: int = Field(50, alias="MAX_CONCURRENT_FETCHES", ge=1)

    # Scrape endpoint
    metrics_port: int = Field(8080, alias="METRICS_PORT")
    metrics_addr: str = Field("0.0.0.0", alias="METRICS_ADDR")


class SecretsConfig(BaseConfig):
    aws_access_key_id: Optional[str] = Field(None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[str] = Field(None, alias="AWS_SECRET_ACCESS_KEY")


app_settings = AppConfig()
secrets_settings = SecretsConfig()

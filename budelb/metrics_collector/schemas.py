"""Schemas for metrics collection."""

from typing import List, Optional

from pydantic import BaseModel, Field

from ..commons.constants import SampleStatus
from ..discovery.schemas import ServiceRef
from .catalog import MetricDefinition


class SampleRequest(BaseModel):
    """One (service, metric) pair to fetch within a cycle."""

    resource_id: str = Field(..., description="CloudWatch load balancer name")
    definition: MetricDefinition
    service: ServiceRef


class SampleResult(BaseModel):
    """Outcome of a single sample request."""

    service: ServiceRef
    metric_name: str = Field(..., description="CloudWatch metric name")
    status: SampleStatus = Field(..., description="Sample status")
    value: Optional[float] = Field(None, description="Value written to the exported series")
    error: Optional[str] = Field(None, description="Error message if failed")


class CollectionResult(BaseModel):
    """Result of one collection cycle."""

    total_services: int = Field(..., description="LoadBalancer services discovered")
    pending: int = Field(0, description="Services whose load balancer has no hostname yet")
    unresolved: int = Field(0, description="Services whose hostname did not yield an ELB name")
    requested: int = Field(0, description="Sample requests issued")
    successful: int = Field(0, description="Samples fetched and recorded")
    failed: int = Field(0, description="Samples that could not be fetched or recorded")
    samples: List[SampleResult] = Field(default_factory=list, description="Per-sample results")
    duration_seconds: float = Field(..., description="Total cycle duration in seconds")

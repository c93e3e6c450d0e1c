"""Schemas for load balancer service discovery."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceRef(BaseModel):
    """A Kubernetes service of type LoadBalancer as seen in one collection cycle."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="Namespace of the service")
    name: str = Field(..., description="Name of the service")
    hostname: Optional[str] = Field(None, description="Hostname assigned to the provisioned load balancer")

    @property
    def is_provisioned(self) -> bool:
        """Whether the load balancer has been assigned a public hostname yet."""
        return bool(self.hostname)

    def __str__(self) -> str:
        """Return the namespaced service name."""
        return f"{self.namespace}/{self.name}"

"""Discovery of Kubernetes LoadBalancer services and their ELB names."""

from .kubernetes import KubernetesHandler, load_kubeconfig
from .resolver import elb_name_from_hostname
from .schemas import ServiceRef


__all__ = ["KubernetesHandler", "ServiceRef", "elb_name_from_hostname", "load_kubeconfig"]

"""Kubernetes access for discovering services exposed through a load balancer."""

from typing import Any, Dict, List, Optional

import yaml
from kubernetes import client, config
from urllib3.exceptions import HTTPError

from ..commons.config import app_settings
from ..commons.constants import LOAD_BALANCER_SERVICE_TYPE
from ..commons.exceptions import KubernetesException
from ..commons.logging import get_logger
from .schemas import ServiceRef


logger = get_logger(__name__)


def load_kubeconfig(path: str) -> Dict[str, Any]:
    """Read and parse a kubeconfig file.

    Args:
        path (str): Location of the kubeconfig file.

    Returns:
        Dict[str, Any]: The parsed kubeconfig.

    Raises:
        KubernetesException: If the file cannot be read or is not a valid kubeconfig document.
    """
    try:
        with open(path, "r") as fp:
            data = yaml.safe_load(fp)
    except OSError as err:
        logger.error(f"Found error while reading kubeconfig {path}. {err}")
        raise KubernetesException(f"Unable to read kubeconfig {path}") from err
    except yaml.YAMLError as err:
        logger.error(f"Found error while parsing kubeconfig {path}. {err}")
        raise KubernetesException(f"Unable to parse kubeconfig {path}") from err

    if not isinstance(data, dict):
        raise KubernetesException(f"Kubeconfig {path} is not a mapping")
    return data


class KubernetesHandler:
    """Kubernetes cluster handler.

    Lists the services of every namespace and keeps those whose load balancer
    CloudWatch can report on.

    Attributes:
        config (Dict): Configuration dictionary for the Kubernetes cluster.
        api_client (client.ApiClient): API client bound to this cluster only.
    """

    def __init__(self, config: Dict, validate_certs: Optional[bool] = None):
        """Initialize the KubernetesHandler with the given configuration.

        Args:
            config (Dict): Configuration dictionary for the Kubernetes cluster.
            validate_certs (bool, optional): Verify the API server certificate. Defaults to the VALIDATE_CERTS setting.
        """
        self.config = config
        self.validate_certs = app_settings.validate_certs if validate_certs is None else validate_certs
        self.api_client = self._load_kube_config()

    @classmethod
    def from_kubeconfig_path(cls, path: str, validate_certs: Optional[bool] = None) -> "KubernetesHandler":
        """Create a handler from a kubeconfig file on disk."""
        return cls(load_kubeconfig(path), validate_certs=validate_certs)

    def _load_kube_config(self) -> client.ApiClient:
        """Load kubernetes config into a dedicated API client."""
        try:
            configuration = client.Configuration()
            config.load_kube_config_from_dict(self.config, client_configuration=configuration)
            configuration.verify_ssl = self.validate_certs
            return client.ApiClient(configuration)
        except config.ConfigException as err:
            logger.error(f"Found error while loading Kubernetes config file. {err}")
            raise KubernetesException("Invalid Kubernetes config file") from err
        except Exception as err:
            logger.error(f"Found error while loading Kubernetes config file. {err}")
            raise KubernetesException("Found error while loading Kubernetes config file") from err

    def verify_cluster_connection(self) -> bool:
        """Verify the connection to the Kubernetes cluster.

        This method attempts to list namespaces in the cluster to verify the connection.

        Returns:
            bool: True if the connection is successful.

        Raises:
            KubernetesException: If there is an error while verifying the connection.
        """
        try:
            v1 = client.CoreV1Api(api_client=self.api_client)
            v1.list_namespace()
            return True
        except client.ApiException as err:
            logger.error(f"Found Kubernetes API error while verifying cluster connection. {err.reason}")
            raise KubernetesException("Found error while verifying cluster connection") from err
        except HTTPError as err:
            logger.error(f"Found error while verifying cluster connection {err}")
            raise KubernetesException("Found error while verifying cluster connection") from err

    @staticmethod
    def _ingress_hostname(service: Any) -> Optional[str]:
        status = service.status
        load_balancer = status.load_balancer if status else None
        ingress = load_balancer.ingress if load_balancer else None
        if not ingress:
            return None
        return ingress[0].hostname

    def list_load_balancer_services(self) -> List[ServiceRef]:
        """List the services of type LoadBalancer across all namespaces.

        Services whose load balancer is still being provisioned are returned with
        no hostname; they are not an error.

        Returns:
            List[ServiceRef]: One entry per LoadBalancer service.

        Raises:
            KubernetesException: If namespaces or services cannot be listed.
        """
        v1 = client.CoreV1Api(api_client=self.api_client)
        services: List[ServiceRef] = []

        try:
            namespaces = v1.list_namespace()
            for namespace in namespaces.items:
                namespace_name = namespace.metadata.name
                for service in v1.list_namespaced_service(namespace_name).items:
                    if service.spec.type != LOAD_BALANCER_SERVICE_TYPE:
                        continue
                    services.append(
                        ServiceRef(
                            namespace=service.metadata.namespace or namespace_name,
                            name=service.metadata.name,
                            hostname=self._ingress_hostname(service),
                        )
                    )
        except client.ApiException as err:
            logger.error(f"Found Kubernetes API error while listing services. {err.reason}")
            raise KubernetesException("Found error while listing load balancer services") from err
        except HTTPError as err:
            logger.error(f"Found error while listing services. {err}")
            raise KubernetesException("Found error while listing load balancer services") from err

        logger.debug(f"Discovered {len(services)} load balancer services across {len(namespaces.items)} namespaces")
        return services

"""Kubernetes client access.

Everything this package reads from the cluster goes through the generic
custom objects API, so one client type covers CRDs, Ingresses, Routes,
VirtualServices and HTTPRoutes alike. The client is read-only from our
side: only list/get calls are ever made.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from startpage_mcp_tool.errors import SourceQueryError

logger = logging.getLogger("startpage-mcp")

_api_clients: Dict[str, client.ApiClient] = {}
_api_clients_lock = threading.Lock()


def _load_api_client(context: str = "") -> client.ApiClient:
    """Build an ApiClient, preferring in-cluster credentials.

    An explicit context always means kubeconfig.
    """
    if not context:
        try:
            configuration = client.Configuration()
            config.load_incluster_config(client_configuration=configuration)
            logger.debug("Loaded in-cluster Kubernetes config")
            return client.ApiClient(configuration)
        except ConfigException:
            logger.debug("Not running in-cluster, falling back to kubeconfig")

    api_client = config.new_client_from_config(context=context or None)
    logger.debug(f"Loaded kubeconfig (context: {context or 'current'})")
    return api_client


def get_api_client(context: str = "") -> client.ApiClient:
    with _api_clients_lock:
        api_client = _api_clients.get(context)
        if api_client is None:
            api_client = _load_api_client(context)
            _api_clients[context] = api_client
        return api_client


def reset_clients() -> None:
    """Drop memoized clients so the next call reloads credentials."""
    with _api_clients_lock:
        _api_clients.clear()


def get_custom_objects_client(context: str = "") -> client.CustomObjectsApi:
    return client.CustomObjectsApi(get_api_client(context))


def list_objects(
    api: client.CustomObjectsApi,
    group: str,
    version: str,
    plural: str,
    namespace: Optional[str] = None,
    timeout: Optional[float] = None,
    limit: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """List raw objects of one kind, cluster-wide or in a single namespace.

    Args:
        api: Custom objects client
        group: API group (e.g., "networking.k8s.io")
        version: API version (e.g., "v1")
        plural: Plural resource name (e.g., "ingresses")
        namespace: Namespace to list in; None lists across all namespaces
        timeout: Request timeout in seconds
        limit: Optional page size

    Returns:
        The raw ``items`` of the list response.

    Raises:
        SourceQueryError: the list call failed for any reason.
    """
    resource = f"{plural}.{group}/{version}"
    kwargs: Dict[str, Any] = {}
    if timeout:
        kwargs["_request_timeout"] = timeout
    if limit:
        kwargs["limit"] = limit

    try:
        if namespace:
            raw = api.list_namespaced_custom_object(
                group=group, version=version, namespace=namespace,
                plural=plural, **kwargs,
            )
        else:
            raw = api.list_cluster_custom_object(
                group=group, version=version, plural=plural, **kwargs,
            )
    except ApiException as e:
        raise SourceQueryError(resource, e, status=e.status) from e
    except Exception as e:
        raise SourceQueryError(resource, e) from e

    return raw.get("items") or []


def get_object(
    api: client.CustomObjectsApi,
    group: str,
    version: str,
    plural: str,
    namespace: str,
    name: str,
    timeout: Optional[float] = None,
) -> Optional[Dict[str, Any]]:
    """Fetch one namespaced object, returning None when it does not exist.

    Core API kinds (empty group) are not served under /apis, so they are
    fetched through the raw ApiClient instead.
    """
    try:
        if group:
            return api.get_namespaced_custom_object(
                group=group, version=version, namespace=namespace,
                plural=plural, name=name, _request_timeout=timeout,
            )
        return api.api_client.call_api(
            f"/api/{version}/namespaces/{namespace}/{plural}/{name}",
            "GET",
            header_params={"Accept": "application/json"},
            auth_settings=["BearerToken"],
            response_type="object",
            _return_http_data_only=True,
            _request_timeout=timeout,
        )
    except ApiException as e:
        if e.status == 404:
            return None
        raise

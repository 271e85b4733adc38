"""Routing objects that can be surfaced as applications through annotations.

Ingress, OpenShift Route, Istio VirtualService and Gateway API HTTPRoute
objects are not link declarations themselves, so by default only objects
annotated with an enable/expose key are shown.
"""

from typing import Dict, Optional, Sequence, Tuple

from startpage_mcp_tool.sources.base import ObjectFilter, Selector, SourceAdapter
from startpage_mcp_tool.sources.fields import (
    ANNOTATED_FIELDS,
    ANNOTATED_INSTANCE,
    PROTOCOL_KEYS,
    Resolver,
    from_annotations,
)
from startpage_mcp_tool.sources.view import ObjectView

INGRESS_SELECTOR = Selector("networking.k8s.io", "v1", "ingresses")
ROUTE_SELECTOR = Selector("route.openshift.io", "v1", "routes")
VIRTUALSERVICE_SELECTOR = Selector("networking.istio.io", "v1", "virtualservices")
HTTPROUTE_SELECTOR = Selector("gateway.networking.k8s.io", "v1", "httproutes")

DEFAULT_HOST = "localhost"

_protocol_annotation = from_annotations(PROTOCOL_KEYS)


def _with_url(url_resolver: Resolver) -> Dict[str, Tuple[Resolver, ...]]:
    """Annotation field table with a spec-derived URL taking precedence."""
    fields = dict(ANNOTATED_FIELDS)
    fields["url"] = (url_resolver,) + ANNOTATED_FIELDS["url"]
    return fields


def route_url(view: ObjectView) -> str:
    spec = view.spec
    protocol = "https://" if "tls" in spec else "http://"
    host = spec.get("host") or DEFAULT_HOST
    path = spec.get("path") or ""
    return f"{protocol}{host}{path}"


def first_host_url(hosts_field: str, default_protocol: str) -> Resolver:
    """URL from the protocol annotation (or default) and the first listed host."""

    def resolve(view: ObjectView) -> str:
        protocol = _protocol_annotation(view) or default_protocol
        hosts = view.spec.get(hosts_field)
        host = hosts[0] if isinstance(hosts, list) and hosts and hosts[0] else DEFAULT_HOST
        return f"{protocol}://{host}"

    return resolve


def ingress_class_filter(class_names: Sequence[str], include_unclassified: bool) -> ObjectFilter:
    allowed = frozenset(class_names)

    def accept(view: ObjectView) -> bool:
        class_name: Optional[str] = view.spec.get("ingressClassName")
        if not class_name:
            return include_unclassified
        return class_name in allowed

    return accept


def ingress_adapter(
    only_annotated: bool = True,
    class_names: Sequence[str] = (),
    include_unclassified: bool = True,
) -> SourceAdapter:
    filters: Tuple[ObjectFilter, ...] = ()
    if class_names:
        filters = (ingress_class_filter(class_names, include_unclassified),)
    return SourceAdapter(
        name="ingress",
        selector=INGRESS_SELECTOR,
        fields=dict(ANNOTATED_FIELDS),
        instance=ANNOTATED_INSTANCE,
        filters=filters,
        only_annotated=only_annotated,
    )


def openshift_route_adapter(only_annotated: bool = True) -> SourceAdapter:
    return SourceAdapter(
        name="openshift-route",
        selector=ROUTE_SELECTOR,
        fields=_with_url(route_url),
        instance=ANNOTATED_INSTANCE,
        only_annotated=only_annotated,
    )


def istio_virtualservice_adapter(
    only_annotated: bool = True, default_protocol: str = "http"
) -> SourceAdapter:
    return SourceAdapter(
        name="istio-virtualservice",
        selector=VIRTUALSERVICE_SELECTOR,
        fields=_with_url(first_host_url("hosts", default_protocol)),
        instance=ANNOTATED_INSTANCE,
        only_annotated=only_annotated,
    )


def gateway_httproute_adapter(
    only_annotated: bool = True, default_protocol: str = "http"
) -> SourceAdapter:
    return SourceAdapter(
        name="gatewayapi-httproute",
        selector=HTTPROUTE_SELECTOR,
        fields=_with_url(first_host_url("hostnames", default_protocol)),
        instance=ANNOTATED_INSTANCE,
        only_annotated=only_annotated,
    )

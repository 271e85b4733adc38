"""Source adapters, one per object kind, and the config-driven active set."""

from typing import List

from startpage_mcp_tool.config import StartpageConfig
from startpage_mcp_tool.sources.base import (
    KIND_APPLICATION,
    KIND_BOOKMARK,
    Selector,
    SourceAdapter,
)
from startpage_mcp_tool.sources.hajimari import (
    hajimari_application_adapter,
    hajimari_bookmark_adapter,
)
from startpage_mcp_tool.sources.native import (
    native_application_adapter,
    native_bookmark_adapter,
)
from startpage_mcp_tool.sources.routing import (
    gateway_httproute_adapter,
    ingress_adapter,
    istio_virtualservice_adapter,
    openshift_route_adapter,
)
from startpage_mcp_tool.sources.view import ObjectView


def build_adapters(cfg: StartpageConfig) -> List[SourceAdapter]:
    """Application sources enabled by the configuration, native first."""
    adapters = [native_application_adapter()]
    if cfg.hajimari_enabled:
        adapters.append(hajimari_application_adapter())
    if cfg.openshift_enabled:
        adapters.append(openshift_route_adapter(cfg.openshift_only_annotated))
    if cfg.ingress_enabled:
        adapters.append(ingress_adapter(
            cfg.ingress_only_annotated,
            cfg.ingress_class_names,
            cfg.ingress_include_unclassified,
        ))
    if cfg.istio_virtualservice_enabled:
        adapters.append(istio_virtualservice_adapter(
            cfg.istio_virtualservice_only_annotated, cfg.default_protocol
        ))
    if cfg.gatewayapi_httproute_enabled:
        adapters.append(gateway_httproute_adapter(
            cfg.gatewayapi_httproute_only_annotated, cfg.default_protocol
        ))
    return adapters


def build_bookmark_adapters(cfg: StartpageConfig) -> List[SourceAdapter]:
    adapters = [native_bookmark_adapter()]
    if cfg.hajimari_enabled:
        adapters.append(hajimari_bookmark_adapter())
    return adapters


__all__ = [
    "KIND_APPLICATION",
    "KIND_BOOKMARK",
    "ObjectView",
    "Selector",
    "SourceAdapter",
    "build_adapters",
    "build_bookmark_adapters",
    "gateway_httproute_adapter",
    "hajimari_application_adapter",
    "hajimari_bookmark_adapter",
    "ingress_adapter",
    "istio_virtualservice_adapter",
    "native_application_adapter",
    "native_bookmark_adapter",
    "openshift_route_adapter",
]

"""Runtime configuration read from STARTPAGE_* environment variables."""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

logger = logging.getLogger("startpage-mcp")

ENV_PREFIX = "STARTPAGE_"

_TRUE_VALUES = ("true", "1", "yes", "on")


def _parse_bool(value: Optional[str], default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


def _parse_int(name: str, value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError:
        logger.warning(f"Invalid integer for {ENV_PREFIX}{name}: {value!r}, using {default}")
        return default


def _unique(values) -> Tuple[str, ...]:
    """Drop blanks and repeats, keeping first-seen order."""
    return tuple(dict.fromkeys(v for v in values if v))


def _parse_list(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return _unique(part.strip() for part in value.split(","))


@dataclass(frozen=True)
class StartpageConfig:
    """Which sources are active and how they behave.

    The native Startpunkt application and bookmark sources are always on;
    every other source is opt-in.
    """

    namespace_any: bool = True
    namespace_match_names: Tuple[str, ...] = ()
    default_protocol: str = "http"
    instance: str = ""

    hajimari_enabled: bool = False

    ingress_enabled: bool = False
    ingress_only_annotated: bool = True
    ingress_class_names: Tuple[str, ...] = ()
    ingress_include_unclassified: bool = True

    openshift_enabled: bool = False
    openshift_only_annotated: bool = True

    istio_virtualservice_enabled: bool = False
    istio_virtualservice_only_annotated: bool = True

    gatewayapi_httproute_enabled: bool = False
    gatewayapi_httproute_only_annotated: bool = True

    request_timeout: int = 10
    max_workers: int = 6
    kube_context: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StartpageConfig":
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            return env.get(ENV_PREFIX + name)

        defaults = cls()
        return cls(
            namespace_any=_parse_bool(get("NAMESPACE_ANY"), defaults.namespace_any),
            namespace_match_names=_parse_list(get("NAMESPACE_MATCH_NAMES")),
            default_protocol=(get("DEFAULT_PROTOCOL") or defaults.default_protocol).strip(),
            instance=(get("INSTANCE") or "").strip(),
            hajimari_enabled=_parse_bool(get("HAJIMARI_ENABLED"), defaults.hajimari_enabled),
            ingress_enabled=_parse_bool(get("INGRESS_ENABLED"), defaults.ingress_enabled),
            ingress_only_annotated=_parse_bool(
                get("INGRESS_ONLY_ANNOTATED"), defaults.ingress_only_annotated
            ),
            ingress_class_names=_parse_list(get("INGRESS_CLASS_NAMES")),
            ingress_include_unclassified=_parse_bool(
                get("INGRESS_INCLUDE_UNCLASSIFIED"), defaults.ingress_include_unclassified
            ),
            openshift_enabled=_parse_bool(get("OPENSHIFT_ENABLED"), defaults.openshift_enabled),
            openshift_only_annotated=_parse_bool(
                get("OPENSHIFT_ONLY_ANNOTATED"), defaults.openshift_only_annotated
            ),
            istio_virtualservice_enabled=_parse_bool(
                get("ISTIO_VIRTUALSERVICE_ENABLED"), defaults.istio_virtualservice_enabled
            ),
            istio_virtualservice_only_annotated=_parse_bool(
                get("ISTIO_VIRTUALSERVICE_ONLY_ANNOTATED"),
                defaults.istio_virtualservice_only_annotated,
            ),
            gatewayapi_httproute_enabled=_parse_bool(
                get("GATEWAYAPI_HTTPROUTE_ENABLED"), defaults.gatewayapi_httproute_enabled
            ),
            gatewayapi_httproute_only_annotated=_parse_bool(
                get("GATEWAYAPI_HTTPROUTE_ONLY_ANNOTATED"),
                defaults.gatewayapi_httproute_only_annotated,
            ),
            request_timeout=_parse_int(
                "REQUEST_TIMEOUT", get("REQUEST_TIMEOUT"), defaults.request_timeout
            ),
            max_workers=_parse_int("MAX_WORKERS", get("MAX_WORKERS"), defaults.max_workers),
            kube_context=(get("KUBE_CONTEXT") or "").strip(),
        )


@dataclass(frozen=True)
class NamespaceScope:
    """Either every namespace, or an explicit allow-list."""

    any_namespace: bool = True
    match_names: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def all(cls) -> "NamespaceScope":
        return cls(any_namespace=True)

    @classmethod
    def only(cls, names: List[str]) -> "NamespaceScope":
        return cls(any_namespace=False, match_names=_unique(names))

    @classmethod
    def from_config(cls, cfg: StartpageConfig) -> "NamespaceScope":
        if cfg.namespace_any:
            return cls.all()
        return cls.only(list(cfg.namespace_match_names))

    def namespaces(self) -> List[Optional[str]]:
        """Namespaces to issue list calls for; [None] means cluster-wide."""
        if self.any_namespace:
            return [None]
        return list(self.match_names)

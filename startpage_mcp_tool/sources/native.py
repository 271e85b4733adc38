"""Startpunkt's own Application and Bookmark resources."""

import logging
import re
from typing import Any, Dict, Optional

from startpage_mcp_tool.k8s_config import get_object
from startpage_mcp_tool.sources.base import KIND_BOOKMARK, Selector, SourceAdapter
from startpage_mcp_tool.sources.fields import (
    INSTANCE_KEYS,
    ROOT_PATH_KEYS,
    TAGS_KEYS,
    as_bool,
    as_int,
    from_annotations,
    from_spec,
    lowercase,
    metadata_name,
    metadata_namespace,
    required_spec,
)
from startpage_mcp_tool.sources.view import ObjectView

logger = logging.getLogger("startpage-mcp")

APPLICATION_SELECTOR = Selector("startpunkt.ullberg.us", "v1alpha4", "applications")
BOOKMARK_SELECTOR = Selector("startpunkt.ullberg.us", "v1alpha4", "bookmarks")

_INDEXED = re.compile(r"^(?P<key>[^\[\]]*)\[(?P<index>\d+)\]$")


def extract_property(obj: Dict[str, Any], path: str) -> Optional[str]:
    """Walk a dotted property path such as ``status.loadBalancer.ingress[0].ip``.

    Returns the leaf as a string, or None if any step is missing.
    """
    if not path or not isinstance(path, str):
        return None
    current: Any = obj
    for part in path.split("."):
        if not isinstance(current, dict):
            return None
        match = _INDEXED.match(part)
        if match:
            items = current.get(match.group("key"))
            index = int(match.group("index"))
            if not isinstance(items, list) or index >= len(items):
                return None
            current = items[index]
        else:
            current = current.get(part)
        if current is None:
            return None
    return str(current)


def _split_api_version(url_from: Dict[str, Any]):
    api_version = url_from["apiVersion"]
    group = url_from.get("apiGroup") or ""
    if "/" in api_version:
        prefix, api_version = api_version.split("/", 1)
        group = group or prefix
    return group, api_version


def url_from_reference(view: ObjectView) -> Optional[str]:
    """Resolve ``spec.urlFrom`` by reading a property of another object.

    Any failure is logged and yields None so the plain ``spec.url`` is
    used instead.
    """
    url_from = view.spec.get("urlFrom")
    if not isinstance(url_from, dict):
        return None
    missing = [k for k in ("apiVersion", "kind", "name", "property") if not url_from.get(k)]
    if missing:
        logger.warning(
            f"urlFrom on {view.namespace}/{view.name} is missing {', '.join(missing)}"
        )
        return None
    if view.api is None:
        return None

    namespace = url_from.get("namespace") or view.namespace
    try:
        group, version = _split_api_version(url_from)
        plural = f"{str(url_from['kind']).lower()}s"
        referenced = get_object(
            view.api, group, version, plural, namespace, url_from["name"],
            timeout=view.timeout,
        )
    except Exception as e:
        logger.warning(f"Error resolving urlFrom on {view.namespace}/{view.name}: {e}")
        return None
    if referenced is None:
        logger.warning(
            f"urlFrom reference {url_from['kind']}/{url_from['name']} not found in {namespace}"
        )
        return None
    return extract_property(referenced, url_from["property"])


def native_application_adapter() -> SourceAdapter:
    return SourceAdapter(
        name="startpunkt",
        selector=APPLICATION_SELECTOR,
        fields={
            "name": (required_spec("name", lowercase),),
            "group": (from_spec("group", lowercase), metadata_namespace),
            "url": (url_from_reference, required_spec("url")),
            "icon": (from_spec("icon"),),
            "icon_color": (from_spec("iconColor"),),
            "info": (from_spec("info"),),
            "target_blank": (from_spec("targetBlank", as_bool),),
            "location": (from_spec("location", as_int),),
            "enabled": (from_spec("enabled", as_bool),),
            "tags": (from_spec("tags"), from_annotations(TAGS_KEYS)),
            "root_path": (
                from_spec("rootPath", skip_blank=True),
                from_annotations(ROOT_PATH_KEYS),
            ),
        },
        instance=(from_spec("instance"), from_annotations(INSTANCE_KEYS)),
    )


def native_bookmark_adapter() -> SourceAdapter:
    return SourceAdapter(
        name="startpunkt-bookmark",
        selector=BOOKMARK_SELECTOR,
        fields={
            "name": (from_spec("name", lowercase), metadata_name),
            "group": (from_spec("group", lowercase), metadata_namespace),
            "url": (required_spec("url"),),
            "icon": (from_spec("icon"),),
            "info": (from_spec("info"),),
            "target_blank": (from_spec("targetBlank", as_bool),),
            "location": (from_spec("location", as_int),),
        },
        instance=(from_spec("instance"), from_annotations(INSTANCE_KEYS)),
        kind=KIND_BOOKMARK,
    )

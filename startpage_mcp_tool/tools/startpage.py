"""Startpage tools: discovered applications and bookmarks over MCP.

Applications and bookmarks are scattered across several object kinds in a
cluster. These tools read every enabled kind, normalize the objects into one
descriptor shape and hand back a sorted, grouped list.

Tools:
    list_applications       - Flat sorted list of every discovered application
    list_application_groups - Applications grouped by group, with tag filtering
    get_application         - Look up one application by group and name
    list_bookmark_groups    - Bookmarks grouped by group
    detect_sources          - Which configured source kinds the cluster serves
"""

import logging
from typing import Any, Dict, List, Optional

from mcp.types import ToolAnnotations

from startpage_mcp_tool.aggregation import (
    aggregate,
    aggregate_bookmark_groups,
    aggregate_groups,
    find_application,
)
from startpage_mcp_tool.config import NamespaceScope, StartpageConfig
from startpage_mcp_tool.errors import SourceQueryError
from startpage_mcp_tool.k8s_config import get_custom_objects_client, list_objects
from startpage_mcp_tool.sources import build_adapters, build_bookmark_adapters

logger = logging.getLogger("startpage-mcp")


def register_startpage_tools(server, non_destructive: bool, cfg: Optional[StartpageConfig] = None):
    """Register application and bookmark discovery tools.

    All tools are read-only, so ``non_destructive`` does not change what is
    registered.
    """
    cfg = cfg or StartpageConfig.from_env()
    scope = NamespaceScope.from_config(cfg)

    def _client(context: str):
        return get_custom_objects_client(context or cfg.kube_context)

    @server.tool(
        annotations=ToolAnnotations(
            title="List Applications",
            readOnlyHint=True,
        ),
    )
    def list_applications(
        context: str = ""
    ) -> Dict[str, Any]:
        """List every discovered application, sorted by group, location and name.

        Args:
            context: Kubernetes context (uses current if not specified)
        """
        try:
            api = _client(context)
            adapters = build_adapters(cfg)
            apps = aggregate(
                adapters, scope, api,
                instance=cfg.instance,
                timeout=cfg.request_timeout,
                max_workers=cfg.max_workers,
            )
            return {
                "success": True,
                "context": context or cfg.kube_context or "current",
                "sources": [a.name for a in adapters],
                "count": len(apps),
                "items": [a.to_dict() for a in apps],
            }
        except Exception as e:
            logger.error(f"Error listing applications: {e}")
            return {"success": False, "error": str(e)}

    @server.tool(
        annotations=ToolAnnotations(
            title="List Application Groups",
            readOnlyHint=True,
        ),
    )
    def list_application_groups(
        tags: str = "",
        context: str = ""
    ) -> Dict[str, Any]:
        """List applications grouped by their group, optionally filtered by tags.

        Untagged applications are always included. Tagged applications are
        only included when one of their tags is requested, so with no tags
        only untagged applications are returned.

        Args:
            tags: Comma-separated tags (e.g., "ops,infra"). Empty returns untagged only.
            context: Kubernetes context (uses current if not specified)
        """
        try:
            api = _client(context)
            groups = aggregate_groups(
                build_adapters(cfg), scope, api,
                tags=tags,
                instance=cfg.instance,
                timeout=cfg.request_timeout,
                max_workers=cfg.max_workers,
            )
            return {
                "success": True,
                "context": context or cfg.kube_context or "current",
                "tags": tags,
                "count": sum(len(g) for g in groups),
                "groups": [g.to_dict() for g in groups],
            }
        except Exception as e:
            logger.error(f"Error listing application groups: {e}")
            return {"success": False, "error": str(e)}

    @server.tool(
        annotations=ToolAnnotations(
            title="Get Application",
            readOnlyHint=True,
        ),
    )
    def get_application(
        group: str,
        name: str,
        context: str = ""
    ) -> Dict[str, Any]:
        """Get one application by its group and name.

        Args:
            group: Application group (e.g., "media")
            name: Application name (e.g., "sonarr")
            context: Kubernetes context (uses current if not specified)
        """
        try:
            api = _client(context)
            app = find_application(
                build_adapters(cfg), scope, api, group, name,
                instance=cfg.instance,
                timeout=cfg.request_timeout,
                max_workers=cfg.max_workers,
            )
            if app is None:
                return {
                    "success": False,
                    "error": f"Application '{name}' not found in group '{group}'",
                    "hint": "Use list_applications to see discovered applications",
                }
            return {
                "success": True,
                "context": context or cfg.kube_context or "current",
                "application": app.to_dict(),
            }
        except Exception as e:
            logger.error(f"Error getting application: {e}")
            return {"success": False, "error": str(e)}

    @server.tool(
        annotations=ToolAnnotations(
            title="List Bookmark Groups",
            readOnlyHint=True,
        ),
    )
    def list_bookmark_groups(
        context: str = ""
    ) -> Dict[str, Any]:
        """List bookmarks grouped by their group.

        Args:
            context: Kubernetes context (uses current if not specified)
        """
        try:
            api = _client(context)
            groups = aggregate_bookmark_groups(
                build_bookmark_adapters(cfg), scope, api,
                instance=cfg.instance,
                timeout=cfg.request_timeout,
                max_workers=cfg.max_workers,
            )
            return {
                "success": True,
                "context": context or cfg.kube_context or "current",
                "count": sum(len(g) for g in groups),
                "groups": [g.to_dict() for g in groups],
            }
        except Exception as e:
            logger.error(f"Error listing bookmark groups: {e}")
            return {"success": False, "error": str(e)}

    @server.tool(
        annotations=ToolAnnotations(
            title="Detect Application Sources",
            readOnlyHint=True,
        ),
    )
    def detect_sources(
        context: str = ""
    ) -> Dict[str, Any]:
        """Check which configured source kinds are served by the cluster.

        Lightweight probe that lists at most one object of each enabled kind.

        Args:
            context: Kubernetes context (uses current if not specified)
        """
        try:
            api = _client(context)
        except Exception as e:
            logger.error(f"Error detecting sources: {e}")
            return {"success": False, "available": False, "error": str(e)}

        sources: List[Dict[str, Any]] = []
        for adapter in build_adapters(cfg) + build_bookmark_adapters(cfg):
            entry: Dict[str, Any] = {
                "name": adapter.name,
                "kind": adapter.kind,
                "resource": str(adapter.selector),
            }
            sel = adapter.selector
            try:
                list_objects(
                    api, sel.group, sel.version, sel.plural,
                    timeout=cfg.request_timeout, limit=1,
                )
                entry["installed"] = True
            except SourceQueryError as e:
                entry["installed"] = False
                if not e.not_installed:
                    entry["error"] = str(e.cause)
            sources.append(entry)

        return {
            "success": True,
            "available": any(s["installed"] for s in sources),
            "context": context or cfg.kube_context or "current",
            "sources": sources,
        }

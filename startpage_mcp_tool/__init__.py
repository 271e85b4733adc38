"""Startpage MCP tool.

Discovers launchable applications and bookmarks declared across a Kubernetes
cluster (native Startpunkt resources, Hajimari resources, Ingresses,
OpenShift Routes, Istio VirtualServices and Gateway API HTTPRoutes) and
serves them as one sorted, grouped list over MCP.
"""

__version__ = "0.1.0"

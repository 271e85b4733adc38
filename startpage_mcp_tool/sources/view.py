"""Read-only accessors over a raw Kubernetes object dict."""

from typing import Any, Dict, Optional


class ObjectView:
    """Wraps one item from a list response.

    ``api`` and ``timeout`` are kept for resolvers that need to follow a
    reference to another object.
    """

    def __init__(self, raw: Dict[str, Any], api: Any = None, timeout: Optional[float] = None):
        self.raw = raw or {}
        self.api = api
        self.timeout = timeout

    @property
    def metadata(self) -> Dict[str, Any]:
        return self.raw.get("metadata") or {}

    @property
    def name(self) -> Optional[str]:
        return self.metadata.get("name")

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.get("namespace")

    @property
    def annotations(self) -> Dict[str, str]:
        return self.metadata.get("annotations") or {}

    @property
    def labels(self) -> Dict[str, str]:
        return self.metadata.get("labels") or {}

    @property
    def spec(self) -> Dict[str, Any]:
        spec = self.raw.get("spec")
        return spec if isinstance(spec, dict) else {}

    def annotation(self, key: str) -> Optional[str]:
        """Annotation value for key, falling back to a label of the same key."""
        if key in self.annotations:
            return self.annotations[key]
        return self.labels.get(key)

    @property
    def has_owner_references(self) -> bool:
        if self.metadata.get("ownerReferences"):
            return True
        for managed in self.metadata.get("managedFields") or []:
            manager = (managed or {}).get("manager") or ""
            if "argocd" in manager:
                return True
        return False

    def __repr__(self) -> str:
        return f"ObjectView({self.namespace}/{self.name})"

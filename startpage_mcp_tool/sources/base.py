"""The source adapter contract.

Every object kind we read from is described by one SourceAdapter value: a
selector naming the kind, a field table of resolver chains, optional
per-object filters, and the opt-in gate flag. The kinds differ only in
the tables they are built with (see the sibling modules); there is no
subclassing.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from startpage_mcp_tool.config import NamespaceScope
from startpage_mcp_tool.errors import MalformedObjectError
from startpage_mcp_tool.k8s_config import list_objects
from startpage_mcp_tool.models import Descriptor, normalize_location
from startpage_mcp_tool.sources.fields import Resolver, append_root_path, resolve_first
from startpage_mcp_tool.sources.view import ObjectView

logger = logging.getLogger("startpage-mcp")

KIND_APPLICATION = "application"
KIND_BOOKMARK = "bookmark"

ObjectFilter = Callable[[ObjectView], bool]


@dataclass(frozen=True)
class Selector:
    group: str
    version: str
    plural: str

    def __str__(self) -> str:
        return f"{self.plural}.{self.group}/{self.version}"


@dataclass(frozen=True)
class SourceAdapter:
    """One object kind and how to turn its objects into descriptors.

    Attributes:
        name: Short identifier, reported on each descriptor as ``source``
        selector: group/version/plural of the kind
        fields: descriptor field name -> resolver chain, highest precedence first
        instance: resolver chain for the object's instance tag
        filters: predicates an object must pass before extraction
        only_annotated: drop descriptors whose enabled flag is not True
        kind: KIND_APPLICATION or KIND_BOOKMARK
    """

    name: str
    selector: Selector
    fields: Mapping[str, Tuple[Resolver, ...]]
    instance: Tuple[Resolver, ...] = ()
    filters: Tuple[ObjectFilter, ...] = ()
    only_annotated: bool = False
    kind: str = KIND_APPLICATION

    def query(
        self,
        api: Any,
        scope: NamespaceScope,
        timeout: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        """List raw objects of this kind within the namespace scope.

        Raises:
            SourceQueryError: any list call failed.
        """
        items: List[Dict[str, Any]] = []
        sel = self.selector
        for namespace in scope.namespaces():
            found = list_objects(
                api, sel.group, sel.version, sel.plural,
                namespace=namespace, timeout=timeout,
            )
            logger.debug(f"Found {len(found)} {sel} in {namespace or 'all namespaces'}")
            items.extend(found)
        return items

    def resolve(self, view: ObjectView, field_name: str) -> Any:
        return resolve_first(view, self.fields.get(field_name, ()))

    def instance_of(self, view: ObjectView) -> Optional[str]:
        return resolve_first(view, self.instance)

    def matches_instance(self, view: ObjectView, instance: str) -> bool:
        """Untagged objects match every instance."""
        if not instance:
            return True
        tagged = self.instance_of(view)
        return tagged is None or tagged == instance

    def extract(self, view: ObjectView) -> Descriptor:
        """Build a descriptor from one object.

        Raises:
            MalformedObjectError: a required field is missing or unparseable.
        """
        name = self.resolve(view, "name")
        group = self.resolve(view, "group")
        if not name:
            raise MalformedObjectError("cannot determine name", view.namespace, view.name)
        if not group:
            raise MalformedObjectError("cannot determine group", view.namespace, view.name)

        root_path = self.resolve(view, "root_path")
        url = append_root_path(self.resolve(view, "url"), root_path)

        return Descriptor(
            name=name,
            group=group,
            url=url,
            icon=self.resolve(view, "icon"),
            icon_color=self.resolve(view, "icon_color"),
            info=self.resolve(view, "info"),
            target_blank=self.resolve(view, "target_blank"),
            location=normalize_location(self.resolve(view, "location")),
            enabled=self.resolve(view, "enabled"),
            tags=self.resolve(view, "tags"),
            root_path=root_path,
            namespace=view.namespace,
            resource_name=view.name,
            source=self.name,
            has_owner_references=view.has_owner_references,
        )

    def admits(self, descriptor: Descriptor) -> bool:
        return not self.only_annotated or descriptor.enabled is True

    def _descriptor_for(self, view: ObjectView, instance: str) -> Optional[Descriptor]:
        """Descriptor for one object, or None when a filter or the gate drops it."""
        if not all(accept(view) for accept in self.filters):
            return None
        if not self.matches_instance(view, instance):
            logger.debug(f"Skipping {self.selector} {view.namespace}/{view.name}: other instance")
            return None
        descriptor = self.extract(view)
        if not self.admits(descriptor):
            return None
        return descriptor

    def collect(
        self,
        api: Any,
        scope: NamespaceScope,
        instance: str = "",
        timeout: Optional[float] = None,
    ) -> List[Descriptor]:
        """Query this kind and return the descriptors it contributes.

        Any error raised while handling one object skips that object only.
        A failed query propagates as SourceQueryError; the pipeline decides
        what to do.
        """
        descriptors: List[Descriptor] = []
        for raw in self.query(api, scope, timeout):
            view = ObjectView(raw, api=api, timeout=timeout)
            try:
                descriptor = self._descriptor_for(view, instance)
            except MalformedObjectError as e:
                logger.warning(f"Skipping malformed {self.selector} {view.namespace}/{view.name}: {e}")
                continue
            except Exception as e:
                logger.warning(
                    f"Skipping {self.selector} {view.namespace}/{view.name}: "
                    f"{type(e).__name__}: {e}"
                )
                continue
            if descriptor is not None:
                descriptors.append(descriptor)

        logger.debug(f"Source {self.name} contributed {len(descriptors)} {self.kind}(s)")
        return descriptors

"""Normalized application/bookmark descriptors and their groups."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_LOCATION = 1000


def normalize_location(location: Optional[int]) -> int:
    """Map an unset location, or the Hajimari-style 0, to the default."""
    if location is None or location == 0:
        return DEFAULT_LOCATION
    return location


@dataclass(frozen=True)
class Descriptor:
    """One launchable link discovered in the cluster.

    Ordering compares (group, location, name), group and name
    case-insensitively. Equality is over every field.

    Attributes:
        name: Display name, lowercased
        group: Display bucket, lowercased; defaults to the object's namespace
        url: Link target, after root path handling
        icon: Icon name or URL
        icon_color: Icon color hint
        info: Free-text description
        target_blank: Open in a new tab; None when the source did not say
        location: Sort weight, lower first
        enabled: Explicit enable flag; None when the source did not say
        tags: Comma-separated tags used by tag filtering
        root_path: Path that was appended to the base URL
        namespace: Namespace of the source object
        resource_name: metadata.name of the source object
        source: Name of the source adapter that produced this entry
        has_owner_references: Source object is owned or GitOps-managed
    """

    name: str
    group: str
    url: Optional[str] = None
    icon: Optional[str] = None
    icon_color: Optional[str] = None
    info: Optional[str] = None
    target_blank: Optional[bool] = None
    location: int = DEFAULT_LOCATION
    enabled: Optional[bool] = None
    tags: Optional[str] = None
    root_path: Optional[str] = None
    namespace: Optional[str] = None
    resource_name: Optional[str] = None
    source: Optional[str] = None
    has_owner_references: bool = False

    def sort_key(self) -> Tuple[str, int, str]:
        return (self.group.lower(), self.location, self.name.lower())

    def __lt__(self, other: "Descriptor") -> bool:
        if not isinstance(other, Descriptor):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __le__(self, other: "Descriptor") -> bool:
        if not isinstance(other, Descriptor):
            return NotImplemented
        return self.sort_key() <= other.sort_key()

    def __gt__(self, other: "Descriptor") -> bool:
        if not isinstance(other, Descriptor):
            return NotImplemented
        return self.sort_key() > other.sort_key()

    def __ge__(self, other: "Descriptor") -> bool:
        if not isinstance(other, Descriptor):
            return NotImplemented
        return self.sort_key() >= other.sort_key()

    def tag_set(self) -> List[str]:
        if not self.tags:
            return []
        return [t.strip().lower() for t in self.tags.split(",") if t.strip()]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "group": self.group,
            "url": self.url,
            "icon": self.icon,
            "iconColor": self.icon_color,
            "info": self.info,
            "targetBlank": self.target_blank,
            "location": self.location,
            "enabled": self.enabled,
            "tags": self.tags,
            "rootPath": self.root_path,
            "namespace": self.namespace,
            "resourceName": self.resource_name,
            "source": self.source,
            "hasOwnerReferences": self.has_owner_references,
        }


@dataclass
class Group:
    """Named bucket of descriptors, kept in the order they were added."""

    name: str
    descriptors: List[Descriptor] = field(default_factory=list)

    def add(self, descriptor: Descriptor) -> None:
        self.descriptors.append(descriptor)

    def __len__(self) -> int:
        return len(self.descriptors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "count": len(self.descriptors),
            "items": [d.to_dict() for d in self.descriptors],
        }

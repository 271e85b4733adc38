"""Tag filtering, grouping and lookups over an already sorted list."""

from typing import Dict, Iterable, List, Optional, Union

from startpage_mcp_tool.models import Descriptor, Group

TagFilter = Optional[Union[str, Iterable[str]]]


def parse_tags(tags: TagFilter) -> List[str]:
    """Normalize caller tags: accepts "a, b" or ["a", "b"]; trims, lowercases, drops blanks."""
    if tags is None:
        return []
    if isinstance(tags, str):
        tags = [tags]
    parsed: List[str] = []
    for entry in tags:
        for tag in (entry or "").split(","):
            tag = tag.strip().lower()
            if tag and tag not in parsed:
                parsed.append(tag)
    return parsed


def filter_by_tags(descriptors: List[Descriptor], tags: TagFilter = None) -> List[Descriptor]:
    """Keep untagged descriptors, plus tagged ones matching a requested tag.

    With no requested tags, tagged descriptors are hidden. Order is kept.
    """
    wanted = set(parse_tags(tags))
    result: List[Descriptor] = []
    for descriptor in descriptors:
        own = descriptor.tag_set()
        if not own:
            result.append(descriptor)
        elif wanted and wanted.intersection(own):
            result.append(descriptor)
    return result


def group_descriptors(descriptors: List[Descriptor]) -> List[Group]:
    """Single-pass partition by group, in first-seen order.

    Feeding it a sorted list yields groups in sorted order with each
    group's members in their original relative order.
    """
    groups: Dict[str, Group] = {}
    for descriptor in descriptors:
        group = groups.get(descriptor.group)
        if group is None:
            group = Group(descriptor.group)
            groups[descriptor.group] = group
        group.add(descriptor)
    return list(groups.values())


def find_by_group_and_name(
    descriptors: Iterable[Descriptor], group: str, name: str
) -> Optional[Descriptor]:
    group = (group or "").lower()
    name = (name or "").lower()
    for descriptor in descriptors:
        if descriptor.group.lower() == group and descriptor.name.lower() == name:
            return descriptor
    return None

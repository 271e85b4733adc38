"""Run the active sources, merge, and sort.

Each source is queried on its own worker. Results are buffered per source
and only merged once every worker has finished, in the order the sources
were given. A source whose query fails contributes nothing for this call.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Optional, Sequence

from startpage_mcp_tool.config import NamespaceScope
from startpage_mcp_tool.errors import SourceQueryError
from startpage_mcp_tool.grouping import (
    TagFilter,
    filter_by_tags,
    find_by_group_and_name,
    group_descriptors,
)
from startpage_mcp_tool.models import Descriptor, Group
from startpage_mcp_tool.sources.base import SourceAdapter

logger = logging.getLogger("startpage-mcp")

DEFAULT_MAX_WORKERS = 6


def _ordering(descriptor: Descriptor):
    # (group, location, name), then fields that only separate exact ties.
    return descriptor.sort_key() + (
        descriptor.url or "",
        descriptor.source or "",
        descriptor.namespace or "",
        descriptor.resource_name or "",
    )


def sort_descriptors(descriptors: Sequence[Descriptor]) -> List[Descriptor]:
    return sorted(descriptors, key=_ordering)


def run_adapter(
    adapter: SourceAdapter,
    api: Any,
    scope: NamespaceScope,
    instance: str = "",
    timeout: Optional[float] = None,
) -> List[Descriptor]:
    """Collect from one source, degrading any failure to an empty list."""
    try:
        return adapter.collect(api, scope, instance=instance, timeout=timeout)
    except SourceQueryError as e:
        if e.not_installed:
            logger.debug(f"Source {adapter.name}: {adapter.selector} is not installed")
        else:
            logger.warning(f"Source {adapter.name} unavailable: {e}")
        return []
    except Exception as e:
        logger.error(f"Unexpected error collecting from source {adapter.name}: {e}")
        return []


def aggregate(
    adapters: Sequence[SourceAdapter],
    scope: NamespaceScope,
    api: Any,
    instance: str = "",
    timeout: Optional[float] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Descriptor]:
    """Query every active source and return one sorted list.

    Args:
        adapters: Active sources
        scope: Namespaces to read from
        api: Custom objects client shared by all workers
        instance: Instance tag requested by the caller; empty disables the filter
        timeout: Per-request timeout in seconds
        max_workers: Upper bound on concurrent source queries

    Returns:
        Descriptors sorted by group, location, then name.
    """
    if not adapters:
        logger.debug("No active sources configured")
        return []

    workers = max(1, min(max_workers, len(adapters)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(run_adapter, adapter, api, scope, instance, timeout)
            for adapter in adapters
        ]
        buffers = [future.result() for future in futures]

    merged: List[Descriptor] = []
    for buffer in buffers:
        merged.extend(buffer)
    logger.debug(f"Aggregated {len(merged)} entries from {len(adapters)} source(s)")
    return sort_descriptors(merged)


def aggregate_groups(
    adapters: Sequence[SourceAdapter],
    scope: NamespaceScope,
    api: Any,
    tags: TagFilter = None,
    instance: str = "",
    timeout: Optional[float] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Group]:
    """Aggregate, apply the tag filter, and partition into groups."""
    descriptors = aggregate(
        adapters, scope, api, instance=instance, timeout=timeout, max_workers=max_workers
    )
    return group_descriptors(filter_by_tags(descriptors, tags))


def aggregate_bookmark_groups(
    adapters: Sequence[SourceAdapter],
    scope: NamespaceScope,
    api: Any,
    instance: str = "",
    timeout: Optional[float] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Group]:
    """Bookmarks are grouped like applications but are never tag filtered."""
    descriptors = aggregate(
        adapters, scope, api, instance=instance, timeout=timeout, max_workers=max_workers
    )
    return group_descriptors(descriptors)


def find_application(
    adapters: Sequence[SourceAdapter],
    scope: NamespaceScope,
    api: Any,
    group: str,
    name: str,
    instance: str = "",
    timeout: Optional[float] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> Optional[Descriptor]:
    descriptors = aggregate(
        adapters, scope, api, instance=instance, timeout=timeout, max_workers=max_workers
    )
    return find_by_group_and_name(descriptors, group, name)

"""Hajimari's Application and Bookmark resources (hajimari.io/v1alpha1)."""

from startpage_mcp_tool.sources.base import KIND_BOOKMARK, Selector, SourceAdapter
from startpage_mcp_tool.sources.fields import (
    ANNOTATED_INSTANCE,
    ROOT_PATH_KEYS,
    TAGS_KEYS,
    as_bool,
    as_int,
    constant,
    from_annotations,
    from_spec,
    lowercase,
    metadata_name,
    metadata_namespace,
    required_spec,
)

APPLICATION_SELECTOR = Selector("hajimari.io", "v1alpha1", "applications")
BOOKMARK_SELECTOR = Selector("hajimari.io", "v1alpha1", "bookmarks")


def hajimari_application_adapter() -> SourceAdapter:
    # Hajimari treats an application as enabled unless it says otherwise.
    return SourceAdapter(
        name="hajimari",
        selector=APPLICATION_SELECTOR,
        fields={
            "name": (required_spec("name", lowercase),),
            "group": (required_spec("group", lowercase),),
            "url": (required_spec("url"),),
            "icon": (from_spec("icon"),),
            "info": (from_spec("info"),),
            "target_blank": (from_spec("targetBlank", as_bool),),
            "location": (from_spec("location", as_int),),
            "enabled": (from_spec("enabled", as_bool), constant(True)),
            "tags": (from_annotations(TAGS_KEYS),),
            "root_path": (from_annotations(ROOT_PATH_KEYS),),
        },
        instance=ANNOTATED_INSTANCE,
    )


def hajimari_bookmark_adapter() -> SourceAdapter:
    return SourceAdapter(
        name="hajimari-bookmark",
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
        instance=ANNOTATED_INSTANCE,
        kind=KIND_BOOKMARK,
    )

"""Field resolvers.

A resolver takes an ObjectView and returns a value, or None when it has
nothing to say. Each source maps every descriptor field to an ordered chain
of resolvers; the first non-None answer wins. Chains are built from three
layers, highest precedence first:

    structural  - read straight from the object's spec
    annotation  - Startpunkt keys, then Hajimari, then Forecastle
    default     - derived from the object's own metadata
"""

from typing import Any, Callable, Iterable, Optional, Sequence

from startpage_mcp_tool.errors import MalformedObjectError
from startpage_mcp_tool.sources.view import ObjectView

Resolver = Callable[[ObjectView], Any]
Converter = Callable[[Any], Any]

STARTPUNKT = "startpunkt.ullberg.us"
HAJIMARI = "hajimari.io"
FORECASTLE = "forecastle.stakater.com"

NAME_KEYS = (f"{STARTPUNKT}/appName", f"{HAJIMARI}/appName", f"{FORECASTLE}/appName")
GROUP_KEYS = (f"{STARTPUNKT}/group", f"{HAJIMARI}/group", f"{FORECASTLE}/group")
URL_KEYS = (f"{STARTPUNKT}/url", f"{HAJIMARI}/url", f"{FORECASTLE}/url")
ICON_KEYS = (f"{STARTPUNKT}/icon", f"{HAJIMARI}/icon", f"{FORECASTLE}/icon")
ICON_COLOR_KEYS = (f"{STARTPUNKT}/iconColor", f"{HAJIMARI}/iconColor")
INFO_KEYS = (f"{STARTPUNKT}/info", f"{HAJIMARI}/info")
TARGET_BLANK_KEYS = (f"{STARTPUNKT}/targetBlank", f"{HAJIMARI}/targetBlank")
LOCATION_KEYS = (f"{STARTPUNKT}/location", f"{HAJIMARI}/location")
ENABLE_KEYS = (f"{STARTPUNKT}/enable", f"{HAJIMARI}/enable", f"{FORECASTLE}/expose")
PROTOCOL_KEYS = (f"{STARTPUNKT}/protocol",)
TAGS_KEYS = (f"{STARTPUNKT}/tags",)
ROOT_PATH_KEYS = (f"{STARTPUNKT}/rootPath",)
INSTANCE_KEYS = (f"{STARTPUNKT}/instance",)


# Converters

def lowercase(value: Any) -> str:
    return str(value).lower()


def as_text(value: Any) -> str:
    return str(value)


def as_bool(value: Any) -> bool:
    """Anything other than a case-insensitive "true" is False."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def as_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    return int(str(value).strip())


def _convert(view: ObjectView, key: str, value: Any, convert: Optional[Converter]) -> Any:
    if convert is None:
        return value
    try:
        return convert(value)
    except (TypeError, ValueError):
        raise MalformedObjectError(
            f"invalid value for {key}: {value!r}", view.namespace, view.name
        )


# Structural layer

def from_spec(key: str, convert: Optional[Converter] = as_text, skip_blank: bool = False) -> Resolver:
    def resolve(view: ObjectView) -> Any:
        value = view.spec.get(key)
        if value is None:
            return None
        if skip_blank and not str(value).strip():
            return None
        return _convert(view, f"spec.{key}", value, convert)

    return resolve


def required_spec(key: str, convert: Optional[Converter] = as_text) -> Resolver:
    def resolve(view: ObjectView) -> Any:
        value = view.spec.get(key)
        if value is None:
            raise MalformedObjectError(
                f"missing required field spec.{key}", view.namespace, view.name
            )
        return _convert(view, f"spec.{key}", value, convert)

    return resolve


# Annotation layer

def from_annotations(keys: Sequence[str], convert: Optional[Converter] = as_text) -> Resolver:
    def resolve(view: ObjectView) -> Any:
        for key in keys:
            value = view.annotation(key)
            if value is not None:
                return _convert(view, key, value, convert)
        return None

    return resolve


# Default layer

def metadata_name(view: ObjectView) -> Optional[str]:
    return view.name.lower() if view.name else None


def metadata_namespace(view: ObjectView) -> Optional[str]:
    return view.namespace.lower() if view.namespace else None


def constant(value: Any) -> Resolver:
    def resolve(view: ObjectView) -> Any:
        return value

    return resolve


def resolve_first(view: ObjectView, chain: Iterable[Resolver]) -> Any:
    for resolver in chain:
        value = resolver(view)
        if value is not None:
            return value
    return None


def append_root_path(url: Optional[str], root_path: Optional[str]) -> Optional[str]:
    """Join a root path onto a URL with exactly one slash between them."""
    if url is None:
        return None
    if not root_path or not root_path.strip():
        return url
    base = url[:-1] if url.endswith("/") else url
    path = root_path if root_path.startswith("/") else "/" + root_path
    return base + path


# Annotation-driven field table shared by every routing source. Sources
# that can derive a URL from their own spec put that resolver ahead of the
# url chain.
ANNOTATED_FIELDS = {
    "name": (from_annotations(NAME_KEYS, lowercase), metadata_name),
    "group": (from_annotations(GROUP_KEYS, lowercase), metadata_namespace),
    "url": (from_annotations(URL_KEYS, lowercase),),
    "icon": (from_annotations(ICON_KEYS, lowercase),),
    "icon_color": (from_annotations(ICON_COLOR_KEYS, lowercase),),
    "info": (from_annotations(INFO_KEYS),),
    "target_blank": (from_annotations(TARGET_BLANK_KEYS, as_bool),),
    "location": (from_annotations(LOCATION_KEYS, as_int),),
    "enabled": (from_annotations(ENABLE_KEYS, as_bool),),
    "tags": (from_annotations(TAGS_KEYS),),
    "root_path": (from_annotations(ROOT_PATH_KEYS),),
}

ANNOTATED_INSTANCE = (from_annotations(INSTANCE_KEYS),)

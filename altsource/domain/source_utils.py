from typing import Any
from urllib.parse import quote


def strip_nulls(value: Any) -> Any:
    """
    Recursively remove keys with value None from dictionaries.

    Lists are preserved, but their elements are also cleaned.
    """
    if isinstance(value, dict):
        return {k: strip_nulls(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [strip_nulls(v) for v in value]
    return value


def is_valid_path_component(component: str) -> bool:
    """
    True if `component` is safe to join under the apps directory: non-empty,
    not hidden, no traversal and no separators.
    """
    return (
        bool(component)
        and not component.startswith(".")
        and ".." not in component
        and "/" not in component
        and "\\" not in component
    )


def join_url(base_url: str, *segments: str) -> str:
    """
    Append path segments to `base_url`, quoting each one.
    """
    quoted = "/".join(quote(segment, safe="") for segment in segments)
    return f"{base_url.rstrip('/')}/{quoted}"

import jsonpickle
from datetime import datetime, timezone
from typing import Any, Mapping

DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def local_now() -> datetime:
    """Current time in the local timezone, offset included."""
    return datetime.now().astimezone()


def sort_dict_keys(d):
    """Recursively sort dictionary keys and handle nested structures.

    Args:
        d: Data structure (dict, list, or primitive type)

    Returns:
        Sorted version of the data structure
    """
    if isinstance(d, dict):
        return {
            key: sort_dict_keys(value)
            for key, value in sorted(d.items())
        }
    elif isinstance(d, list):
        return [sort_dict_keys(item) for item in d]
    else:
        return d


def canonicalize_dict(data):
    """
    Returns a canonical JSON representation of a dictionary.

    Keys are sorted recursively so the representation stays stable
    when key order varies.
    """
    return jsonpickle.dumps(sort_dict_keys(data), unpicklable=False)


def deep_get(data: Mapping, *path: str, default: Any = None) -> Any:
    """Walk nested mappings, returning `default` on the first missing key."""
    current = data
    for key in path:
        if not isinstance(current, Mapping) or current.get(key) is None:
            return default
        current = current[key]
    return current


def parse_k8s_time(value) -> datetime:
    """Parse an RFC3339 timestamp as returned by the API server."""
    if isinstance(value, datetime):
        return value
    if not value:
        return datetime.min.replace(tzinfo=timezone.utc)
    if value[-1] == "Z":
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)

"""Reading and writing values inside nested mappings by key path."""

from __future__ import annotations

from collections.abc import MutableMapping, Sequence
from typing import Any


class KeyNotFoundError(LookupError):
    """Raised when a key on a nested path is missing."""

    def __init__(self, key: str) -> None:
        super().__init__(f"key not found: {key}")
        self.key = key


def set_nested_value(
    data: MutableMapping[Any, Any], key_path: Sequence[str], value: Any
) -> None:
    """Set ``value`` at ``key_path`` inside ``data``; ``None`` deletes the key.

    Every intermediate key must already hold a mapping.
    """
    if not key_path:
        raise ValueError("empty key path")
    *parents, last = key_path
    current = data
    for key in parents:
        child = current.get(key)
        if not isinstance(child, MutableMapping):
            raise ValueError(f"failed to set nested map for key: {key}")
        current = child
    if value is None:
        current.pop(last, None)
    else:
        current[last] = value


def get_nested_value(data: MutableMapping[Any, Any], key_path: Sequence[str]) -> Any:
    """Return the value stored at ``key_path`` inside ``data``."""
    if not key_path:
        raise ValueError("empty key path")
    current: Any = data
    for position, key in enumerate(key_path):
        if key not in current:
            raise KeyNotFoundError(key)
        value = current[key]
        if position == len(key_path) - 1:
            return value
        if not isinstance(value, MutableMapping):
            raise ValueError(f"failed to get nested map for key: {key}")
        current = value
    raise AssertionError("unreachable")
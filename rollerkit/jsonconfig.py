"""Editing JSON documents and files by dotted path."""

from __future__ import annotations

import dataclasses
import json
import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class PathValue:
    """A dotted path and the value to store there."""

    path: str
    value: Any


def _split_path(path: str) -> list[str]:
    if not path:
        raise ValueError("empty path")
    parts: list[str] = []
    current: list[str] = []
    escaped = False
    for char in path:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ".":
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    if escaped:
        current.append("\\")
    parts.append("".join(current))
    return parts


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"value of type {type(value).__name__} is not JSON serializable")


def _to_json_value(value: Any) -> Any:
    return json.loads(json.dumps(value, default=_json_default))


def _list_slot(items: list[Any], key: str, path: str) -> int:
    if key == "-1":
        items.append(None)
        return len(items) - 1
    if not (key.isascii() and key.isdigit()):
        raise ValueError(f"cannot set {path}: array index expected, got {key!r}")
    index = int(key)
    if index >= len(items):
        items.extend([None] * (index - len(items) + 1))
    return index


def set_json_path(document: Any, path: str, value: Any) -> None:
    """Store ``value`` at ``path`` inside a parsed JSON document, in place.

    Path parts are separated by dots (``\\.`` for a literal dot); numeric parts
    index arrays and ``-1`` appends. Missing objects are created.
    """
    keys = _split_path(path)
    encoded = _to_json_value(value)
    current = document
    for position, key in enumerate(keys):
        if isinstance(current, list):
            slot: Any = _list_slot(current, key, path)
            child = current[slot]
        elif isinstance(current, dict):
            slot = key
            child = current.get(slot)
        else:
            raise ValueError(
                f"cannot set {path}: {'.'.join(keys[:position]) or 'root'} "
                "is not an object or array"
            )
        if position == len(keys) - 1:
            current[slot] = encoded
            return
        if child is None:
            child = {}
            current[slot] = child
        current = child


def update_json_params(
    json_file_path: str | os.PathLike[str], params: Iterable[PathValue]
) -> None:
    """Apply every path and value in ``params`` to a JSON file."""
    path = Path(json_file_path)
    document = json.loads(path.read_text(encoding="utf-8"))
    for param in params:
        print(f"updating {param.path} to {param.value}")
        set_json_path(document, param.path, param.value)
    path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
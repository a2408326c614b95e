"""Reading and editing TOML configuration files by dotted key path."""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping, Sequence
from pathlib import Path
from typing import Any

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import Item

_MISSING = object()


def load(path: str | os.PathLike[str]) -> bytes:
    """Return the raw bytes of a TOML file."""
    return Path(path).read_bytes()


def write_toml_document(
    document: tomlkit.TOMLDocument, path: str | os.PathLike[str]
) -> None:
    """Write ``document`` to ``path``, replacing any previous content."""
    Path(path).write_text(tomlkit.dumps(document), encoding="utf-8")


def _load_document(path: str | os.PathLike[str]) -> tomlkit.TOMLDocument:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise OSError(f"failed to load {path}: {exc}") from exc
    try:
        return tomlkit.parse(text)
    except TOMLKitError as exc:
        raise ValueError(f"failed to load {path}: {exc}") from exc


def _split_key(key: str) -> list[str]:
    parts = key.split(".")
    if not key or any(not part for part in parts):
        raise ValueError(f"invalid key: {key!r}")
    return parts


def _find(document: Mapping[str, Any], parts: Sequence[str]) -> Any:
    current: Any = document
    for part in parts:
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _parent_of(
    document: MutableMapping[str, Any], parts: Sequence[str]
) -> MutableMapping[str, Any]:
    """Return the table holding the last key, creating missing tables."""
    current = document
    for part in parts[:-1]:
        if part not in current:
            current[part] = tomlkit.table()
        child = current[part]
        if not isinstance(child, MutableMapping):
            raise ValueError(f"key {part} does not hold a table")
        current = child
    return current


def _plain(value: Any) -> Any:
    return value.unwrap() if isinstance(value, Item) else value


def _check_value(key: str, value: Any, *, allow_string_lists: bool) -> None:
    if isinstance(value, (str, int, float, bool)):
        return
    if (
        allow_string_lists
        and isinstance(value, list)
        and all(isinstance(element, str) for element in value)
    ):
        return
    raise TypeError(f"unsupported type for key {key}: {type(value).__name__}")


def get_key_from_file(path: str | os.PathLike[str], key: str) -> str:
    """Return the string stored at the dotted ``key`` in a TOML file."""
    document = _load_document(path)
    value = _find(document, _split_key(key))
    if value is _MISSING:
        raise KeyError(f"key {key} does not exist")
    if not isinstance(value, str):
        raise TypeError(f"value of key {key} is not a string: {type(value).__name__}")
    return str(value)


def update_field_in_file(path: str | os.PathLike[str], key: str, value: Any) -> None:
    """Set the dotted ``key`` to ``value``, creating tables along the way.

    Accepted values are strings, integers, floats, booleans and lists of strings.
    """
    document = _load_document(path)
    value = _plain(value)
    _check_value(key, value, allow_string_lists=True)
    parts = _split_key(key)
    _parent_of(document, parts)[parts[-1]] = value
    write_toml_document(document, path)


def update_fields_in_file(path: str | os.PathLike[str], fields: Mapping[str, Any]) -> None:
    """Apply :func:`update_field_in_file` for every key and value in ``fields``."""
    for key, value in fields.items():
        update_field_in_file(path, key, value)


def remove_field_from_file(path: str | os.PathLike[str], key_path: str) -> None:
    """Delete the dotted ``key_path`` from a TOML file."""
    document = _load_document(path)
    parts = _split_key(key_path)
    if _find(document, parts) is _MISSING:
        raise KeyError(f"key {key_path} does not exist")
    del _parent_of(document, parts)[parts[-1]]
    write_toml_document(document, path)


def replace_field_in_file(
    path: str | os.PathLike[str], old_path: str, new_path: str, value: Any = None
) -> None:
    """Move the value at ``old_path`` to ``new_path``.

    When ``value`` is given it is written instead of the old value. Only
    strings, integers, floats and booleans can be written.
    """
    document = _load_document(path)
    old_parts = _split_key(old_path)
    new_parts = _split_key(new_path)

    existing = _find(document, old_parts)
    if existing is _MISSING:
        raise KeyError(f"old key {old_path} does not exist")

    writeable = _plain(existing if value is None else value)
    del _parent_of(document, old_parts)[old_parts[-1]]
    _check_value(new_path, writeable, allow_string_lists=False)
    _parent_of(document, new_parts)[new_parts[-1]] = writeable
    write_toml_document(document, path)
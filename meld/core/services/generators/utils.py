"""
Shared generator helpers — deep merge and TOML emission.

Both operate on plain JSON-like values: None, bool, int, float, str,
list and dict with string keys.
"""

from __future__ import annotations

import copy
import json
import math
from typing import Any

import tomli_w


class TomlSerializationError(ValueError):
    """Raised when a value cannot be written as TOML."""


def is_plain_object(value: Any) -> bool:
    return isinstance(value, dict)


def deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge ``overrides`` onto ``base`` and return a new dict.

    Recurses only where both sides hold a dict. Everywhere else the
    override replaces the base value outright; lists are replaced,
    never concatenated. Neither input is modified.
    """
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if is_plain_object(current) and is_plain_object(value):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def dump_json(value: Any) -> str:
    """JSON document text as written to agent settings files."""
    return json.dumps(value, indent=2, ensure_ascii=False) + "\n"


# ── TOML ────────────────────────────────────────────────────────


def serialize_toml(document: dict[str, Any]) -> str:
    """Render a dict as a TOML document with tomli_w.

    None values are skipped, and tables with nothing to emit at or
    below them are left out entirely. Everything left must be a
    string, boolean, finite number, table, or array of one scalar kind.

    Raises:
        TomlSerializationError: For non-finite numbers, mixed-type or
            nested arrays, and any other unsupported value.
    """
    return tomli_w.dumps(_prune_table(document))


def _prune_table(table: dict[str, Any]) -> dict[str, Any]:
    pruned: dict[str, Any] = {}
    for key, value in table.items():
        if value is None:
            continue
        if is_plain_object(value):
            child = _prune_table(value)
            if child:
                pruned[key] = child
        elif isinstance(value, list):
            _check_array(value)
            pruned[key] = value
        else:
            _check_scalar(value)
            pruned[key] = value
    return pruned


def _check_scalar(value: Any) -> None:
    if isinstance(value, float) and not math.isfinite(value):
        raise TomlSerializationError(f"Cannot serialize non-finite number to TOML: {value}")
    if not isinstance(value, (str, bool, int, float)):
        raise TomlSerializationError(f"Unsupported TOML value type: {type(value).__name__}")


def _array_kind(value: Any) -> str:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    raise TomlSerializationError(f"Unsupported TOML array value type: {type(value).__name__}")


def _check_array(values: list[Any]) -> None:
    kinds = {_array_kind(item) for item in values}
    if len(kinds) > 1:
        raise TomlSerializationError(
            f"TOML arrays must not mix value types: {', '.join(sorted(kinds))}"
        )
    for item in values:
        _check_scalar(item)

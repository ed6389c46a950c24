"""Defensive field parsers for dashboard rows.

Dashboard rows come from aggregate queries whose JSON columns may arrive as
decoded objects, as JSON text, or as garbage. These helpers never raise; they
fall back to a caller-supplied default and log a warning instead.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Callable, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Leading decimal number, same prefix rule as a lenient float parser:
# "12.5 hrs" -> 12.5, "abc" -> no match.
_LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_json_field(field: Any, fallback: T) -> T:
    """Decode a JSON column value, falling back on anything unexpected.

    Rules:
    - ``None`` -> fallback
    - ``dict`` or ``list`` -> returned unchanged
    - blank string or the literal ``"null"`` -> fallback
    - other strings are decoded; invalid JSON -> fallback
    - when ``fallback`` is a list and the decoded value is not -> fallback
    - any other type -> fallback
    """
    if field is None:
        return fallback

    if isinstance(field, (dict, list)):
        return field  # type: ignore[return-value]

    if isinstance(field, str):
        if field.strip() == "" or field == "null":
            return fallback
        try:
            parsed = json.loads(field)
        except ValueError as e:
            preview = field[:100] + ("..." if len(field) > 100 else "")
            logger.warning(f"Error parsing JSON field: field={preview!r} error={e}")
            return fallback
        if isinstance(fallback, list) and not isinstance(parsed, list):
            logger.warning(f"Expected array but got non-array from JSON: {type(parsed).__name__}")
            return fallback
        return parsed

    logger.warning(f"Unexpected field type: {type(field).__name__}")
    return fallback


def safe_number(value: Any, fallback: float = 0) -> float:
    """Coerce a column value to a number.

    Finite ints and floats pass through; numeric strings are parsed by their
    leading number; booleans, NaN and everything else give ``fallback``.
    """
    if isinstance(value, bool):
        return fallback
    if isinstance(value, (int, float)):
        return fallback if isinstance(value, float) and math.isnan(value) else value
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return fallback
        parsed = float(match.group(0))
        return fallback if math.isnan(parsed) else parsed
    return fallback


def strict_number(value: Any, fallback: float = 0) -> float:
    """Accept only real numeric values, without string coercion."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return fallback
    return fallback if isinstance(value, float) and math.isnan(value) else value


def keep_items(items: Iterable[Any], predicate: Callable[[dict], bool]) -> list[dict]:
    """Keep the dict items that satisfy ``predicate``; non-dicts are dropped."""
    return [item for item in items if isinstance(item, dict) and predicate(item)]


def has_keys(*keys: str) -> Callable[[dict], bool]:
    """Predicate: every key is present with a truthy value."""
    return lambda item: all(item.get(key) for key in keys)

from __future__ import annotations
import math
from collections.abc import Mapping
from typing import Any


def is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def strip_empty(value: Any) -> Any:
    """Drop mapping keys whose value is None or NaN, at every depth.

    List elements are stripped in place but never removed; only mapping keys
    are dropped.
    """
    if isinstance(value, Mapping):
        return {k: strip_empty(v) for k, v in value.items() if not is_empty(v)}
    if isinstance(value, list):
        return [strip_empty(item) for item in value]
    if isinstance(value, tuple):
        return tuple(strip_empty(item) for item in value)
    return value


def empty_or_str(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def nan_to_none(value: Any) -> Any:
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value

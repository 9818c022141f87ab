from __future__ import annotations
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

_UPPER = re.compile(r"[A-Z]")
_UNDERSCORE_LETTER = re.compile(r"_([a-zA-Z])")


@dataclass
class Multipart:
    """A multipart/binary request body. Never rewritten by the key codec."""

    files: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)


def camel_to_snake(key: str) -> str:
    return _UPPER.sub(lambda m: f"_{m.group(0).lower()}", key)


def snake_to_camel(key: str) -> str:
    return _UNDERSCORE_LETTER.sub(lambda m: m.group(1).upper(), key)


def map_keys(value: Any, func: Callable[[str], str]) -> Any:
    """Rewrite every mapping key in a JSON-like tree with ``func``."""
    if isinstance(value, (Multipart, bytes, bytearray)):
        return value
    if isinstance(value, Mapping):
        return {
            (func(k) if isinstance(k, str) else k): map_keys(v, func)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [map_keys(item, func) for item in value]
    if isinstance(value, tuple):
        return tuple(map_keys(item, func) for item in value)
    return value


def snake_keys(value: Any) -> Any:
    return map_keys(value, camel_to_snake)


def camel_keys(value: Any) -> Any:
    return map_keys(value, snake_to_camel)

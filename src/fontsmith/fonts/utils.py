"""Shared helpers for font handling."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import re
from typing import Any

from slugify import slugify


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")
_UNSAFE_KEY_CHARS = re.compile(r"[^a-z0-9_\-]")


def kebab_case(name: str) -> str:
    """Convert ``fontFamily`` style names to ``font-family``."""
    return _CAMEL_BOUNDARY.sub(r"-\1", name).lower()


def kebab_keys(descriptor: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``descriptor`` using kebab-case keys.

    When both spellings of a property are present the kebab-case one wins.
    """
    converted: dict[str, Any] = {}
    for key, value in descriptor.items():
        if not isinstance(key, str):
            continue
        canonical = kebab_case(key)
        if canonical in converted and canonical != key:
            continue
        converted[canonical] = value
    return converted


def family_slug(name: str) -> str:
    """Return the lowercase, hyphenated identifier used to index a family."""
    return slugify(name)


def sanitize_key(value: str) -> str:
    """Lowercase ``value`` and drop anything besides ``a-z``, ``0-9``, ``_`` and ``-``."""
    return _UNSAFE_KEY_CHARS.sub("", value.lower())


def dedupe_preserve_order(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        ordered.append(value)
    return ordered


def is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


__all__ = [
    "dedupe_preserve_order",
    "family_slug",
    "is_non_empty_string",
    "kebab_case",
    "kebab_keys",
    "sanitize_key",
]

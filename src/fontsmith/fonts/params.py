"""Lenient normalisation of descriptors handed to providers.

Unlike :class:`~fontsmith.fonts.schema.SchemaValidator`, which rejects bad
input at registration time, the normaliser never fails: unknown properties
are dropped, ``src`` entries are ordered by format preference and invalid
``font-display``/``font-style``/``font-weight`` values fall back to defaults.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import PurePosixPath
from typing import Any
from urllib.parse import urlparse

from fontsmith.fonts.schema import (
    is_font_display_value,
    is_font_style_value,
    is_font_weight_value,
)
from fontsmith.fonts.utils import kebab_keys


DEFAULT_PARAMS: dict[str, Any] = {
    "font-weight": "400",
    "font-style": "normal",
    "font-display": "fallback",
    "src": [],
}

BASE_FONT_FACE_PROPERTIES: tuple[str, ...] = (
    "ascent-override",
    "descent-override",
    "font-display",
    "font-family",
    "font-stretch",
    "font-style",
    "font-weight",
    "font-variant",
    "font-feature-settings",
    "font-variation-settings",
    "line-gap-override",
    "size-adjust",
    "src",
    "unicode-range",
)

# Preferred order; the key is the file extension.
SOURCE_FORMATS: tuple[tuple[str, str], ...] = (
    ("woff2", "woff2"),
    ("woff", "woff"),
    ("ttf", "truetype"),
    ("eot", "embedded-opentype"),
    ("otf", "opentype"),
)


def source_extension(url: str) -> str:
    """Return the lowercase file extension of a source URL, ignoring query strings."""
    path = urlparse(url.strip()).path
    return PurePosixPath(path).suffix.lower().lstrip(".")


def order_sources(sources: str | Iterable[str]) -> list[dict[str, str]]:
    """Turn raw ``src`` values into ``{"url", "format"}`` entries in preference order.

    Data URIs come first in their original order, then woff2, woff, truetype,
    embedded-opentype and opentype. Entries with any other extension are dropped.
    """
    if isinstance(sources, str):
        sources = [sources]
    data_entries: list[dict[str, str]] = []
    by_extension: dict[str, list[str]] = {}
    for url in sources:
        if not isinstance(url, str) or not url.strip():
            continue
        if url.strip().startswith("data:"):
            data_entries.append({"url": url, "format": "data"})
            continue
        by_extension.setdefault(source_extension(url), []).append(url)

    ordered = list(data_entries)
    for extension, css_format in SOURCE_FORMATS:
        for url in by_extension.get(extension, ()):
            ordered.append({"url": url, "format": css_format})
    return ordered


class ParamNormalizer:
    """Apply defaults, whitelist properties, order sources, and clamp enum values."""

    def __init__(self, api_params: Iterable[str] = ()) -> None:
        self.api_params = tuple(api_params)

    @property
    def whitelist(self) -> tuple[str, ...]:
        return BASE_FONT_FACE_PROPERTIES + self.api_params

    def normalize(self, descriptor: Mapping[str, Any]) -> dict[str, Any]:
        params = {**DEFAULT_PARAMS, **kebab_keys(descriptor)}
        allowed = set(self.whitelist)
        params = {key: value for key, value in params.items() if key in allowed}

        sources = params.get("src")
        if not isinstance(sources, (str, list, tuple)):
            sources = []
        params["src"] = order_sources(sources) if sources else []

        if not is_font_display_value(params.get("font-display")):
            params["font-display"] = DEFAULT_PARAMS["font-display"]
        if not is_font_style_value(params.get("font-style")):
            params["font-style"] = DEFAULT_PARAMS["font-style"]
        weight = params.get("font-weight")
        if not is_font_weight_value(weight):
            params["font-weight"] = DEFAULT_PARAMS["font-weight"]
        elif isinstance(weight, int):
            params["font-weight"] = str(weight)
        return params

    __call__ = normalize


__all__ = [
    "BASE_FONT_FACE_PROPERTIES",
    "DEFAULT_PARAMS",
    "SOURCE_FORMATS",
    "ParamNormalizer",
    "order_sources",
    "source_extension",
]

"""Webfont providers: locally hosted files and the Google Fonts API."""

from fontsmith.fonts.providers.base import (
    NEGATIVE_CACHE_TTL,
    PreconnectHint,
    Provider,
    RemoteProvider,
)
from fontsmith.fonts.providers.google import GoogleProvider
from fontsmith.fonts.providers.local import LocalProvider
from fontsmith.fonts.providers.registry import ProviderRegistry


__all__ = [
    "NEGATIVE_CACHE_TTL",
    "GoogleProvider",
    "LocalProvider",
    "PreconnectHint",
    "Provider",
    "ProviderRegistry",
    "RemoteProvider",
]

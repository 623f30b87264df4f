"""Lookup table of provider instances keyed by provider id."""

from __future__ import annotations

from collections.abc import Iterator
import logging

from fontsmith.fonts.providers.base import Provider


logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Hold one provider instance per id; later registrations replace earlier ones."""

    def __init__(self) -> None:
        self._providers: dict[str, Provider] = {}

    def register(self, provider: Provider) -> bool:
        """Register ``provider``; return ``False`` when it has no usable id."""
        if not isinstance(provider, Provider) or not provider.id:
            logger.warning("Ignoring webfont provider without an id: %r", provider)
            return False
        self._providers[provider.id] = provider
        return True

    def get(self, provider_id: str) -> Provider | None:
        return self._providers.get(provider_id)

    def get_all_registered(self) -> dict[str, Provider]:
        return dict(self._providers)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __iter__(self) -> Iterator[Provider]:
        return iter(self._providers.values())


__all__ = ["ProviderRegistry"]

"""Registry of webfont descriptors indexed by family, style, and weight."""

from __future__ import annotations

from collections.abc import Mapping
import copy
import logging
from types import MappingProxyType
from typing import Any

from fontsmith.fonts.schema import SchemaValidator
from fontsmith.fonts.utils import family_slug, is_non_empty_string, kebab_keys


logger = logging.getLogger(__name__)

# Applied to absent properties before validation.
REGISTRY_DEFAULTS: dict[str, str] = {
    "font-style": "normal",
    "font-weight": "400",
    "font-display": "fallback",
}

_LEADING_KEYS = ("provider", "font-family", "font-style", "font-weight", "font-display")


def registry_key(descriptor: Mapping[str, Any]) -> str:
    """Return ``<family-slug>.<style>.<weight>`` for a normalised descriptor."""
    return ".".join(
        (
            family_slug(descriptor["font-family"]),
            str(descriptor["font-style"]),
            str(descriptor["font-weight"]),
        )
    )


class FontRegistry:
    """Store validated descriptors and index them by provider and family.

    Registering the same family/style/weight triple again replaces the earlier
    descriptor, whatever its other properties.
    """

    def __init__(self, validator: SchemaValidator | None = None) -> None:
        self.validator = validator or SchemaValidator()
        self._registry: dict[str, dict[str, Any]] = {}
        self._by_provider: dict[str, list[str]] = {}
        self._by_family: dict[str, list[str]] = {}

    def register(self, descriptor: Mapping[str, Any]) -> str:
        """Validate and store ``descriptor``; return its key or ``""`` when invalid."""
        if not isinstance(descriptor, Mapping):
            self.validator.emitter.notice("Webfont must be a mapping of CSS properties.")
            return ""
        webfont = self._with_defaults(kebab_keys(descriptor))
        if not self.validator.validate(webfont):
            return ""

        webfont = self._normalise(webfont)
        key = registry_key(webfont)
        previous = self._registry.get(key)
        if previous is not None and previous["provider"] != webfont["provider"]:
            self._by_provider[previous["provider"]].remove(key)

        self._registry[key] = webfont
        self._index(self._by_provider, webfont["provider"], key)
        self._index(self._by_family, family_slug(webfont["font-family"]), key)
        logger.debug("Registered webfont %s (%s)", key, webfont["provider"])
        return key

    def get_registry(self) -> Mapping[str, Mapping[str, Any]]:
        """Return a read-only snapshot of every registered descriptor."""
        return MappingProxyType(copy.deepcopy(self._registry))

    def get(self, key: str) -> dict[str, Any] | None:
        entry = self._registry.get(key)
        return copy.deepcopy(entry) if entry is not None else None

    def get_by_provider(self, provider_id: Any) -> dict[str, dict[str, Any]]:
        """Return descriptors registered for ``provider_id`` (empty when unknown)."""
        if not is_non_empty_string(provider_id):
            return {}
        return self._collect(self._by_provider.get(provider_id, ()))

    def get_by_font_family(self, font_family: Any) -> dict[str, dict[str, Any]]:
        """Return descriptors for a family given either its name or its slug."""
        if not is_non_empty_string(font_family):
            return {}
        return self._collect(self._by_family.get(family_slug(font_family), ()))

    def providers(self) -> list[str]:
        """Return provider ids that have at least one registered descriptor."""
        return [provider for provider, keys in self._by_provider.items() if keys]

    def __contains__(self, key: object) -> bool:
        return key in self._registry

    def __len__(self) -> int:
        return len(self._registry)

    # ------------------------------------------------------------------ helpers

    @staticmethod
    def _with_defaults(webfont: dict[str, Any]) -> dict[str, Any]:
        for prop, value in REGISTRY_DEFAULTS.items():
            if prop not in webfont or webfont[prop] is None:
                webfont[prop] = value
        return webfont

    @staticmethod
    def _normalise(webfont: dict[str, Any]) -> dict[str, Any]:
        if isinstance(webfont["font-weight"], int):
            webfont["font-weight"] = str(webfont["font-weight"])
        ordered = {key: webfont[key] for key in _LEADING_KEYS}
        ordered.update(
            (key, copy.deepcopy(value))
            for key, value in webfont.items()
            if key not in ordered
        )
        return ordered

    @staticmethod
    def _index(index: dict[str, list[str]], bucket: str, key: str) -> None:
        keys = index.setdefault(bucket, [])
        if key not in keys:
            keys.append(key)

    def _collect(self, keys: Any) -> dict[str, dict[str, Any]]:
        return {key: copy.deepcopy(self._registry[key]) for key in keys}


__all__ = ["REGISTRY_DEFAULTS", "FontRegistry", "registry_key"]

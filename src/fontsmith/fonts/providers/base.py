"""Provider abstractions turning descriptors into ``@font-face`` CSS."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
import hashlib
import logging
from typing import Any, ClassVar

from fontsmith.core.config import DEFAULT_USER_AGENT, MONTH_IN_SECONDS
from fontsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from fontsmith.core.exceptions import FetchError
from fontsmith.core.http import Fetcher
from fontsmith.fonts.cache import TransientStore
from fontsmith.fonts.params import ParamNormalizer


logger = logging.getLogger(__name__)

NEGATIVE_CACHE_TTL = 60


@dataclass(frozen=True, slots=True)
class PreconnectHint:
    """Origin worth opening a connection to before font requests start."""

    href: str
    crossorigin: bool = False

    def to_html(self) -> str:
        crossorigin = " crossorigin" if self.crossorigin else ""
        return f'<link rel="preconnect" href="{self.href}"{crossorigin}>'


class Provider(ABC):
    """Base class for webfont providers.

    Subclasses set ``id`` (matched against the descriptor's ``provider``
    field) and implement :meth:`get_fonts_collection_css`.
    """

    id: ClassVar[str] = ""
    root_url: ClassVar[str] = ""
    preconnect_urls: ClassVar[tuple[PreconnectHint, ...]] = ()
    # Parameters consumed by the provider API rather than written to @font-face.
    api_params: ClassVar[tuple[str, ...]] = ()

    def __init__(self, *, emitter: DiagnosticEmitter | None = None) -> None:
        self.emitter = emitter or NullEmitter()
        self.normalizer = ParamNormalizer(self.api_params)

    def get_preconnect_urls(self) -> tuple[PreconnectHint, ...]:
        return self.preconnect_urls

    def get_validated_params(self, params: Mapping[str, Any]) -> dict[str, Any]:
        """Return the leniently normalised version of ``params``."""
        return self.normalizer.normalize(params)

    @abstractmethod
    def get_fonts_collection_css(self, fonts: Sequence[Mapping[str, Any]]) -> str:
        """Return the CSS for every descriptor in ``fonts``."""


class RemoteProvider(Provider):
    """Provider whose CSS is generated by a remote API and cached locally."""

    def __init__(
        self,
        *,
        fetcher: Fetcher,
        store: TransientStore,
        emitter: DiagnosticEmitter | None = None,
        ttl: int = MONTH_IN_SECONDS,
        negative_ttl: int = NEGATIVE_CACHE_TTL,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        super().__init__(emitter=emitter)
        self.fetcher = fetcher
        self.store = store
        self.ttl = ttl
        self.negative_ttl = negative_ttl
        self.user_agent = user_agent

    def cache_key(self, url: str) -> str:
        digest = hashlib.md5(url.encode("utf-8"), usedforsecurity=False).hexdigest()
        return f"{self.id}_fonts_{digest}"

    def get_cached_remote_styles(self, url: str) -> str:
        """Return the CSS for ``url``, fetching and caching it on a miss.

        A failed fetch caches an empty string for ``negative_ttl`` seconds so a
        failing upstream is not hammered on every request.
        """
        key = self.cache_key(url)
        cached = self.store.get(key)
        if cached is not None:
            self.emitter.event("font_css_cached", {"url": url, "empty": cached == ""})
            return cached

        css = self.get_remote_styles(url)
        if not css:
            self.store.set(key, "", self.negative_ttl)
            return ""

        self.store.set(key, css, self.ttl)
        return css

    def get_remote_styles(self, url: str) -> str:
        """Fetch ``url`` and return its body, or ``""`` on any failure."""
        try:
            response = self.fetcher.fetch(url, user_agent=self.user_agent)
        except FetchError as exc:
            self.emitter.warning(f"Unable to fetch font stylesheet '{url}'.", exc)
            return ""
        self.emitter.event("font_css_fetch", {"url": url, "status": response.status})
        if not response.ok:
            self.emitter.warning(
                f"Font stylesheet request '{url}' returned HTTP {response.status}."
            )
            return ""
        if response.content_type != "text/css":
            self.emitter.warning(
                f"Font stylesheet request '{url}' returned "
                f"'{response.content_type or 'no content type'}' instead of text/css."
            )
            return ""
        return response.text


def flatten_variation_settings(value: Any) -> Any:
    """Render ``{"wght": 400, "wdth": 100}`` as ``"wght 400, wdth 100"``."""
    if isinstance(value, Mapping):
        return ", ".join(f"{axis} {setting}" for axis, setting in value.items())
    if isinstance(value, (list, tuple)):
        return ", ".join(
            " ".join(str(part) for part in item) if isinstance(item, (list, tuple)) else str(item)
            for item in value
        )
    return value


def collect_valid(
    provider: Provider, fonts: Iterable[Mapping[str, Any]]
) -> list[dict[str, Any]]:
    """Normalise ``fonts`` for ``provider``, skipping entries without a family."""
    prepared: list[dict[str, Any]] = []
    for font in fonts:
        if not isinstance(font, Mapping):
            logger.debug("Skipping malformed webfont entry: %r", font)
            continue
        params = provider.get_validated_params(font)
        family = params.get("font-family")
        if not isinstance(family, str) or not family.strip():
            logger.debug("Skipping webfont without a font-family: %r", font)
            continue
        prepared.append(params)
    return prepared


__all__ = [
    "NEGATIVE_CACHE_TTL",
    "PreconnectHint",
    "Provider",
    "RemoteProvider",
    "collect_valid",
    "flatten_variation_settings",
]

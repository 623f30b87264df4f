"""Explicit owner of the webfont registries, providers, and stylesheet queue."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import html
import logging
from pathlib import Path
from typing import Any

from fontsmith.core.config import FontsConfig
from fontsmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from fontsmith.core.filesystem import Filesystem, LocalFilesystem
from fontsmith.core.http import Fetcher, HttpFetcher
from fontsmith.core.user_dir import UserDirs
from fontsmith.fonts.cache import JsonFileStore, TransientStore
from fontsmith.fonts.mirror import DeferredDownloads, LocalMirror, PendingDownload
from fontsmith.fonts.params import order_sources, source_extension
from fontsmith.fonts.providers import (
    GoogleProvider,
    LocalProvider,
    Provider,
    ProviderRegistry,
    RemoteProvider,
)
from fontsmith.fonts.registry import FontRegistry
from fontsmith.fonts.schema import SchemaValidator
from fontsmith.fonts.stylesheets import StyleQueue, StylesheetQueue


logger = logging.getLogger(__name__)

DEFAULT_HANDLE = "webfonts"

FONT_MIME_TYPES = {
    "woff2": "font/woff2",
    "woff": "font/woff",
    "ttf": "font/ttf",
    "otf": "font/otf",
    "eot": "application/vnd.ms-fontobject",
}


class WebfontsContext:
    """Hold every piece of webfont state for one process.

    The context is built once and handed to call sites. Downloads discovered
    while generating styles are only executed by :meth:`shutdown`, after the
    caller has written its output.
    """

    def __init__(
        self,
        *,
        config: FontsConfig | None = None,
        fetcher: Fetcher | None = None,
        store: TransientStore | None = None,
        filesystem: Filesystem | None = None,
        styles: StylesheetQueue | None = None,
        emitter: DiagnosticEmitter | None = None,
        user_dirs: UserDirs | None = None,
        register_default_providers: bool = True,
    ) -> None:
        self.config = config or FontsConfig()
        self.emitter = emitter or LoggingEmitter()
        self.fetcher = fetcher or HttpFetcher(
            timeout=self.config.timeout, user_agent=self.config.user_agent
        )
        self.user_dirs = user_dirs or UserDirs.resolve()
        self.store = (
            store
            if store is not None
            else JsonFileStore(self.config.cache_file or self.user_dirs.cache_file)
        )
        self.filesystem = filesystem or LocalFilesystem()
        self.styles = styles if styles is not None else StyleQueue()
        self.registry = FontRegistry(SchemaValidator(self.emitter))
        self.providers = ProviderRegistry()
        self.deferred = DeferredDownloads()

        content_dir = self.config.content_dir or self.user_dirs.content_dir
        self.mirror = LocalMirror(
            content_dir=Path(content_dir),
            content_url=self.config.content_url,
            fonts_dirname=self.config.fonts_dirname,
            fetcher=self.fetcher,
            store=self.store,
            filesystem=self.filesystem,
            deferred=self.deferred,
            emitter=self.emitter,
        )

        if register_default_providers:
            self.register_provider(
                LocalProvider(base_url=self.config.local_base_url, emitter=self.emitter)
            )
            self.register_provider(
                GoogleProvider(
                    fetcher=self.fetcher,
                    store=self.store,
                    emitter=self.emitter,
                    ttl=self.config.remote_ttl,
                    negative_ttl=self.config.negative_ttl,
                    user_agent=self.config.user_agent,
                )
            )

    def __enter__(self) -> WebfontsContext:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.shutdown()

    # ------------------------------------------------------------------ registration

    def register_webfont(self, descriptor: Mapping[str, Any]) -> str:
        """Register one descriptor and return its key, ``""`` when rejected."""
        return self.registry.register(descriptor)

    def register_webfonts(self, descriptors: Iterable[Mapping[str, Any]]) -> list[str]:
        """Register a collection; the result keeps one key (or ``""``) per entry."""
        return [self.register_webfont(descriptor) for descriptor in descriptors]

    def register_provider(self, provider: Provider) -> bool:
        return self.providers.register(provider)

    def get_providers(self) -> dict[str, Provider]:
        return self.providers.get_all_registered()

    def get_registered_webfonts(self) -> Mapping[str, Mapping[str, Any]]:
        return self.registry.get_registry()

    def get_webfonts_by_provider(self, provider_id: str) -> dict[str, dict[str, Any]]:
        return self.registry.get_by_provider(provider_id)

    def get_webfonts_by_font_family(self, font_family: str) -> dict[str, dict[str, Any]]:
        return self.registry.get_by_font_family(font_family)

    # ------------------------------------------------------------------ output

    def _providers_in_use(self) -> list[tuple[Provider, list[dict[str, Any]]]]:
        in_use: list[tuple[Provider, list[dict[str, Any]]]] = []
        for provider_id in self.registry.providers():
            provider = self.providers.get(provider_id)
            if provider is None:
                self.emitter.warning(f"Webfont provider '{provider_id}' is not registered.")
                continue
            fonts = list(self.registry.get_by_provider(provider_id).values())
            in_use.append((provider, fonts))
        return in_use

    def generate_styles(self) -> str:
        """Return the ``@font-face`` CSS of every registered webfont."""
        styles = ""
        for provider, fonts in self._providers_in_use():
            css = provider.get_fonts_collection_css(fonts)
            if css and isinstance(provider, RemoteProvider):
                css = self.mirror.get_css(css)
            styles += css
        return styles

    def enqueue_webfonts(
        self, handle: str = DEFAULT_HANDLE, *, version: str | None = None, media: str = "all"
    ) -> bool:
        """Publish the generated CSS as inline styles of ``handle`` and enqueue it."""
        styles = self.generate_styles()
        if not styles:
            logger.debug("No webfont styles to enqueue.")
            return False
        if not self.styles.is_(handle, "registered"):
            self.styles.register(handle, None, (), version, media)
        self.styles.add_inline(handle, styles)
        return self.styles.enqueue(handle)

    def dequeue(self, handle: str = DEFAULT_HANDLE) -> None:
        self.styles.dequeue(handle)

    def deregister(self, handle: str = DEFAULT_HANDLE) -> None:
        self.styles.deregister(handle)

    def is_(self, handle: str = DEFAULT_HANDLE, list_: str = "enqueued") -> bool:
        return self.styles.is_(handle, list_)

    def preconnect_links(self) -> list[str]:
        """Return ``<link rel="preconnect">`` tags for the providers in use."""
        links: list[str] = []
        seen: set[str] = set()
        for provider, _fonts in self._providers_in_use():
            for hint in provider.get_preconnect_urls():
                if hint.href in seen:
                    continue
                seen.add(hint.href)
                links.append(hint.to_html())
        return links

    def preload_links(self) -> list[str]:
        """Return ``<link rel="preload">`` tags for descriptors flagged with ``preload``."""
        links: list[str] = []
        for descriptor in self.registry.get_registry().values():
            if descriptor.get("preload") is not True:
                continue
            sources = order_sources(descriptor.get("src") or [])
            if not sources or sources[0]["format"] == "data":
                continue
            url = sources[0]["url"]
            provider = self.providers.get(descriptor["provider"])
            if isinstance(provider, LocalProvider):
                url = provider.resolve_url(url)
            mime = FONT_MIME_TYPES.get(source_extension(url), "")
            links.append(
                f'<link rel="preload" href="{html.escape(url, quote=True)}" '
                f'as="font" type="{mime}" crossorigin>'
            )
        return links

    def render_head(self) -> str:
        """Return the HTML fragment to place in a document ``<head>``."""
        parts = [*self.preconnect_links(), *self.preload_links()]
        rendered = self.styles.render() if isinstance(self.styles, StyleQueue) else ""
        if rendered:
            parts.append(rendered)
        return "\n".join(parts)

    # ------------------------------------------------------------------ lifecycle

    def run_deferred(self) -> list[PendingDownload]:
        """Execute queued font downloads."""
        return self.mirror.run_deferred()

    def shutdown(self) -> list[PendingDownload]:
        """End of lifecycle: drain the deferred download queue."""
        completed = self.run_deferred()
        if completed:
            logger.debug("Downloaded %d font file(s).", len(completed))
        return completed


def build_context(config: FontsConfig | None = None, **kwargs: Any) -> WebfontsContext:
    """Create a :class:`WebfontsContext` with the default capabilities."""
    return WebfontsContext(config=config, **kwargs)


__all__ = [
    "DEFAULT_HANDLE",
    "FONT_MIME_TYPES",
    "WebfontsContext",
    "build_context",
]

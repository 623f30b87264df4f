from __future__ import annotations

from pathlib import Path

import pytest

from fontsmith.core.config import FontsConfig
from fontsmith.core.diagnostics import RecordingEmitter
from fontsmith.core.http import FetchResponse
from fontsmith.core.user_dir import UserDirs
from fontsmith.fonts.cache import JsonFileStore, MemoryStore
from fontsmith.fonts.context import WebfontsContext, build_context
from fontsmith.fonts.mirror import DOWNLOADED_FILES_KEY
from fontsmith.fonts.providers import GoogleProvider, LocalProvider


GOOGLE_URL = "https://fonts.googleapis.com/css2?family=Open+Sans:wght@400&display=fallback"
FONT_URL = "https://fonts.gstatic.com/s/opensans/v40/os.woff2"
GOOGLE_CSS = (
    "@font-face {\n"
    "  font-family: 'Open Sans';\n"
    "  font-style: normal;\n"
    "  font-weight: 400;\n"
    f"  src: url({FONT_URL}) format('woff2');\n"
    "}\n"
)


class FakeFetcher:
    def __init__(self) -> None:
        self.responses = {
            GOOGLE_URL: FetchResponse(
                status=200, body=GOOGLE_CSS.encode(), headers={"content-type": "text/css"}
            ),
            FONT_URL: FetchResponse(status=200, body=b"wOF2"),
        }
        self.calls: list[str] = []

    def fetch(self, url: str, *, user_agent: str | None = None) -> FetchResponse:
        self.calls.append(url)
        return self.responses.get(url, FetchResponse(status=404, body=b""))


@pytest.fixture
def context(tmp_path: Path) -> WebfontsContext:
    config = FontsConfig(
        content_dir=tmp_path / "content",
        content_url="/",
        local_base_url="https://site.example/assets",
    )
    return WebfontsContext(
        config=config,
        fetcher=FakeFetcher(),
        store=MemoryStore(),
        emitter=RecordingEmitter(),
    )


def _open_sans() -> dict[str, str]:
    return {"provider": "google", "fontFamily": "Open Sans", "fontWeight": "400"}


def _inter(**overrides) -> dict:
    descriptor = {
        "provider": "local",
        "font-family": "Inter",
        "src": ["https://cdn.example/inter.ttf", "https://cdn.example/inter.woff2"],
    }
    descriptor.update(overrides)
    return descriptor


def test_default_providers_are_registered(context: WebfontsContext) -> None:
    providers = context.get_providers()

    assert set(providers) == {"local", "google"}
    assert isinstance(providers["local"], LocalProvider)
    assert isinstance(providers["google"], GoogleProvider)
    assert providers["local"].base_url == "https://site.example/assets"


def test_register_webfonts_returns_key_per_entry(context: WebfontsContext) -> None:
    keys = context.register_webfonts([_open_sans(), {"fontFamily": "No Provider"}, _inter()])

    assert keys == ["open-sans.normal.400", "", "inter.normal.400"]
    assert set(context.get_registered_webfonts()) == {"open-sans.normal.400", "inter.normal.400"}
    assert context.emitter.notices == ["Webfont provider must be a non-empty string."]


def test_generate_styles_mirrors_remote_files_after_shutdown(
    context: WebfontsContext, tmp_path: Path
) -> None:
    context.register_webfont(_open_sans())

    before = context.generate_styles()
    assert FONT_URL in before

    completed = context.shutdown()
    target = tmp_path / "content" / "fonts" / "open-sans" / "os.woff2"
    assert [task.destination for task in completed] == [target]
    assert target.read_bytes() == b"wOF2"

    after = context.generate_styles()
    assert FONT_URL not in after
    assert "url(/fonts/open-sans/os.woff2)" in after
    assert context.store.get(DOWNLOADED_FILES_KEY) == {FONT_URL: str(target)}
    # The remote stylesheet itself was fetched once and then served from cache.
    assert context.fetcher.calls.count(GOOGLE_URL) == 1


def test_local_styles_are_not_mirrored(context: WebfontsContext) -> None:
    context.register_webfont(_inter())

    css = context.generate_styles()

    assert "url('https://cdn.example/inter.woff2') format('woff2')" in css
    assert len(context.deferred) == 0


def test_unknown_provider_is_reported(context: WebfontsContext) -> None:
    context.register_webfont(_inter(provider="typekit"))

    assert context.generate_styles() == ""
    assert context.emitter.warnings == ["Webfont provider 'typekit' is not registered."]


def test_enqueue_publishes_inline_styles(context: WebfontsContext) -> None:
    assert context.enqueue_webfonts() is False

    context.register_webfont(_inter())
    assert context.enqueue_webfonts() is True
    assert context.is_("webfonts")
    assert context.is_("webfonts", "registered")

    head = context.render_head()
    assert '<style id="webfonts-inline-css">' in head
    assert "font-family:Inter;" in head

    context.dequeue()
    assert not context.is_("webfonts")
    context.deregister()
    assert not context.is_("webfonts", "registered")


def test_preconnect_links_only_for_providers_in_use(context: WebfontsContext) -> None:
    context.register_webfont(_inter())
    assert context.preconnect_links() == []

    context.register_webfont(_open_sans())
    assert context.preconnect_links() == [
        '<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>',
        '<link rel="preconnect" href="https://fonts.googleapis.com">',
    ]


def test_preload_links_use_preferred_source(context: WebfontsContext) -> None:
    context.register_webfont(_inter(preload=True))
    context.register_webfont(
        {
            "provider": "local",
            "font-family": "Mono",
            "src": "file:./fonts/mono.ttf",
            "preload": True,
        }
    )
    context.register_webfont(
        {
            "provider": "local",
            "font-family": "Embedded",
            "src": "data:font/woff2;base64,AAAA",
            "preload": True,
        }
    )
    context.register_webfont(_inter(**{"font-family": "Lazy"}))

    assert context.preload_links() == [
        '<link rel="preload" href="https://cdn.example/inter.woff2" as="font" '
        'type="font/woff2" crossorigin>',
        '<link rel="preload" href="https://site.example/assets/fonts/mono.ttf" as="font" '
        'type="font/ttf" crossorigin>',
    ]


def test_context_manager_drains_downloads(tmp_path: Path) -> None:
    config = FontsConfig(content_dir=tmp_path / "content")
    with build_context(config, fetcher=FakeFetcher(), store=MemoryStore()) as ctx:
        ctx.register_webfont(_open_sans())
        ctx.generate_styles()
        assert len(ctx.deferred) == 1

    assert len(ctx.deferred) == 0
    assert (tmp_path / "content" / "fonts" / "open-sans" / "os.woff2").exists()


def test_providers_can_be_skipped(tmp_path: Path) -> None:
    ctx = WebfontsContext(
        config=FontsConfig(content_dir=tmp_path),
        fetcher=FakeFetcher(),
        store=MemoryStore(),
        register_default_providers=False,
    )

    assert ctx.get_providers() == {}
    assert ctx.register_provider(LocalProvider()) is True
    assert list(ctx.get_providers()) == ["local"]


def test_default_locations_come_from_user_dirs(tmp_path: Path) -> None:
    dirs = UserDirs(root=tmp_path / "home", cache_root=tmp_path / "cache")

    ctx = WebfontsContext(fetcher=FakeFetcher(), user_dirs=dirs)

    assert isinstance(ctx.store, JsonFileStore)
    assert ctx.store.path == tmp_path / "cache" / "transients.json"
    assert ctx.mirror.fonts_dir == tmp_path / "home" / "content" / "fonts"
    assert not dirs.root.exists()

from __future__ import annotations

from fontsmith.fonts.providers import LocalProvider, ProviderRegistry
from fontsmith.fonts.providers.local import quote_family


def test_quote_family_only_quotes_unquoted_multiword_names() -> None:
    assert quote_family("Open Sans") == '"Open Sans"'
    assert quote_family("Inter") == "Inter"
    assert quote_family("'Open Sans'") == "'Open Sans'"


def test_local_css_lists_local_then_ordered_urls() -> None:
    provider = LocalProvider(base_url="https://example.com/assets/")
    css = provider.get_fonts_collection_css(
        [
            {
                "provider": "local",
                "font-family": "Open Sans",
                "font-style": "normal",
                "font-weight": "400",
                "src": ["file:./fonts/os.ttf", "file:./fonts/os.woff2"],
            }
        ]
    )

    assert css == (
        "@font-face{"
        "font-weight:400;"
        "font-style:normal;"
        "font-display:fallback;"
        'src:local("Open Sans"), '
        "url('https://example.com/assets/fonts/os.woff2') format('woff2'), "
        "url('https://example.com/assets/fonts/os.ttf') format('truetype');"
        'font-family:"Open Sans";'
        "}"
    )


def test_local_css_without_base_url_keeps_relative_reference() -> None:
    css = LocalProvider().get_fonts_collection_css(
        [{"font-family": "Inter", "src": "file:./inter.woff2"}]
    )

    assert "url('file:./inter.woff2') format('woff2')" in css


def test_data_uri_sources_render_as_bare_url() -> None:
    data = "data:font/woff2;base64,d09GMgAB"
    css = LocalProvider().get_fonts_collection_css(
        [{"font-family": "Inter", "src": [data, "https://cdn.example/inter.woff"]}]
    )

    assert f"src:local(Inter), url({data}), url('https://cdn.example/inter.woff') format('woff');" in css


def test_variation_settings_mapping_is_flattened() -> None:
    css = LocalProvider().get_fonts_collection_css(
        [
            {
                "font-family": "Recursive",
                "font-variation-settings": {"wght": 400, "CASL": 1},
            }
        ]
    )

    assert "font-variation-settings:wght 400, CASL 1;" in css


def test_malformed_entries_are_skipped() -> None:
    css = LocalProvider().get_fonts_collection_css(
        ["not a mapping", {"font-style": "italic"}, {"font-family": "Inter"}]  # type: ignore[list-item]
    )

    assert css.count("@font-face") == 1
    assert "font-family:Inter;" in css


def test_malformed_src_does_not_abort_the_batch() -> None:
    css = LocalProvider().get_fonts_collection_css(
        [
            {"font-family": "Bad", "src": 5},
            {"font-family": "Good", "src": "https://cdn.example/good.woff2"},
        ]
    )

    assert css.count("@font-face") == 2
    assert "src:local(Bad);" in css
    assert "url('https://cdn.example/good.woff2') format('woff2')" in css


def test_local_provider_has_no_preconnect_hints() -> None:
    assert LocalProvider().get_preconnect_urls() == ()


def test_provider_registry_keys_by_id() -> None:
    registry = ProviderRegistry()
    local = LocalProvider()

    assert registry.register(local) is True
    assert registry.register(object()) is False  # type: ignore[arg-type]
    assert registry.get("local") is local
    assert "local" in registry
    assert registry.get_all_registered() == {"local": local}
    assert list(registry) == [local]

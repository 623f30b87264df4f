from __future__ import annotations

from fontsmith.fonts.extractor import CssFontFaceExtractor, extract_font_files, family_key


def test_extracts_single_block() -> None:
    css = "@font-face{font-family:'Foo';src:url(https://cdn.example/foo.woff2)}"

    assert CssFontFaceExtractor().extract(css) == {"foo": ["https://cdn.example/foo.woff2"]}


def test_groups_urls_by_family_and_deduplicates() -> None:
    css = """
    /* latin-ext */
    @font-face {
      font-family: "Open Sans";
      src: url("https://cdn.example/os-ext.woff2") format("woff2");
    }
    /* latin */
    @font-face {
      font-family: "Open Sans";
      src: URL('https://cdn.example/os.woff2') format('woff2'),
           url(https://cdn.example/os-ext.woff2) format('woff2');
    }
    @font-face {
      font-family: Roboto, sans-serif;
      src: url( https://cdn.example/roboto.woff2 );
    }
    """

    assert extract_font_files(css) == {
        "open-sans": ["https://cdn.example/os-ext.woff2", "https://cdn.example/os.woff2"],
        "roboto-sans-serif": ["https://cdn.example/roboto.woff2"],
    }


def test_segments_without_family_are_skipped() -> None:
    css = "@font-face{src:url(https://cdn.example/a.woff2)}@font-face{font-family:B;src:url(b.woff)}"

    assert extract_font_files(css) == {"b": ["b.woff"]}


def test_unreadable_family_falls_back_to_unknown() -> None:
    css = "@font-face{src:url(https://cdn.example/a.woff2);font-family:'???'}"

    assert extract_font_files(css) == {"unknown": ["https://cdn.example/a.woff2"]}


def test_family_key_sanitises_value() -> None:
    assert family_key("font-family: 'Noto Sans JP';") == "noto-sans-jp"
    assert family_key("font-family: 'Ünïcode Font';") == "ncode-font"
    assert family_key("font-family: ;") == "unknown"
    assert family_key("font-family: 'Foo', sans-serif;") == "foo-sans-serif"


def test_empty_css_yields_nothing() -> None:
    assert extract_font_files("") == {}
    assert extract_font_files("body { color: red; }") == {}

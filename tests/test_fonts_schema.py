from __future__ import annotations

import pytest

from fontsmith.core.diagnostics import RecordingEmitter
from fontsmith.fonts.schema import (
    SchemaValidator,
    is_font_style_value,
    is_font_weight_value,
    is_src_value,
)


def _descriptor(**overrides):
    descriptor = {
        "provider": "local",
        "font-family": "Source Serif Pro",
        "font-style": "normal",
        "font-weight": "400",
        "src": "https://example.com/fonts/source-serif.woff2",
    }
    descriptor.update(overrides)
    return descriptor


@pytest.mark.parametrize("style", ["normal", "italic", "oblique", "oblique 20%", "inherit"])
def test_font_style_accepts_keywords_and_oblique_angle(style: str) -> None:
    assert is_font_style_value(style)


@pytest.mark.parametrize("style", ["slanted", "", None, 3])
def test_font_style_rejects_unknown_values(style) -> None:
    assert not is_font_style_value(style)


@pytest.mark.parametrize("weight", ["400", "200 900", "bold", "lighter", 700])
def test_font_weight_accepts_keywords_numbers_and_ranges(weight) -> None:
    assert is_font_weight_value(weight)


@pytest.mark.parametrize("weight", ["", True, False, "heavy", "100 200 300", None])
def test_font_weight_rejects_invalid_values(weight) -> None:
    assert not is_font_weight_value(weight)


@pytest.mark.parametrize(
    "src",
    [
        "https://example.com/font.woff2",
        "//fonts.example.com/font.woff",
        "file:./fonts/font.ttf",
        "data:font/woff2;base64,d09GMgABAAAA",
    ],
)
def test_src_value_accepts_urls_relative_files_and_data_uris(src: str) -> None:
    assert is_src_value(src)


@pytest.mark.parametrize("src", ["font.woff2", "fonts/font.ttf", "https://exa mple.com/x.ttf"])
def test_src_value_rejects_bare_paths(src: str) -> None:
    assert not is_src_value(src)


def test_validate_accepts_complete_descriptor() -> None:
    emitter = RecordingEmitter()
    validator = SchemaValidator(emitter)

    assert validator.validate(
        _descriptor(
            **{
                "font-display": "swap",
                "font-stretch": "condensed 120%",
                "font-variant": "small-caps",
                "unicode-range": "U+0000-00FF, U+0131",
                "ascent-override": "90%",
            }
        )
    )
    assert emitter.notices == []


def test_validate_accepts_camel_case_keys() -> None:
    validator = SchemaValidator()
    assert validator.validate(
        {
            "provider": "local",
            "fontFamily": "Inter",
            "fontStyle": "italic",
            "fontWeight": "700",
        }
    )


@pytest.mark.parametrize("provider", [None, "", 42])
def test_validate_requires_provider(provider) -> None:
    emitter = RecordingEmitter()
    descriptor = _descriptor(provider=provider)

    assert SchemaValidator(emitter).validate(descriptor) is False
    assert emitter.notices == ["Webfont provider must be a non-empty string."]


def test_validate_stops_at_first_failure() -> None:
    emitter = RecordingEmitter()
    descriptor = _descriptor(**{"font-family": "", "font-style": "slanted"})

    assert SchemaValidator(emitter).validate(descriptor) is False
    assert len(emitter.notices) == 1
    assert "font family" in emitter.notices[0]


@pytest.mark.parametrize(
    ("prop", "value", "fragment"),
    [
        ("font-display", "eventually", "font-display"),
        ("font-style", "slanted", "font style"),
        ("font-weight", "", "font weight"),
        ("font-weight", True, "font weight"),
        ("ascent-override", "90", "ascent-override"),
        ("font-stretch", "very-wide", "font-stretch"),
        ("font-variant", "small-caps wiggly", "wiggly"),
        ("unicode-range", "0041", "unicode-range"),
        ("src", "fonts/inter.woff2", "src"),
    ],
)
def test_validate_reports_property_specific_notice(prop: str, value, fragment: str) -> None:
    emitter = RecordingEmitter()

    assert SchemaValidator(emitter).validate(_descriptor(**{prop: value})) is False
    assert len(emitter.notices) == 1
    assert fragment in emitter.notices[0]


def test_single_rule_can_be_overridden() -> None:
    class LenientStretch(SchemaValidator):
        def is_font_stretch_valid(self, webfont) -> bool:
            return True

    descriptor = _descriptor(**{"font-stretch": "very-wide"})
    assert SchemaValidator().validate(descriptor) is False
    assert LenientStretch().validate(descriptor) is True


def test_validate_never_raises_on_non_mapping() -> None:
    emitter = RecordingEmitter()
    assert SchemaValidator(emitter).validate(["not", "a", "mapping"]) is False  # type: ignore[arg-type]
    assert emitter.notices

"""Strict validation of webfont descriptors against CSS ``@font-face`` grammar.

Every rule is a named predicate (``is_<property>_valid``) and ``CHECKS`` holds
the order in which they run. Subclasses override a single predicate to relax
or tighten one property without touching the others. A failing predicate
reports a notice through the diagnostics emitter and validation stops there.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import re
from typing import Any, ClassVar
from urllib.parse import urlparse

from fontsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from fontsmith.fonts.utils import is_non_empty_string, kebab_keys


VALID_FONT_DISPLAY: tuple[str, ...] = ("auto", "block", "fallback", "swap")

VALID_FONT_STYLES: tuple[str, ...] = (
    "normal",
    "italic",
    "oblique",
    # Global values.
    "inherit",
    "initial",
    "revert",
    "unset",
)

VALID_FONT_WEIGHTS: tuple[str, ...] = ("normal", "bold", "bolder", "lighter", "inherit")

VALID_FONT_STRETCH: tuple[str, ...] = (
    "normal",
    "ultra-condensed",
    "extra-condensed",
    "condensed",
    "semi-condensed",
    "semi-expanded",
    "expanded",
    "extra-expanded",
    "ultra-expanded",
)

VALID_FONT_VARIANTS: frozenset[str] = frozenset(
    {
        "normal",
        "none",
        "small-caps",
        "all-small-caps",
        "petite-caps",
        "all-petite-caps",
        "unicase",
        "titling-caps",
        "common-ligatures",
        "no-common-ligatures",
        "discretionary-ligatures",
        "no-discretionary-ligatures",
        "historical-ligatures",
        "no-historical-ligatures",
        "contextual",
        "no-contextual",
        "lining-nums",
        "oldstyle-nums",
        "proportional-nums",
        "tabular-nums",
        "diagonal-fractions",
        "stacked-fractions",
        "ordinal",
        "slashed-zero",
        "historical-forms",
        "jis78",
        "jis83",
        "jis90",
        "jis04",
        "simplified",
        "traditional",
        "full-width",
        "proportional-width",
        "ruby",
        "sub",
        "super",
    }
)

OVERRIDE_PROPERTIES: tuple[str, ...] = (
    "ascent-override",
    "descent-override",
    "line-gap-override",
)

_DATA_URI = re.compile(r"^data:.+;base64")
_OBLIQUE_ANGLE = re.compile(r"^oblique\s+(\d+)%")
_SINGLE_WEIGHT = re.compile(r"^\d+$")
_WEIGHT_RANGE = re.compile(r"^\d+\s+\d+$")
_OVERRIDE_PERCENT = re.compile(r"^(?:\d+%|\.\d+%|\d+\.\d+%)$")
_STRETCH_PERCENT = re.compile(r"^(?:\d+(?:\.\d+)?|\.\d+)%$")
_UNICODE_RANGE = re.compile(r"^U\+[0-9A-F]{1,6}(?:-[0-9A-F]{1,6})?$", re.IGNORECASE)


def is_font_style_value(value: Any) -> bool:
    """Return whether ``value`` is an accepted ``font-style``."""
    if not is_non_empty_string(value):
        return False
    return value in VALID_FONT_STYLES or bool(_OBLIQUE_ANGLE.match(value))


def is_font_weight_value(value: Any) -> bool:
    """Return whether ``value`` is an accepted ``font-weight`` keyword, number, or range."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if not is_non_empty_string(value):
        return False
    return (
        value in VALID_FONT_WEIGHTS
        or bool(_SINGLE_WEIGHT.match(value))
        or bool(_WEIGHT_RANGE.match(value))
    )


def is_font_display_value(value: Any) -> bool:
    return isinstance(value, str) and value in VALID_FONT_DISPLAY


def is_src_value(src: str) -> bool:
    """Return whether a single ``src`` entry is a data URI, URL, or relative file."""
    if _DATA_URI.match(src):
        return True
    if src.startswith("//"):
        return True
    if src.startswith("file:./"):
        return True
    if any(char.isspace() for char in src):
        return False
    parsed = urlparse(src)
    return bool(parsed.scheme) and bool(parsed.netloc)


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == ()


class SchemaValidator:
    """Validate descriptors, reporting the first violation as a notice."""

    CHECKS: ClassVar[tuple[str, ...]] = (
        "is_provider_valid",
        "is_font_family_valid",
        "is_src_valid",
        "is_font_display_valid",
        "is_font_style_valid",
        "is_font_weight_valid",
        "is_overrides_valid",
        "is_font_stretch_valid",
        "is_font_variant_valid",
        "is_unicode_range_valid",
    )

    def __init__(self, emitter: DiagnosticEmitter | None = None) -> None:
        self.emitter = emitter or NullEmitter()

    def validate(self, descriptor: Mapping[str, Any]) -> bool:
        """Return ``True`` when every property of ``descriptor`` is valid."""
        if not isinstance(descriptor, Mapping):
            self._notice("Webfont must be a mapping of CSS properties.")
            return False
        webfont = kebab_keys(descriptor)
        if not _is_blank(webfont.get("src")) and isinstance(webfont["src"], str):
            webfont["src"] = [webfont["src"]]
        return all(getattr(self, check)(webfont) for check in self.CHECKS)

    __call__ = validate

    def _notice(self, message: str) -> None:
        self.emitter.notice(message)

    # ------------------------------------------------------------------ rules

    def is_provider_valid(self, webfont: Mapping[str, Any]) -> bool:
        if not is_non_empty_string(webfont.get("provider")):
            self._notice("Webfont provider must be a non-empty string.")
            return False
        return True

    def is_font_family_valid(self, webfont: Mapping[str, Any]) -> bool:
        if not is_non_empty_string(webfont.get("font-family")):
            self._notice("Webfont font family must be a non-empty string.")
            return False
        return True

    def is_src_valid(self, webfont: Mapping[str, Any]) -> bool:
        sources = webfont.get("src")
        if _is_blank(sources):
            return True
        if isinstance(sources, (str, bytes)) or not isinstance(sources, Sequence):
            self._notice("Webfont src must be a non-empty string, or a list of strings.")
            return False
        for src in sources:
            if not is_non_empty_string(src):
                self._notice("Webfont src must be a non-empty string, or a list of strings.")
                return False
            if not is_src_value(src):
                self._notice(f"Webfont src must be a valid URL, or a data URI. Given: {src}.")
                return False
        return True

    def is_font_display_valid(self, webfont: Mapping[str, Any]) -> bool:
        display = webfont.get("font-display")
        if _is_blank(display):
            return True
        if not is_font_display_value(display):
            self._notice(
                "Webfont font-display must be one of "
                f"{', '.join(VALID_FONT_DISPLAY)}. Given: {display}."
            )
            return False
        return True

    def is_font_style_valid(self, webfont: Mapping[str, Any]) -> bool:
        style = webfont.get("font-style")
        if not is_non_empty_string(style):
            self._notice("Webfont font style must be a non-empty string.")
            return False
        if not is_font_style_value(style):
            self._notice(
                "Webfont font style must be normal, italic, oblique, or oblique <angle>%. "
                f"Given: {style}."
            )
            return False
        return True

    def is_font_weight_valid(self, webfont: Mapping[str, Any]) -> bool:
        weight = webfont.get("font-weight")
        if isinstance(weight, bool) or _is_blank(weight):
            self._notice("Webfont font weight must be a non-empty string.")
            return False
        if not is_font_weight_value(weight):
            self._notice(
                "Webfont font weight must be a keyword, a number, or a range of two numbers. "
                f"Given: {weight}."
            )
            return False
        return True

    def is_overrides_valid(self, webfont: Mapping[str, Any]) -> bool:
        for prop in OVERRIDE_PROPERTIES:
            value = webfont.get(prop)
            if _is_blank(value) or value == "normal":
                continue
            if isinstance(value, str) and _OVERRIDE_PERCENT.match(value):
                continue
            self._notice(f'Webfont {prop} must be "normal" or a percentage. Given: {value}.')
            return False
        return True

    def is_font_stretch_valid(self, webfont: Mapping[str, Any]) -> bool:
        stretch = webfont.get("font-stretch")
        if _is_blank(stretch):
            return True
        tokens = stretch.split() if isinstance(stretch, str) else []
        if 1 <= len(tokens) <= 2 and all(
            token in VALID_FONT_STRETCH or _STRETCH_PERCENT.match(token) for token in tokens
        ):
            return True
        self._notice(
            "Webfont font-stretch must be one or two stretch keywords or percentages. "
            f"Given: {stretch}."
        )
        return False

    def is_font_variant_valid(self, webfont: Mapping[str, Any]) -> bool:
        variant = webfont.get("font-variant")
        if _is_blank(variant):
            return True
        tokens = variant.split() if isinstance(variant, str) else []
        unknown = [token for token in tokens if token not in VALID_FONT_VARIANTS]
        if tokens and not unknown:
            return True
        detail = ", ".join(unknown) if unknown else str(variant)
        self._notice(f"Webfont font-variant contains unsupported values: {detail}.")
        return False

    def is_unicode_range_valid(self, webfont: Mapping[str, Any]) -> bool:
        unicode_range = webfont.get("unicode-range")
        if _is_blank(unicode_range):
            return True
        tokens = (
            [token.strip() for token in unicode_range.split(",")]
            if isinstance(unicode_range, str)
            else []
        )
        if tokens and all(_UNICODE_RANGE.match(token) for token in tokens):
            return True
        self._notice(
            "Webfont unicode-range must be a comma-separated list of U+XXXX codepoints "
            f"or U+XXXX-YYYY ranges. Given: {unicode_range}."
        )
        return False


__all__ = [
    "OVERRIDE_PROPERTIES",
    "VALID_FONT_DISPLAY",
    "VALID_FONT_STRETCH",
    "VALID_FONT_STYLES",
    "VALID_FONT_VARIANTS",
    "VALID_FONT_WEIGHTS",
    "SchemaValidator",
    "is_font_display_value",
    "is_font_style_value",
    "is_font_weight_value",
    "is_src_value",
]

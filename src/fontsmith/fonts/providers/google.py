"""Provider backed by the Google Fonts CSS2 API."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
import re
from typing import Any
from urllib.parse import quote, quote_plus

from fontsmith.fonts.params import DEFAULT_PARAMS
from fontsmith.fonts.providers.base import (
    PreconnectHint,
    RemoteProvider,
    collect_valid,
    flatten_variation_settings,
)
from fontsmith.fonts.utils import dedupe_preserve_order


# Properties the API already writes into the @font-face rules it returns.
API_PROVIDED_PROPERTIES = frozenset(
    {"font-family", "font-style", "font-weight", "font-display", "src", "unicode-range"}
)

_KEYWORD_WEIGHTS = {"normal": "400", "bold": "700"}
_FONT_FACE_BLOCK = re.compile(r"@font-face\s*\{(?P<body>[^}]*)\}")
_FAMILY_DECLARATION = re.compile(r"font-family\s*:\s*(?P<value>[^;]+);?")
_STYLE_DECLARATION = re.compile(r"font-style\s*:\s*(?P<value>[^;]+);?")
_WEIGHT_DECLARATION = re.compile(r"font-weight\s*:\s*(?P<value>[^;]+);?")


def api_weight(weight: Any) -> str:
    """Translate a CSS ``font-weight`` into the API's axis notation."""
    value = str(weight).strip()
    value = _KEYWORD_WEIGHTS.get(value, value)
    parts = value.split()
    if len(parts) == 2 and all(part.isdigit() for part in parts):
        return f"{parts[0]}..{parts[1]}"
    if value.isdigit():
        return value
    return DEFAULT_PARAMS["font-weight"]


def _weight_sort_key(weight: str) -> int:
    head = weight.split("..", 1)[0]
    return int(head) if head.isdigit() else 0


def _sorted_weights(weights: Iterable[str]) -> list[str]:
    return sorted(dedupe_preserve_order(weights), key=_weight_sort_key)


def family_axes(fonts: Iterable[Mapping[str, Any]]) -> str:
    """Return the ``wght@…``/``ital,wght@…`` axis notation for one family."""
    normal: list[str] = []
    italic: list[str] = []
    for font in fonts:
        weight = api_weight(font.get("font-weight", DEFAULT_PARAMS["font-weight"]))
        if font.get("font-style") == "italic":
            italic.append(weight)
        else:
            normal.append(weight)
    normal = _sorted_weights(normal)
    italic = _sorted_weights(italic)

    if italic and normal:
        tuples = [f"0,{weight}" for weight in normal] + [f"1,{weight}" for weight in italic]
        return "ital,wght@" + ";".join(tuples)
    if italic:
        return "ital,wght@" + ";".join(f"1,{weight}" for weight in italic)
    return "wght@" + ";".join(normal)


def _strip_quotes(value: str) -> str:
    return value.strip().strip("'\"").strip()


def variant_key(family: str, style: Any, weight: Any) -> tuple[str, str, str]:
    """Return the ``(family, style, weight)`` triple an ``@font-face`` rule is matched on."""
    weight = " ".join(str(weight).split())
    return (
        _strip_quotes(family).lower(),
        str(style).strip().lower(),
        _KEYWORD_WEIGHTS.get(weight, weight),
    )


def _declared(pattern: re.Pattern[str], body: str, default: str) -> str:
    declaration = pattern.search(body)
    return declaration.group("value") if declaration else default


def inject_additional_props(
    css: str, props_by_variant: Mapping[tuple[str, str, str], Mapping[str, Any]]
) -> str:
    """Prepend extra declarations to the ``@font-face`` blocks of matching variants."""
    if not props_by_variant:
        return css

    def _replace(match: re.Match[str]) -> str:
        body = match.group("body")
        family = _FAMILY_DECLARATION.search(body)
        if family is None:
            return match.group(0)
        key = variant_key(
            family.group("value"),
            _declared(_STYLE_DECLARATION, body, DEFAULT_PARAMS["font-style"]),
            _declared(_WEIGHT_DECLARATION, body, DEFAULT_PARAMS["font-weight"]),
        )
        props = props_by_variant.get(key)
        if not props:
            return match.group(0)
        extra = "".join(f"{prop}:{value};" for prop, value in props.items())
        return match.group(0).replace("{", "{" + extra, 1)

    return _FONT_FACE_BLOCK.sub(_replace, css)


class GoogleProvider(RemoteProvider):
    """Request batched stylesheets from ``fonts.googleapis.com``.

    Descriptors are grouped by ``font-display`` (the API takes it as a query
    parameter) and then by family, so every display value costs exactly one
    request however many families share it.
    """

    id = "google"
    root_url = "https://fonts.googleapis.com/css2"
    preconnect_urls = (
        PreconnectHint("https://fonts.gstatic.com", crossorigin=True),
        PreconnectHint("https://fonts.googleapis.com", crossorigin=False),
    )
    api_params = ("subset", "text", "effect")

    def group_fonts(
        self, fonts: Sequence[Mapping[str, Any]]
    ) -> dict[str, dict[str, list[dict[str, Any]]]]:
        """Return ``{display: {family: [descriptor, ...]}}`` in first-seen order."""
        groups: dict[str, dict[str, list[dict[str, Any]]]] = {}
        for font in collect_valid(self, fonts):
            display = font.get("font-display") or DEFAULT_PARAMS["font-display"]
            groups.setdefault(display, {}).setdefault(font["font-family"], []).append(font)
        return groups

    def build_collection_api_urls(self, fonts: Sequence[Mapping[str, Any]]) -> list[str]:
        """Return one API URL per ``font-display`` group."""
        urls: list[str] = []
        for display, families in self.group_fonts(fonts).items():
            parts = [
                f"{quote_plus(family)}:{family_axes(members)}"
                for family, members in families.items()
            ]
            query = "family=" + "&family=".join(parts) + f"&display={display}"
            query += self._api_query(
                [font for members in families.values() for font in members]
            )
            urls.append(f"{self.root_url}?{query}")
        return urls

    def _api_query(self, fonts: Sequence[Mapping[str, Any]]) -> str:
        subsets: list[str] = []
        texts: list[str] = []
        effects: list[str] = []
        for font in fonts:
            subsets.extend(_as_list(font.get("subset")))
            texts.extend(_as_list(font.get("text")))
            effects.extend(_as_list(font.get("effect")))
        query = ""
        if subsets:
            query += "&subset=" + ",".join(dedupe_preserve_order(subsets))
        if texts:
            query += "&text=" + quote("".join(dedupe_preserve_order(texts)))
        if effects:
            query += "&effect=" + "|".join(dedupe_preserve_order(effects))
        return query

    def additional_props(
        self, fonts: Sequence[Mapping[str, Any]]
    ) -> dict[tuple[str, str, str], dict[str, Any]]:
        """Return, per variant, the declarations the API response will not contain."""
        skipped = API_PROVIDED_PROPERTIES | set(self.api_params)
        props_by_variant: dict[tuple[str, str, str], dict[str, Any]] = {}
        for font in collect_valid(self, fonts):
            key = variant_key(font["font-family"], font["font-style"], font["font-weight"])
            for prop, value in font.items():
                if prop in skipped or value in (None, "", [], {}):
                    continue
                if prop == "font-variation-settings":
                    value = flatten_variation_settings(value)
                props_by_variant.setdefault(key, {})[prop] = value
        return props_by_variant

    def get_fonts_collection_css(self, fonts: Sequence[Mapping[str, Any]]) -> str:
        extra = self.additional_props(fonts)
        css = ""
        for url in self.build_collection_api_urls(fonts):
            css += inject_additional_props(self.get_cached_remote_styles(url), extra)
        return css


def _as_list(value: Any) -> list[str]:
    if value in (None, ""):
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Iterable):
        return [str(item) for item in value if item not in (None, "")]
    return [str(value)]


__all__ = [
    "API_PROVIDED_PROPERTIES",
    "GoogleProvider",
    "api_weight",
    "family_axes",
    "inject_additional_props",
    "variant_key",
]

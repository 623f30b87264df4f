"""Provider for fonts whose files are hosted alongside the site."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fontsmith.core.diagnostics import DiagnosticEmitter
from fontsmith.fonts.providers.base import (
    Provider,
    collect_valid,
    flatten_variation_settings,
)


def quote_family(family: str) -> str:
    """Wrap multi-word family names in double quotes unless already quoted."""
    if " " in family and '"' not in family and "'" not in family:
        return f'"{family}"'
    return family


class LocalProvider(Provider):
    """Emit ``@font-face`` rules pointing at locally hosted files.

    ``base_url`` resolves ``file:./`` sources into public URLs; without it the
    references are written unchanged.
    """

    id = "local"

    def __init__(
        self, *, base_url: str | None = None, emitter: DiagnosticEmitter | None = None
    ) -> None:
        super().__init__(emitter=emitter)
        self.base_url = base_url

    def get_validated_params(self, params: Mapping[str, Any]) -> dict[str, Any]:
        validated = super().get_validated_params(params)
        family = validated.get("font-family")
        if isinstance(family, str):
            validated["font-family"] = quote_family(family)
        return validated

    def resolve_url(self, url: str) -> str:
        if self.base_url and url.startswith("file:./"):
            return f"{self.base_url.rstrip('/')}/{url[len('file:./') :]}"
        return url

    def render_src(self, font: Mapping[str, Any]) -> str:
        parts = [f"local({font['font-family']})"]
        for item in font.get("src") or ():
            url = self.resolve_url(item["url"])
            if item["format"] == "data":
                parts.append(f"url({url})")
            else:
                parts.append(f"url('{url}') format('{item['format']}')")
        return ", ".join(parts)

    def get_fonts_collection_css(self, fonts: Sequence[Mapping[str, Any]]) -> str:
        css = ""
        for font in collect_valid(self, fonts):
            css += "@font-face{"
            for key, value in font.items():
                if key == "src":
                    value = self.render_src(font)
                elif key == "font-variation-settings":
                    value = flatten_variation_settings(value)
                if value not in (None, "", [], {}):
                    css += f"{key}:{value};"
            css += "}"
        return css


__all__ = ["LocalProvider", "quote_family"]

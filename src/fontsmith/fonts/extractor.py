"""Pull font file URLs out of ``@font-face`` rules.

This is string splitting on the ``@font-face`` marker, not a CSS parser: each
rule is read up to its first ``}``. Rules whose family cannot be read are
collected under ``unknown`` rather than dropped.
"""

from __future__ import annotations

import re

from fontsmith.fonts.utils import dedupe_preserve_order, sanitize_key


UNKNOWN_FAMILY = "unknown"
FONT_FACE_MARKER = "@font-face"

_FAMILY_DECLARATION = re.compile(r"font-family.*?;", re.DOTALL)
_URL = re.compile(r"url\(\s*(?P<quote>['\"]?)(?P<url>.*?)(?P=quote)\s*\)", re.IGNORECASE)


def family_key(declaration: str) -> str:
    """Turn ``font-family: 'Open Sans', sans-serif;`` into ``open-sans-sans-serif``."""
    _, _, value = declaration.partition(":")
    value = value.replace("'", "").replace('"', "").replace(";", "").strip()
    return sanitize_key(value.lower().replace(" ", "-")) or UNKNOWN_FAMILY


class CssFontFaceExtractor:
    """Group the ``url(...)`` references of each ``@font-face`` rule by family."""

    def extract(self, css: str) -> dict[str, list[str]]:
        """Return ``{family_key: [url, ...]}`` with URLs unique per family."""
        font_files: dict[str, list[str]] = {}
        if not css:
            return font_files

        for segment in css.split(FONT_FACE_MARKER):
            style = segment.split("}", 1)[0]
            if "font-family" not in style:
                continue

            declaration = _FAMILY_DECLARATION.search(style)
            family = family_key(declaration.group(0)) if declaration else UNKNOWN_FAMILY

            urls = [match.group("url").strip() for match in _URL.finditer(style)]
            files = font_files.setdefault(family, [])
            files.extend(url for url in urls if url)
            font_files[family] = dedupe_preserve_order(files)
        return font_files

    __call__ = extract


def extract_font_files(css: str) -> dict[str, list[str]]:
    """Shortcut for ``CssFontFaceExtractor().extract(css)``."""
    return CssFontFaceExtractor().extract(css)


__all__ = [
    "FONT_FACE_MARKER",
    "UNKNOWN_FAMILY",
    "CssFontFaceExtractor",
    "extract_font_files",
    "family_key",
]

"""Webfont toolchain: validate descriptors, render ``@font-face`` CSS, mirror files.

Architecture
: `SchemaValidator` rejects malformed descriptors at registration time and
  reports each problem as a notice. `FontRegistry` stores the survivors under a
  ``<family-slug>.<style>.<weight>`` key.
: Providers (`LocalProvider`, `GoogleProvider`) normalise descriptors with
  `ParamNormalizer` and turn them into CSS. Remote stylesheets are cached in a
  `TransientStore`, failures included for a short time.
: `CssFontFaceExtractor` pulls font file URLs out of remote CSS and
  `LocalMirror` rewrites them to local copies. Missing copies are queued in
  `DeferredDownloads` and fetched when the owner drains the queue.
: `WebfontsContext` wires everything together and publishes the result through
  a `StylesheetQueue`.
"""

from fontsmith.fonts.cache import JsonFileStore, MemoryStore, TransientStore
from fontsmith.fonts.context import WebfontsContext, build_context
from fontsmith.fonts.extractor import CssFontFaceExtractor, extract_font_files
from fontsmith.fonts.mirror import DeferredDownloads, LocalMirror, PendingDownload
from fontsmith.fonts.params import ParamNormalizer, order_sources
from fontsmith.fonts.providers import (
    GoogleProvider,
    LocalProvider,
    PreconnectHint,
    Provider,
    ProviderRegistry,
    RemoteProvider,
)
from fontsmith.fonts.registry import FontRegistry, registry_key
from fontsmith.fonts.schema import SchemaValidator
from fontsmith.fonts.stylesheets import StyleQueue, StylesheetQueue


__all__ = [
    "CssFontFaceExtractor",
    "DeferredDownloads",
    "FontRegistry",
    "GoogleProvider",
    "JsonFileStore",
    "LocalMirror",
    "LocalProvider",
    "MemoryStore",
    "ParamNormalizer",
    "PendingDownload",
    "PreconnectHint",
    "Provider",
    "ProviderRegistry",
    "RemoteProvider",
    "SchemaValidator",
    "StyleQueue",
    "StylesheetQueue",
    "TransientStore",
    "WebfontsContext",
    "build_context",
    "extract_font_files",
    "order_sources",
    "registry_key",
]

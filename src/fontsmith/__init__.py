"""Primary public API for FontSmith."""

from __future__ import annotations

from fontsmith.core.config import FontsConfig, load_config
from fontsmith.core.diagnostics import (
    DiagnosticEmitter,
    LoggingEmitter,
    NullEmitter,
    RecordingEmitter,
)
from fontsmith.core.exceptions import (
    ConfigError,
    FetchError,
    FontsmithError,
    TLSCertificateError,
)
from fontsmith.fonts import (
    CssFontFaceExtractor,
    FontRegistry,
    GoogleProvider,
    LocalMirror,
    LocalProvider,
    ParamNormalizer,
    SchemaValidator,
    StyleQueue,
    WebfontsContext,
    build_context,
)
from fontsmith.version import get_version


__version__ = get_version()


__all__ = [
    "ConfigError",
    "CssFontFaceExtractor",
    "DiagnosticEmitter",
    "FetchError",
    "FontRegistry",
    "FontsConfig",
    "FontsmithError",
    "GoogleProvider",
    "LocalMirror",
    "LocalProvider",
    "LoggingEmitter",
    "NullEmitter",
    "ParamNormalizer",
    "RecordingEmitter",
    "SchemaValidator",
    "StyleQueue",
    "TLSCertificateError",
    "WebfontsContext",
    "__version__",
    "build_context",
    "load_config",
]

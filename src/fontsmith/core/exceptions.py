"""Custom exception hierarchy for the webfonts toolchain."""

from __future__ import annotations


class FontsmithError(RuntimeError):
    """Base exception for webfont processing failures."""


class FetchError(FontsmithError):
    """Raised when a remote resource cannot be retrieved."""

    def __init__(self, message: str, *, url: str, status: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class TLSCertificateError(FetchError):
    """Raised when TLS certificate verification fails during downloads."""


class ConfigError(FontsmithError):
    """Raised when a configuration file cannot be loaded."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ConfigError",
    "FetchError",
    "FontsmithError",
    "TLSCertificateError",
    "exception_hint",
    "exception_messages",
]

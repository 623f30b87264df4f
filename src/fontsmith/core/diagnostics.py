"""Diagnostic abstractions shared across the webfonts pipeline."""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface notices, warnings, errors, and structured events."""

    debug_enabled: bool

    def notice(self, message: str) -> None: ...

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def notice(self, message: str) -> None:
        return

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def notice(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


class RecordingEmitter:
    """Emitter that keeps every diagnostic in memory, mostly for callers that report later."""

    def __init__(self, *, debug_enabled: bool = False) -> None:
        self.debug_enabled = debug_enabled
        self.notices: list[str] = []
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.events: list[tuple[str, dict[str, Any]]] = []

    def notice(self, message: str) -> None:
        self.notices.append(message)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self.events.append((name, dict(payload)))


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "font_css_fetch":
        url = data.get("url") or "<unknown>"
        status = data.get("status")
        suffix = f" (HTTP {status})" if status else ""
        return f"Fetching font stylesheet: {url}{suffix}"

    if name == "font_css_cached":
        url = data.get("url") or "<unknown>"
        reason = "negative cache" if data.get("empty") else "cache"
        return f"Reusing cached font stylesheet: {url} ({reason})"

    if name == "font_download":
        url = data.get("url") or "<unknown>"
        path = data.get("path")
        return f"Downloaded font file: {url} -> {path}" if path else f"Downloading: {url}"

    if name == "font_mirror_hit":
        url = data.get("url") or "<unknown>"
        return f"Using mirrored font file for {url}"

    return None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "RecordingEmitter",
    "format_event_message",
]

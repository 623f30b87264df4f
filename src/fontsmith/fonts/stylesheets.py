"""In-memory stylesheet queue used to publish generated ``@font-face`` CSS."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import html
import logging
from typing import Protocol, runtime_checkable


logger = logging.getLogger(__name__)

STYLE_LISTS = ("registered", "enqueued", "queue", "to_do", "done")


@runtime_checkable
class StylesheetQueue(Protocol):
    """Capability the webfonts context publishes its CSS through."""

    def register(
        self,
        handle: str,
        src: str | None = None,
        deps: Iterable[str] = (),
        version: str | None = None,
        media: str = "all",
    ) -> bool: ...

    def enqueue(self, handle: str) -> bool: ...

    def add_inline(self, handle: str, css: str) -> bool: ...

    def dequeue(self, handle: str) -> None: ...

    def deregister(self, handle: str) -> None: ...

    def is_(self, handle: str, list_: str = "enqueued") -> bool: ...


@dataclass(slots=True)
class Stylesheet:
    """A registered stylesheet handle."""

    handle: str
    src: str | None = None
    deps: list[str] = field(default_factory=list)
    version: str | None = None
    media: str = "all"
    inline: list[str] = field(default_factory=list)

    def href(self) -> str | None:
        if not self.src:
            return None
        if not self.version:
            return self.src
        separator = "&" if "?" in self.src else "?"
        return f"{self.src}{separator}ver={self.version}"


@dataclass(slots=True)
class StyleQueue:
    """Track registered and enqueued stylesheets and render them as HTML."""

    registered: dict[str, Stylesheet] = field(default_factory=dict)
    queue: list[str] = field(default_factory=list)
    done: list[str] = field(default_factory=list)

    def register(
        self,
        handle: str,
        src: str | None = None,
        deps: Iterable[str] = (),
        version: str | None = None,
        media: str = "all",
    ) -> bool:
        """Register ``handle``; an existing registration is never overwritten."""
        if handle in self.registered:
            return False
        self.registered[handle] = Stylesheet(
            handle=handle, src=src or None, deps=list(deps), version=version, media=media
        )
        return True

    def deregister(self, handle: str) -> None:
        self.registered.pop(handle, None)
        self.dequeue(handle)

    def enqueue(self, handle: str) -> bool:
        if handle not in self.registered:
            logger.debug("Cannot enqueue unknown stylesheet '%s'.", handle)
            return False
        if handle not in self.queue:
            self.queue.append(handle)
        return True

    def dequeue(self, handle: str) -> None:
        if handle in self.queue:
            self.queue.remove(handle)

    def add_inline(self, handle: str, css: str) -> bool:
        """Attach inline CSS to a registered handle."""
        stylesheet = self.registered.get(handle)
        if stylesheet is None or not css:
            return False
        stylesheet.inline.append(css)
        return True

    def is_(self, handle: str, list_: str = "enqueued") -> bool:
        """Return whether ``handle`` belongs to the named list."""
        if list_ == "registered":
            return handle in self.registered
        if list_ in {"enqueued", "queue"}:
            return handle in self.queue
        if list_ == "to_do":
            return handle in self.to_do()
        if list_ == "done":
            return handle in self.done
        raise ValueError(f"Unknown stylesheet list '{list_}', expected one of {STYLE_LISTS}.")

    def to_do(self) -> list[str]:
        """Return the enqueued handles not yet rendered, dependencies first."""
        ordered: list[str] = []
        visiting: set[str] = set()

        def _visit(handle: str) -> None:
            if handle in ordered or handle in self.done or handle in visiting:
                return
            stylesheet = self.registered.get(handle)
            if stylesheet is None:
                return
            visiting.add(handle)
            for dep in stylesheet.deps:
                _visit(dep)
            visiting.discard(handle)
            ordered.append(handle)

        for handle in self.queue:
            _visit(handle)
        return ordered

    def render(self) -> str:
        """Render pending stylesheets as ``<link>``/``<style>`` tags and mark them done."""
        lines: list[str] = []
        for handle in self.to_do():
            stylesheet = self.registered[handle]
            escaped = html.escape(handle, quote=True)
            href = stylesheet.href()
            if href:
                lines.append(
                    f'<link rel="stylesheet" id="{escaped}-css" '
                    f'href="{html.escape(href, quote=True)}" '
                    f'media="{html.escape(stylesheet.media, quote=True)}">'
                )
            if stylesheet.inline:
                css = "\n".join(stylesheet.inline)
                lines.append(f'<style id="{escaped}-inline-css">\n{css}\n</style>')
            self.done.append(handle)
        return "\n".join(lines)


__all__ = ["STYLE_LISTS", "StyleQueue", "Stylesheet", "StylesheetQueue"]

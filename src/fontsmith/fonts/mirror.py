"""Mirror remote font files locally and rewrite CSS to reference the copies.

Discovering a missing file never downloads it on the spot. The download is
queued in :class:`DeferredDownloads` and runs when the owner drains the queue
after the current response has been produced, so the URL mapping only
includes a file from the next pass onwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
import logging
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlparse

from fontsmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from fontsmith.core.exceptions import FetchError
from fontsmith.core.filesystem import Filesystem, LocalFilesystem, ensure_dir
from fontsmith.core.http import Fetcher, download_to_temp
from fontsmith.fonts.cache import TransientStore
from fontsmith.fonts.extractor import CssFontFaceExtractor


logger = logging.getLogger(__name__)

DOWNLOADED_FILES_KEY = "downloaded_font_files"


def is_remote_url(url: str) -> bool:
    return url.startswith(("http://", "https://", "//"))


def filename_from_url(url: str) -> str:
    """Return the last path segment of ``url`` or ``""`` when there is none."""
    name = PurePosixPath(unquote(urlparse(url).path)).name
    if name in {"", ".", ".."}:
        return ""
    return name


@dataclass(frozen=True, slots=True)
class PendingDownload:
    """A remote file waiting to be fetched into ``destination``."""

    url: str
    destination: Path


class DeferredDownloads:
    """Ordered queue of downloads executed at the end of the request lifecycle."""

    def __init__(self) -> None:
        self._pending: list[PendingDownload] = []

    def schedule(self, url: str, destination: Path) -> bool:
        """Queue a download; return ``False`` when the same pair is already queued."""
        task = PendingDownload(url, Path(destination))
        if task in self._pending:
            return False
        self._pending.append(task)
        return True

    def drain(self, runner: Callable[[str, Path], bool]) -> list[PendingDownload]:
        """Run every queued download in order and return the ones that succeeded."""
        completed: list[PendingDownload] = []
        while self._pending:
            task = self._pending.pop(0)
            if runner(task.url, task.destination):
                completed.append(task)
        return completed

    def clear(self) -> None:
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._pending)

    def __iter__(self) -> Iterator[PendingDownload]:
        return iter(tuple(self._pending))


class LocalMirror:
    """Keep local copies of the font files referenced by remote stylesheets.

    Files live in ``<content_dir>/<fonts_dirname>/<family>/<filename>``. The
    remote URL to local path mapping is persisted in ``store`` under
    ``downloaded_font_files``.
    """

    def __init__(
        self,
        *,
        content_dir: Path,
        content_url: str,
        fetcher: Fetcher,
        store: TransientStore,
        fonts_dirname: str = "fonts",
        filesystem: Filesystem | None = None,
        deferred: DeferredDownloads | None = None,
        extractor: CssFontFaceExtractor | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        self.content_dir = Path(content_dir)
        self.content_url = content_url
        self.fonts_dir = self.content_dir / fonts_dirname
        self.fetcher = fetcher
        self.store = store
        self.filesystem = filesystem or LocalFilesystem()
        self.deferred = deferred if deferred is not None else DeferredDownloads()
        self.extractor = extractor or CssFontFaceExtractor()
        self.emitter = emitter or NullEmitter()

    # ------------------------------------------------------------------ mapping

    def load_cache(self) -> dict[str, str]:
        stored = self.store.get(DOWNLOADED_FILES_KEY)
        if not isinstance(stored, Mapping):
            return {}
        return {str(url): str(path) for url, path in stored.items()}

    def mirror(self, css: str) -> dict[str, str]:
        """Return the remote URL to local path mapping, queueing missing files."""
        font_files = self.extractor.extract(css)
        if not font_files:
            return self.load_cache()
        if not ensure_dir(self.filesystem, self.fonts_dir):
            self.emitter.warning(f"Unable to create the fonts directory '{self.fonts_dir}'.")
            return {}

        stored = self.load_cache()
        changed = False

        for family, urls in font_files.items():
            folder = self.fonts_dir / family
            if not ensure_dir(self.filesystem, folder):
                self.emitter.warning(
                    f"Unable to create '{folder}'; skipping files for font family '{family}'."
                )
                continue

            for url in urls:
                if not is_remote_url(url):
                    continue
                filename = filename_from_url(url)
                if not filename:
                    logger.debug("Skipping font URL without a filename: %s", url)
                    continue
                target = folder / filename

                if self.filesystem.exists(target):
                    if url not in stored:
                        stored[url] = str(target)
                        changed = True
                    continue

                if self.deferred.schedule(url, target):
                    logger.debug("Queued font download %s -> %s", url, target)

        if changed:
            stored = {
                url: path for url, path in stored.items() if self.filesystem.exists(Path(path))
            }
            self.store.set(DOWNLOADED_FILES_KEY, stored, 0)

        return stored

    def public_url(self, path: str | Path) -> str | None:
        """Translate a mirrored file path into its public URL."""
        try:
            relative = Path(path).relative_to(self.content_dir)
        except ValueError:
            return None
        return f"{self.content_url.rstrip('/')}/{relative.as_posix()}"

    def get_css(self, css: str) -> str:
        """Return ``css`` with every mirrored remote URL replaced by its public URL."""
        replacements: dict[str, str] = {}
        for remote, local in self.mirror(css).items():
            public = self.public_url(local)
            if public is not None:
                replacements[remote] = public
                self.emitter.event("font_mirror_hit", {"url": remote, "path": local})

        # Longest first so a URL never clobbers another one it prefixes.
        for remote in sorted(replacements, key=len, reverse=True):
            css = css.replace(remote, replacements[remote])
        return css

    rewrite = get_css

    # ------------------------------------------------------------------ downloads

    def download_file(self, url: str, path: Path) -> bool:
        """Fetch ``url`` next to ``path`` and move it into place."""
        path = Path(path)
        try:
            temporary = download_to_temp(self.fetcher, url, directory=path.parent)
        except (FetchError, OSError) as exc:
            self.emitter.warning(f"Unable to download font file '{url}'.", exc)
            return False

        if not self.filesystem.move(temporary, path, True):
            temporary.unlink(missing_ok=True)
            self.emitter.warning(f"Unable to move downloaded font file into '{path}'.")
            return False

        self.emitter.event("font_download", {"url": url, "path": str(path)})
        return True

    def run_deferred(self) -> list[PendingDownload]:
        """Execute the queued downloads."""
        return self.deferred.drain(self.download_file)


__all__ = [
    "DOWNLOADED_FILES_KEY",
    "DeferredDownloads",
    "LocalMirror",
    "PendingDownload",
    "filename_from_url",
    "is_remote_url",
]

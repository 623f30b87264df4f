"""Resolution of the FontSmith data and cache directories.

Roots are resolved once, when a context or CLI command is built, and the
result is passed to whatever needs a default location. Nothing here is
cached at module level.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import os
from pathlib import Path
import shutil


DEFAULT_CACHE_FILENAME = "transients.json"
CONTENT_DIRNAME = "content"


@dataclass(frozen=True, slots=True)
class UserDirs:
    """Data and cache roots used when the configuration leaves paths unset."""

    root: Path
    cache_root: Path

    @classmethod
    def resolve(
        cls,
        *,
        root: str | Path | None = None,
        cache_root: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> UserDirs:
        """Resolve roots from explicit values, then ``FONTSMITH_*``/XDG variables.

        Without overrides the data root is ``~/.fontsmith`` and the cache root
        ``~/.cache/fontsmith``. A custom data root keeps its cache beside it.
        """
        env = os.environ if environ is None else environ

        explicit_root = root if root is not None else env.get("FONTSMITH_HOME")
        user_root = Path(explicit_root).expanduser() if explicit_root else None

        if cache_root is not None:
            cache = Path(cache_root).expanduser()
        elif env.get("FONTSMITH_CACHE_DIR"):
            cache = Path(env["FONTSMITH_CACHE_DIR"]).expanduser()
        elif env.get("XDG_CACHE_HOME"):
            cache = Path(env["XDG_CACHE_HOME"]).expanduser() / "fontsmith"
        elif user_root is not None:
            cache = user_root / "cache"
        else:
            cache = Path.home() / ".cache" / "fontsmith"

        return cls(root=user_root or Path.home() / ".fontsmith", cache_root=cache)

    @property
    def content_dir(self) -> Path:
        """Default directory receiving mirrored font files."""
        return self.root / CONTENT_DIRNAME

    @property
    def cache_file(self) -> Path:
        """Default location of the persistent key/value cache."""
        return self.cache_root / DEFAULT_CACHE_FILENAME

    def clear_cache(self) -> list[Path]:
        """Remove the cache root and return the removed paths."""
        if not self.cache_root.exists():
            return []
        shutil.rmtree(self.cache_root)
        return [self.cache_root]


__all__ = ["CONTENT_DIRNAME", "DEFAULT_CACHE_FILENAME", "UserDirs"]

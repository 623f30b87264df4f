"""Filesystem capability used when mirroring remote font files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
import shutil
from typing import Protocol, runtime_checkable


logger = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o755


@runtime_checkable
class Filesystem(Protocol):
    """Minimal set of operations the mirror relies on."""

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def mkdir(self, path: Path, mode: int = DEFAULT_DIR_MODE) -> bool: ...

    def move(self, source: Path, destination: Path, overwrite: bool = False) -> bool: ...


class LocalFilesystem:
    """Operate on the local disk, reporting failures as ``False``."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def mkdir(self, path: Path, mode: int = DEFAULT_DIR_MODE) -> bool:
        try:
            Path(path).mkdir(mode=mode, parents=True, exist_ok=True)
        except OSError as exc:
            logger.debug("Unable to create directory %s: %s", path, exc)
            return False
        return True

    def move(self, source: Path, destination: Path, overwrite: bool = False) -> bool:
        source = Path(source)
        destination = Path(destination)
        if destination.exists() and not overwrite:
            return False
        try:
            os.replace(source, destination)
        except OSError:
            # Cross-device moves cannot be atomic; fall back to a copy.
            try:
                shutil.move(str(source), str(destination))
            except OSError as exc:
                logger.debug("Unable to move %s to %s: %s", source, destination, exc)
                return False
        return True


def ensure_dir(filesystem: Filesystem, path: Path) -> bool:
    """Create ``path`` when missing; return whether a directory is now present."""
    if not filesystem.exists(path):
        return filesystem.mkdir(path, DEFAULT_DIR_MODE)
    return filesystem.is_dir(path)


__all__ = ["DEFAULT_DIR_MODE", "Filesystem", "LocalFilesystem", "ensure_dir"]

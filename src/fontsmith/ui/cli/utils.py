"""Helpers shared by the CLI commands."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import typer
import yaml

from fontsmith.core.config import FontsConfig, load_config
from fontsmith.core.exceptions import ConfigError
from fontsmith.core.user_dir import UserDirs
from fontsmith.fonts.context import WebfontsContext
from fontsmith.fonts.mirror import PendingDownload

from .diagnostics import CliEmitter
from .state import CLIState, emit_error


def load_webfonts(path: Path) -> list[Mapping[str, Any]]:
    """Read webfont descriptors from a YAML or JSON file.

    The document is either a list of descriptors or a mapping holding one
    under the ``webfonts`` key.
    """
    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read webfonts file '{path}'.") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid webfonts file '{path}'.") from exc

    if isinstance(payload, Mapping):
        payload = payload.get("webfonts", [])
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ConfigError(f"Webfonts file '{path}' must contain a list of descriptors.")
    return payload


def resolve_config(state: CLIState, **overrides: Any) -> FontsConfig:
    return load_config(state.config_path, **overrides)


def build_cli_context(state: CLIState, **overrides: Any) -> WebfontsContext:
    """Create a webfonts context reporting through the CLI console."""
    config = resolve_config(state, **overrides)
    return WebfontsContext(
        config=config, emitter=CliEmitter(state), user_dirs=UserDirs.resolve()
    )


def drain_downloads(context: WebfontsContext, state: CLIState) -> list[PendingDownload]:
    """Run queued downloads behind a Rich progress bar."""
    total = len(context.deferred)
    if total == 0:
        return []

    from rich.progress import (
        BarColumn,
        Progress,
        SpinnerColumn,
        TaskID,
        TextColumn,
        TimeElapsedColumn,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[bold cyan]Downloading fonts"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        TimeElapsedColumn(),
        console=state.err_console,
        transient=state.verbosity < 1,
    ) as progress:
        task_id: TaskID = progress.add_task("download", total=total)

        def _download(url: str, destination: Path) -> bool:
            try:
                return context.mirror.download_file(url, destination)
            finally:
                progress.update(task_id, advance=1)

        completed = context.deferred.drain(_download)

    downloaded = state.consume_events("font_download")
    state.err_console.print(
        f"Mirrored {len(downloaded)} of {total} font file(s) into {context.mirror.fonts_dir}.",
        style="green" if len(downloaded) == total else "yellow",
    )
    return completed


def fail(message: str, exc: BaseException | None = None) -> typer.Exit:
    """Report ``message`` and return the exit to raise."""
    emit_error(message, exception=exc)
    return typer.Exit(code=1)


__all__ = ["build_cli_context", "drain_downloads", "fail", "load_webfonts", "resolve_config"]

"""Cache maintenance commands."""

from __future__ import annotations

from typing import Annotated

import typer

from fontsmith.core.exceptions import FontsmithError
from fontsmith.core.user_dir import UserDirs
from fontsmith.fonts.cache import JsonFileStore

from ..state import get_cli_state
from ..utils import fail, resolve_config


cache_app = typer.Typer(help="Inspect and clear cached stylesheets and mappings.")


@cache_app.command("clear")
def clear(
    ctx: typer.Context,
    all_: Annotated[
        bool,
        typer.Option("--all", help="Remove the whole user cache directory."),
    ] = False,
) -> None:
    """Remove cached remote stylesheets and the mirrored file mapping."""
    state = get_cli_state(ctx)
    try:
        config = resolve_config(state)
    except FontsmithError as exc:
        raise fail(str(exc), exc) from exc

    user_dirs = UserDirs.resolve()
    store = JsonFileStore(config.cache_file or user_dirs.cache_file)
    existed = store.path.exists()
    store.clear()
    removed = [store.path] if existed else []
    if all_:
        removed.extend(user_dirs.clear_cache())

    if not removed:
        state.console.print("Cache already empty.")
        return
    for path in removed:
        state.console.print(f"Removed {path}")


__all__ = ["cache_app", "clear"]

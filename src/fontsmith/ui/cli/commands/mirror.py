"""Mirror the font files referenced by a stylesheet."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontsmith.core.exceptions import FontsmithError

from ..state import get_cli_state
from ..utils import build_cli_context, drain_downloads, fail


def mirror(
    ctx: typer.Context,
    stylesheet: Annotated[
        Path,
        typer.Argument(help="CSS file containing @font-face rules.", exists=True),
    ],
    content_dir: Annotated[
        Path | None,
        typer.Option("--content-dir", help="Directory receiving mirrored font files."),
    ] = None,
    content_url: Annotated[
        str | None,
        typer.Option("--content-url", help="Public URL serving the content directory."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the rewritten CSS to this file."),
    ] = None,
) -> None:
    """Download every remote font file and print the CSS rewritten to local URLs."""
    state = get_cli_state(ctx)
    try:
        source = stylesheet.read_text(encoding="utf-8")
        context = build_cli_context(state, content_dir=content_dir, content_url=content_url)
    except OSError as exc:
        raise fail(f"Unable to read stylesheet '{stylesheet}'.", exc) from exc
    except FontsmithError as exc:
        raise fail(str(exc), exc) from exc

    context.mirror.mirror(source)
    drain_downloads(context, state)
    # Second pass records the files downloaded above.
    result = context.mirror.get_css(source)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result, encoding="utf-8")
    else:
        typer.echo(result)


__all__ = ["mirror"]

"""Render the ``@font-face`` CSS of a webfonts file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontsmith.core.exceptions import FontsmithError

from ..state import get_cli_state
from ..utils import build_cli_context, drain_downloads, fail, load_webfonts


def css(
    ctx: typer.Context,
    webfonts_file: Annotated[
        Path,
        typer.Argument(help="YAML or JSON file listing webfont descriptors.", exists=True),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the result to this file."),
    ] = None,
    html: Annotated[
        bool,
        typer.Option("--html", help="Emit preconnect/preload links and a <style> tag."),
    ] = False,
    download: Annotated[
        bool,
        typer.Option("--download/--no-download", help="Mirror remote font files afterwards."),
    ] = True,
    content_dir: Annotated[
        Path | None,
        typer.Option("--content-dir", help="Directory receiving mirrored font files."),
    ] = None,
    content_url: Annotated[
        str | None,
        typer.Option("--content-url", help="Public URL serving the content directory."),
    ] = None,
) -> None:
    """Print the CSS for every valid descriptor, then run queued downloads."""
    state = get_cli_state(ctx)
    try:
        descriptors = load_webfonts(webfonts_file)
        context = build_cli_context(state, content_dir=content_dir, content_url=content_url)
    except FontsmithError as exc:
        raise fail(str(exc), exc) from exc

    context.register_webfonts(descriptors)
    if html:
        context.enqueue_webfonts()
        result = context.render_head()
    else:
        result = context.generate_styles()

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result + "\n", encoding="utf-8")
    else:
        typer.echo(result)

    if download:
        drain_downloads(context, state)
    else:
        context.deferred.clear()


__all__ = ["css"]

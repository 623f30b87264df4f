"""Check webfont descriptors against the schema rules."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from fontsmith.core.exceptions import FontsmithError

from ..state import get_cli_state
from ..utils import build_cli_context, fail, load_webfonts


def validate(
    ctx: typer.Context,
    webfonts_file: Annotated[
        Path,
        typer.Argument(help="YAML or JSON file listing webfont descriptors.", exists=True),
    ],
) -> None:
    """Validate descriptors and print the registry key of each one."""
    state = get_cli_state(ctx)
    try:
        descriptors = load_webfonts(webfonts_file)
        context = build_cli_context(state)
    except FontsmithError as exc:
        raise fail(str(exc), exc) from exc

    from rich.table import Table

    table = Table(title="Webfonts", header_style="bold cyan")
    table.add_column("#", justify="right")
    table.add_column("Family", style="magenta")
    table.add_column("Key")

    invalid = 0
    for index, descriptor in enumerate(descriptors, start=1):
        key = context.register_webfont(descriptor)
        family = ""
        if isinstance(descriptor, dict):
            family = str(descriptor.get("font-family") or descriptor.get("fontFamily") or "")
        if not key:
            invalid += 1
        table.add_row(str(index), family or "-", key or "[red]invalid[/red]")

    state.console.print(table)
    if invalid:
        raise fail(f"{invalid} of {len(descriptors)} webfont(s) are invalid.")


__all__ = ["validate"]

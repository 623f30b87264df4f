"""CLI command implementations exposed via `fontsmith.ui.cli`."""

from __future__ import annotations

from .cache import cache_app
from .css import css
from .mirror import mirror
from .validate import validate


__all__ = ["cache_app", "css", "mirror", "validate"]

"""Configuration models used by the webfonts context.

FontsConfig

`content_dir` (`Path | None`)
: Filesystem root under which mirrored font files are stored. Files land in
  `<content_dir>/<fonts_dirname>/<family>/`. Defaults to `content/` under the
  user data root.

`content_url` (`str`)
: Public URL that serves `content_dir`. Mirrored paths are rewritten by
  replacing the `content_dir` prefix with this URL.

`fonts_dirname` (`str`)
: Name of the directory, relative to `content_dir`, holding mirrored fonts.

`user_agent` (`str`)
: User agent sent with every remote request. A desktop browser string makes
  font APIs serve compressed `woff2` files.

`timeout` (`float`)
: Timeout in seconds for each remote request.

`remote_ttl` (`int`)
: Lifetime in seconds of cached remote stylesheets.

`negative_ttl` (`int`)
: Lifetime in seconds of the empty entry cached after a failed fetch.

`cache_file` (`Path | None`)
: JSON file backing the persistent key/value cache. Defaults to
  `transients.json` under the user cache root.

`local_base_url` (`str | None`)
: Public base URL used to resolve `file:./` sources of locally hosted fonts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from fontsmith.core.exceptions import ConfigError


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Ubuntu; Linux x86_64; rv:73.0) Gecko/20100101 Firefox/73.0"
)
MONTH_IN_SECONDS = 30 * 24 * 60 * 60


class FontsConfig(BaseModel):
    """Settings shared by providers, the mirror, and the CLI."""

    model_config = ConfigDict(extra="forbid")

    content_dir: Path | None = None
    content_url: str = Field(default="/", description="Public URL of content_dir")
    fonts_dirname: str = "fonts"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = Field(default=10.0, gt=0)
    remote_ttl: int = Field(default=MONTH_IN_SECONDS, ge=0)
    negative_ttl: int = Field(default=60, ge=0)
    cache_file: Path | None = None
    local_base_url: str | None = None

    @field_validator("fonts_dirname")
    @classmethod
    def _check_dirname(cls, value: str) -> str:
        cleaned = value.strip().strip("/")
        if not cleaned or "/" in cleaned or cleaned in {".", ".."}:
            raise ValueError("fonts_dirname must be a single directory name")
        return cleaned

    @field_validator("content_url")
    @classmethod
    def _check_content_url(cls, value: str) -> str:
        return value.strip() or "/"


def load_config(path: Path | str | None = None, **overrides: Any) -> FontsConfig:
    """Load a configuration file (YAML) and apply keyword overrides."""
    data: dict[str, Any] = {}
    if path is not None:
        source = Path(path)
        try:
            payload = yaml.safe_load(source.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"Unable to read configuration file '{source}'.") from exc
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in configuration file '{source}'.") from exc
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ConfigError(f"Configuration file '{source}' must contain a mapping.")
        data.update(payload.get("fontsmith", payload))
    data.update({key: value for key, value in overrides.items() if value is not None})
    try:
        return FontsConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


__all__ = ["DEFAULT_USER_AGENT", "MONTH_IN_SECONDS", "FontsConfig", "load_config"]

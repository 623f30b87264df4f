from __future__ import annotations

from pathlib import Path

import pytest

from fontsmith.core.config import DEFAULT_USER_AGENT, MONTH_IN_SECONDS, FontsConfig, load_config
from fontsmith.core.exceptions import ConfigError


def test_defaults() -> None:
    config = FontsConfig()

    assert config.content_url == "/"
    assert config.fonts_dirname == "fonts"
    assert config.user_agent == DEFAULT_USER_AGENT
    assert config.remote_ttl == MONTH_IN_SECONDS == 2_592_000
    assert config.negative_ttl == 60
    assert config.timeout == 10.0


def test_load_config_reads_yaml_and_applies_overrides(tmp_path: Path) -> None:
    path = tmp_path / "fontsmith.yml"
    path.write_text(
        "fontsmith:\n"
        "  content_dir: public\n"
        "  content_url: https://site.example/\n"
        "  negative_ttl: 30\n",
        encoding="utf-8",
    )

    config = load_config(path, negative_ttl=5, timeout=None)

    assert config.content_dir == Path("public")
    assert config.content_url == "https://site.example/"
    assert config.negative_ttl == 5
    assert config.timeout == 10.0


def test_load_config_accepts_flat_mapping(tmp_path: Path) -> None:
    path = tmp_path / "fontsmith.yml"
    path.write_text("fonts_dirname: /webfonts/\n", encoding="utf-8")

    assert load_config(path).fonts_dirname == "webfonts"


def test_load_config_without_path_uses_defaults() -> None:
    assert load_config() == FontsConfig()


@pytest.mark.parametrize(
    "content",
    ["unknown_key: 1\n", "timeout: -1\n", "fonts_dirname: a/b\n", "- just\n- a list\n", "a: [\n"],
)
def test_invalid_configuration_raises_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "fontsmith.yml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file_raises_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Unable to read"):
        load_config(tmp_path / "absent.yml")

"""End-to-end tests verifying configuration precedence layers."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Mapping, cast

import pytest

from elaguila.config_manager import Config, load_config

CONFIG_TOML = textwrap.dedent(
    """
    [app]
    environment = "staging"

    [events]
    default_city = "oakland"

    [rate_limiting]
    max_retries = 7
    """
).strip()

ENV_FILE = textwrap.dedent(
    """
    ELAGUILA__APP__ENVIRONMENT=production
    ELAGUILA__EVENTS__DEFAULT_CITY=fremont
    ELAGUILA__RATE_LIMITING__MAX_RETRIES=9
    """
).strip()


def _load(config_path: Path, *, environ: Mapping[str, str] | None = None) -> Config:
    return load_config(path=config_path, environ=environ or {})


@pytest.mark.parametrize(
    (
        "with_config",
        "with_env_file",
        "process_env",
        "expected_environment",
        "expected_city",
        "expected_retries",
    ),
    (
        (False, False, {}, "development", "sanjose", 2),
        (True, False, {}, "staging", "oakland", 7),
        (True, True, {}, "production", "fremont", 9),
        (True, True, {"ELAGUILA__APP__ENVIRONMENT": "test"}, "test", "fremont", 9),
    ),
)
def test_config_precedence_matrix(
    tmp_path: Path,
    with_config: bool,
    with_env_file: bool,
    process_env: Mapping[str, str],
    expected_environment: str,
    expected_city: str,
    expected_retries: int,
) -> None:
    """Validate precedence order defaults → config → .env → process env."""

    config_path = tmp_path / "config.toml"
    env_path = tmp_path / ".env"

    if with_config:
        config_path.write_text(CONFIG_TOML, encoding="utf-8")
    if with_env_file:
        env_path.write_text(ENV_FILE, encoding="utf-8")
    else:
        env_path.touch()

    config = _load(config_path, environ=process_env)

    assert config.app.environment == expected_environment
    assert config.events.default_city == expected_city
    assert config.rate_limiting.max_retries == expected_retries


def test_config_precedence_metadata_tracks_layers(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(CONFIG_TOML, encoding="utf-8")
    (tmp_path / ".env").write_text(ENV_FILE, encoding="utf-8")

    config = load_config(path=config_path, environ={"ELAGUILA__APP__ENVIRONMENT": "test"})

    metadata = cast(Any, config)._metadata
    assert metadata.load_order == ("defaults", "file", "env-file", "env")
    assert metadata.provenance["app.environment"].layer == "env"
    assert metadata.provenance["events.default_city"].layer == "env-file"
    assert metadata.provenance["rate_limiting.max_retries"].layer == "env-file"
    assert metadata.provenance["news.max_items"].layer == "defaults"

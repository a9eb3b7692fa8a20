"""Tests for config file loading and the datasource settings view."""

from __future__ import annotations

from pathlib import Path

import pytest

from mysqlenv import config as config_module
from mysqlenv.config import (
    CONFIG_FILE_LAYER_NAME,
    ENVIRONMENT_LAYER_NAME,
    DataSourceSettings,
    build_store,
    config_file_path,
    load_config_file,
)
from mysqlenv.overlay import MysqlEnvironmentProcessor
from mysqlenv.resolver import FAIL_TIMEOUT_PROPERTY, URL_PROPERTY
from mysqlenv.store import ConfigLayer, ConfigStore


def test_load_config_file_returns_empty_when_missing(tmp_path: Path) -> None:
    assert load_config_file(tmp_path / "config.toml") == {}


def test_load_config_file_handles_toml_errors(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("datasource = [unterminated")

    assert load_config_file(config_path) == {}


def test_load_config_file_flattens_tables(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        """
[datasource]
url = "jdbc:mysql://static:3306/app"

[datasource.pool]
initialization-fail-timeout = 30
enabled = true
"""
    )

    result = load_config_file(config_path)

    assert result == {
        "datasource.url": "jdbc:mysql://static:3306/app",
        "datasource.pool.initialization-fail-timeout": 30,
        "datasource.pool.enabled": "true",
    }


def test_load_config_file_uses_default_location(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('name = "demo"\n')
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)

    assert load_config_file() == {"name": "demo"}


def test_config_file_path_honours_variable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_module, "CONFIG_FILE", tmp_path / "default.toml")

    assert config_file_path({}) == tmp_path / "default.toml"
    assert config_file_path({"MYSQLENV_CONFIG": str(tmp_path / "custom.toml")}) == tmp_path / "custom.toml"


def test_build_store_orders_environment_before_file(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text('[datasource]\nurl = "jdbc:mysql://file"\n')

    store = build_store({"DATASOURCE_URL": "jdbc:mysql://env"}, config_path)

    assert store.layer_names() == (ENVIRONMENT_LAYER_NAME, CONFIG_FILE_LAYER_NAME)
    assert store[URL_PROPERTY] == "jdbc:mysql://env"


def test_fail_timeout_in_config_file_is_respected(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_text("[datasource.pool]\ninitialization-fail-timeout = 30\n")
    store = build_store({"MYSQLHOST": "db", "MYSQLUSER": "app"}, config_path)

    overrides = MysqlEnvironmentProcessor().process(store)
    settings = DataSourceSettings.from_store(store)

    assert FAIL_TIMEOUT_PROPERTY not in overrides
    assert settings is not None
    assert settings.url.startswith("jdbc:mysql://db:3306?")
    assert settings.username == "app"
    assert settings.password is None
    assert settings.initialization_fail_timeout == 30


def test_settings_absent_without_url() -> None:
    assert DataSourceSettings.from_store(ConfigStore()) is None


def test_settings_ignore_non_numeric_timeout() -> None:
    store = ConfigStore(
        [ConfigLayer("file", {URL_PROPERTY: "jdbc:mysql://h", FAIL_TIMEOUT_PROPERTY: "soon"})]
    )

    settings = DataSourceSettings.from_store(store)

    assert settings is not None
    assert settings.initialization_fail_timeout is None


def test_load_config_file_ignores_undecodable_bytes(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_bytes(b"\xff\n")

    assert load_config_file(config_path) == {}


def test_build_store_survives_undecodable_config_file(tmp_path: Path) -> None:
    config_path = tmp_path / "config.toml"
    config_path.write_bytes(b"\xff\n")

    store = build_store({"MYSQLHOST": "db"}, config_path)

    assert store.layer_names() == (ENVIRONMENT_LAYER_NAME, CONFIG_FILE_LAYER_NAME)
    assert store["MYSQLHOST"] == "db"


@pytest.mark.parametrize(("raw", "expected"), [(" 15 ", 15), ("soon", None), (None, None), (7, 7)])
def test_settings_coerce_fail_timeout(raw: object, expected: int | None) -> None:
    settings = DataSourceSettings(url="jdbc:mysql://h", initialization_fail_timeout=raw)

    assert settings.initialization_fail_timeout == expected

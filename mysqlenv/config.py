"""Configuration file loading and the typed datasource view."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

import tomllib

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .resolver import FAIL_TIMEOUT_PROPERTY, PASSWORD_PROPERTY, URL_PROPERTY, USERNAME_PROPERTY
from .store import ConfigLayer, ConfigStore, EnvironmentLayer

LOG = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".config" / "mysqlenv" / "config.toml"
CONFIG_FILE_VARIABLE = "MYSQLENV_CONFIG"

ENVIRONMENT_LAYER_NAME = "environment"
CONFIG_FILE_LAYER_NAME = "configFile"


class DataSourceSettings(BaseModel):
    """Datasource settings as a connection pool reads them."""

    model_config = ConfigDict(frozen=True)

    url: str
    username: str | None = None
    password: str | None = None
    initialization_fail_timeout: int | None = None

    @field_validator("initialization_fail_timeout", mode="before")
    @classmethod
    def _drop_non_numeric_timeout(cls, value: object) -> object:
        if value is None or isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            LOG.warning("Ignoring non-numeric %s=%r", FAIL_TIMEOUT_PROPERTY, value)
            return None

    @classmethod
    def from_store(cls, store: Mapping[str, str]) -> DataSourceSettings | None:
        """Bind from ``store``; ``None`` when no URL is configured."""

        url = store.get(URL_PROPERTY)
        if not url:
            return None
        try:
            return cls(
                url=url,
                username=store.get(USERNAME_PROPERTY),
                password=store.get(PASSWORD_PROPERTY),
                initialization_fail_timeout=store.get(FAIL_TIMEOUT_PROPERTY),
            )
        except ValidationError:
            LOG.warning("Datasource settings in the configuration store are invalid")
            return None


def config_file_path(environ: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if environ is None else environ
    override = environ.get(CONFIG_FILE_VARIABLE)
    if override and override.strip():
        return Path(override.strip()).expanduser()
    return CONFIG_FILE


def load_config_file(path: Path | None = None) -> dict[str, object]:
    """Read the TOML file as dotted keys; fall back to nothing if missing."""

    path = path or CONFIG_FILE
    try:
        with path.open("rb") as handle:
            raw = tomllib.load(handle)
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, UnicodeDecodeError, OSError) as exc:
        LOG.warning("Ignoring unreadable config file %s: %s", path, exc)
        return {}
    return _flatten(raw)


def _flatten(table: Mapping[str, object], prefix: str = "") -> dict[str, object]:
    flat: dict[str, object] = {}
    for key, value in table.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{name}."))
        elif isinstance(value, bool):
            flat[name] = str(value).lower()
        else:
            flat[name] = value
    return flat


def build_store(
    environ: Mapping[str, str] | None = None,
    config_file: Path | None = None,
) -> ConfigStore:
    """Environment variables ahead of the optional config file."""

    environ = dict(os.environ) if environ is None else environ
    path = config_file or config_file_path(environ)
    return ConfigStore(
        [
            EnvironmentLayer(ENVIRONMENT_LAYER_NAME, environ),
            ConfigLayer(CONFIG_FILE_LAYER_NAME, load_config_file(path)),
        ]
    )


__all__ = [
    "CONFIG_FILE",
    "CONFIG_FILE_LAYER_NAME",
    "CONFIG_FILE_VARIABLE",
    "DataSourceSettings",
    "ENVIRONMENT_LAYER_NAME",
    "build_store",
    "config_file_path",
    "load_config_file",
]

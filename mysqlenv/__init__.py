"""Resolve MySQL datasource settings from platform-injected environment variables."""

from __future__ import annotations

__version__ = "0.1.0"

from .config import DataSourceSettings, build_store, load_config_file
from .models import DEFAULT_PORT, ConnectionDescriptor
from .options import DEFAULT_OPTIONS, ParameterSet, build_jdbc_url, merge_default_options, parse_query
from .overlay import OVERRIDE_LAYER_NAME, MysqlEnvironmentProcessor, install_overrides
from .parser import parse_connection_string
from .resolver import build_overrides, resolve_configuration, resolve_overrides
from .store import ConfigLayer, ConfigStore, EnvironmentLayer, LayerNotFoundError

__all__ = [
    "ConfigLayer",
    "ConfigStore",
    "ConnectionDescriptor",
    "DEFAULT_OPTIONS",
    "DEFAULT_PORT",
    "DataSourceSettings",
    "EnvironmentLayer",
    "LayerNotFoundError",
    "MysqlEnvironmentProcessor",
    "OVERRIDE_LAYER_NAME",
    "ParameterSet",
    "__version__",
    "build_jdbc_url",
    "build_overrides",
    "build_store",
    "install_overrides",
    "load_config_file",
    "merge_default_options",
    "parse_connection_string",
    "parse_query",
    "resolve_configuration",
    "resolve_overrides",
]

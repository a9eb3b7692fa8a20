"""Install resolved datasource overrides into a configuration store."""

from __future__ import annotations

import logging
from typing import Mapping

from .resolver import CONNECTION_STRING_VARIABLES, build_overrides, resolve_configuration
from .store import ConfigLayer, ConfigStore

LOG = logging.getLogger(__name__)

OVERRIDE_LAYER_NAME = "mysqlenvOverrides"


def install_overrides(
    store: ConfigStore,
    overrides: Mapping[str, str],
    name: str = OVERRIDE_LAYER_NAME,
) -> bool:
    """Put ``overrides`` ahead of every other layer; returns False when empty."""

    if not overrides:
        return False
    layer = ConfigLayer(name, overrides)
    if store.contains_layer(name):
        store.replace(name, layer)
    else:
        store.add_first(layer)
    return True


class MysqlEnvironmentProcessor:
    """Runs once at startup, before anything reads the datasource settings."""

    def __init__(self, layer_name: str = OVERRIDE_LAYER_NAME) -> None:
        self._layer_name = layer_name

    def process(self, store: ConfigStore) -> dict[str, str]:
        """Resolve the datasource against ``store`` and install the overlay."""

        # Ignore a previous run's overlay so re-entry sees the same inputs.
        source = store.without(self._layer_name)
        descriptor = resolve_configuration(source)
        if descriptor is None:
            LOG.warning(
                "No MySQL environment variables detected. Expected one of %s "
                "or host/port variables such as MYSQLHOST.",
                list(CONNECTION_STRING_VARIABLES),
            )
            return {}

        overrides = build_overrides(descriptor, source)
        install_overrides(store, overrides, self._layer_name)
        LOG.info(
            "Detected MySQL configuration from %s (host: %s, port: %s, database: %s, user provided: %s)",
            descriptor.source,
            descriptor.host,
            descriptor.port,
            descriptor.database if descriptor.database is not None else "<default>",
            descriptor.username is not None,
        )
        LOG.debug("Effective JDBC URL: %s", descriptor.url)
        return overrides


__all__ = ["MysqlEnvironmentProcessor", "OVERRIDE_LAYER_NAME", "install_overrides"]

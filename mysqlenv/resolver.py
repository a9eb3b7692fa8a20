"""Resolve MySQL datasource overrides from platform-injected variables."""

from __future__ import annotations

import logging
from typing import Mapping

from .discrete import (
    PASSWORD_VARIABLES,
    USERNAME_VARIABLES,
    first_present,
    resolve_from_discrete_variables,
)
from .models import ConnectionDescriptor
from .parser import parse_connection_string
from .store import ConfigStore, EnvironmentLayer

LOG = logging.getLogger(__name__)

CONNECTION_STRING_VARIABLES = (
    "MYSQL_URL",
    "MYSQL_PUBLIC_URL",
    "DATABASE_URL",
    "CLEARDB_DATABASE_URL",
    "JAWSDB_URL",
    "JAWSDB_MARIA_URL",
)

URL_PROPERTY = "datasource.url"
USERNAME_PROPERTY = "datasource.username"
PASSWORD_PROPERTY = "datasource.password"
FAIL_TIMEOUT_PROPERTY = "datasource.pool.initialization-fail-timeout"
RETRY_FOREVER = "0"


def resolve_from_connection_string(environ: Mapping[str, str]) -> ConnectionDescriptor | None:
    """Return the first connection-string variable that parses as MySQL."""

    for variable in CONNECTION_STRING_VARIABLES:
        value = environ.get(variable)
        if value is None or not value.strip():
            continue
        parsed = parse_connection_string(value.strip(), variable)
        if parsed is not None:
            return parsed
    return None


def enrich_with_explicit_credentials(
    descriptor: ConnectionDescriptor,
    environ: Mapping[str, str],
) -> ConnectionDescriptor:
    """Fill credentials the connection string left out; never replace supplied ones."""

    username = descriptor.username
    if username is None:
        username = first_present(environ, USERNAME_VARIABLES)
    password = descriptor.password
    if password is None:
        password = first_present(environ, PASSWORD_VARIABLES)
    return descriptor.with_credentials(username, password)


def resolve_configuration(environ: Mapping[str, str]) -> ConnectionDescriptor | None:
    """Connection strings first, then discrete variables; ``None`` if neither applies."""

    parsed = resolve_from_connection_string(environ)
    if parsed is not None:
        return enrich_with_explicit_credentials(parsed, environ)
    return resolve_from_discrete_variables(environ)


def _as_store(environ: Mapping[str, str]) -> ConfigStore:
    """Plain mappings are read like process environment variables."""

    if isinstance(environ, ConfigStore):
        return environ
    return ConfigStore([EnvironmentLayer("environment", environ)])


def build_overrides(descriptor: ConnectionDescriptor, environ: Mapping[str, str]) -> dict[str, str]:
    overrides: dict[str, str] = {URL_PROPERTY: descriptor.url}
    if descriptor.username is not None:
        overrides[USERNAME_PROPERTY] = descriptor.username
    if descriptor.password is not None:
        overrides[PASSWORD_PROPERTY] = descriptor.password
    if FAIL_TIMEOUT_PROPERTY in _as_store(environ):
        LOG.debug("Respecting existing value for %s", FAIL_TIMEOUT_PROPERTY)
    else:
        overrides[FAIL_TIMEOUT_PROPERTY] = RETRY_FOREVER
        LOG.info(
            "Configured %s=%s to keep retrying while the MySQL service becomes available",
            FAIL_TIMEOUT_PROPERTY,
            RETRY_FOREVER,
        )
    return overrides


def resolve_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    """Override set for ``environ``; empty when no MySQL configuration was found."""

    descriptor = resolve_configuration(environ)
    if descriptor is None:
        return {}
    return build_overrides(descriptor, environ)


__all__ = [
    "CONNECTION_STRING_VARIABLES",
    "FAIL_TIMEOUT_PROPERTY",
    "PASSWORD_PROPERTY",
    "RETRY_FOREVER",
    "URL_PROPERTY",
    "USERNAME_PROPERTY",
    "build_overrides",
    "enrich_with_explicit_credentials",
    "resolve_configuration",
    "resolve_from_connection_string",
    "resolve_overrides",
]

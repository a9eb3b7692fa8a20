"""Assemble a connection descriptor from separately named variables."""

from __future__ import annotations

from typing import Mapping, Sequence

from .models import DEFAULT_PORT, ConnectionDescriptor
from .options import build_jdbc_url

DISCRETE_SOURCE = "environment variables"

HOST_VARIABLES = ("MYSQLHOST", "MYSQLHOSTNAME", "MYSQL_HOST", "MYSQL_HOSTNAME")
PROXY_HOST_VARIABLES = ("RAILWAY_TCP_PROXY_DOMAIN", "RAILWAY_TCP_PROXY_HOST", "RAILWAY_TCP_HOST")
PORT_VARIABLES = ("MYSQLPORT", "MYSQL_PORT")
PROXY_PORT_VARIABLES = ("RAILWAY_TCP_PROXY_PORT", "RAILWAY_TCP_APPLICATION_PORT", "RAILWAY_TCP_PORT")
DATABASE_VARIABLES = ("MYSQLDATABASE", "MYSQL_DATABASE")
USERNAME_VARIABLES = ("MYSQLUSER", "MYSQL_USER", "MYSQLUSERNAME", "MYSQL_USERNAME")
PASSWORD_VARIABLES = ("MYSQLPASSWORD", "MYSQL_PASSWORD", "MYSQL_ROOT_PASSWORD")


def first_non_blank(environ: Mapping[str, str], names: Sequence[str]) -> str | None:
    """First value with visible content, stripped."""

    for name in names:
        value = environ.get(name)
        if value is not None and value.strip():
            return value.strip()
    return None


def first_present(environ: Mapping[str, str], names: Sequence[str]) -> str | None:
    """First variable that is set at all; an empty value counts."""

    for name in names:
        value = environ.get(name)
        if value is not None:
            return value.strip()
    return None


def parse_port(value: str | None, default: int = DEFAULT_PORT) -> int:
    if value is None:
        return default
    value = value.strip()
    if not value.isascii() or not value.isdigit():
        return default
    port = int(value)
    return port if port > 0 else default


def resolve_from_discrete_variables(environ: Mapping[str, str]) -> ConnectionDescriptor | None:
    """Build a descriptor from host/port/user variables, or ``None`` without a host."""

    host = first_non_blank(environ, HOST_VARIABLES) or first_non_blank(environ, PROXY_HOST_VARIABLES)
    if host is None:
        return None

    port_value = first_non_blank(environ, PORT_VARIABLES) or first_non_blank(environ, PROXY_PORT_VARIABLES)
    port = parse_port(port_value)
    database = first_non_blank(environ, DATABASE_VARIABLES)

    return ConnectionDescriptor(
        url=build_jdbc_url(host, port, database),
        host=host,
        port=port,
        database=database,
        username=first_present(environ, USERNAME_VARIABLES),
        password=first_present(environ, PASSWORD_VARIABLES),
        source=DISCRETE_SOURCE,
    )


__all__ = [
    "DATABASE_VARIABLES",
    "DISCRETE_SOURCE",
    "HOST_VARIABLES",
    "PASSWORD_VARIABLES",
    "PORT_VARIABLES",
    "PROXY_HOST_VARIABLES",
    "PROXY_PORT_VARIABLES",
    "USERNAME_VARIABLES",
    "first_non_blank",
    "first_present",
    "parse_port",
    "resolve_from_discrete_variables",
]

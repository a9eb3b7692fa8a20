"""Parse free-form MySQL connection strings into connection descriptors."""

from __future__ import annotations

import logging
import re
from urllib.parse import SplitResult, quote, unquote, urlsplit

from .models import DEFAULT_PORT, ConnectionDescriptor
from .options import build_jdbc_url, parse_query

LOG = logging.getLogger(__name__)

EXPECTED_SCHEME = "mysql"
DRIVER_PREFIX = "jdbc:"

# Characters a strict URI parser refuses anywhere, plus dangling escapes.
_ILLEGAL_URI_CHARS = re.compile(r'[\s"<>\\^`{|}]|%(?![0-9A-Fa-f]{2})')
_USER_INFO_SAFE = "-_.~:"


def parse_connection_string(raw_value: str, source: str) -> ConnectionDescriptor | None:
    """Return a descriptor for ``raw_value`` or ``None`` when it does not apply.

    A value that fails strict parsing (usually because of unescaped symbols in
    the password) gets one repair attempt: its credentials are percent-encoded
    and the result is parsed again. Nothing here raises.
    """

    candidate = raw_value
    if candidate.startswith(DRIVER_PREFIX):
        candidate = candidate[len(DRIVER_PREFIX):]

    parts = _split_uri(candidate)
    if parts is None:
        LOG.debug("Ignoring %s: not a parsable connection string", source)
        return None

    if parts.scheme and parts.scheme.lower() != EXPECTED_SCHEME:
        LOG.debug("Ignoring %s: unsupported scheme '%s'", source, parts.scheme)
        return None

    user_info, _, host_info = parts.netloc.rpartition("@")
    host = _host_from(host_info)
    if not host.strip():
        return None

    port = parts.port
    if port is None or port <= 0:
        port = DEFAULT_PORT

    path = parts.path
    if path.startswith("/"):
        path = path[1:]
    raw_database = path if path.strip() else None

    username: str | None = None
    password: str | None = None
    if user_info.strip():
        raw_user, separator, raw_password = user_info.partition(":")
        username = unquote(raw_user)
        if separator:
            password = unquote(raw_password)

    url = build_jdbc_url(host, port, raw_database, parse_query(parts.query))
    return ConnectionDescriptor(
        url=url,
        host=host,
        port=port,
        database=unquote(raw_database) if raw_database is not None else None,
        username=username,
        password=password,
        source=source,
    )


def _split_uri(value: str) -> SplitResult | None:
    try:
        return _strict_split(value)
    except ValueError:
        pass
    repaired = _encode_credentials(value)
    if repaired is None:
        return None
    try:
        return _strict_split(repaired)
    except ValueError:
        return None


def _strict_split(value: str) -> SplitResult:
    """``urlsplit`` with the checks a strict RFC 3986 parser performs."""

    if _ILLEGAL_URI_CHARS.search(value):
        raise ValueError("illegal character in URI")
    parts = urlsplit(value)
    if parts.netloc.count("@") > 1:
        raise ValueError("unescaped '@' in authority")
    # Raises ValueError for a non-numeric or out-of-range port.
    parts.port
    return parts


def _encode_credentials(value: str) -> str | None:
    scheme, separator, remainder = value.partition("://")
    if not separator:
        return None
    first_at = remainder.find("@")
    if first_at < 0:
        return None
    # Credentials run up to the last '@' before the path or query starts.
    boundary = len(remainder)
    for marker in ("/", "?"):
        index = remainder.find(marker, first_at)
        if index >= 0:
            boundary = min(boundary, index)
    at_index = remainder.rfind("@", 0, boundary)
    user_info = remainder[:at_index]
    host_and_path = remainder[at_index + 1:]
    return f"{scheme}://{quote(user_info, safe=_USER_INFO_SAFE)}@{host_and_path}"


def _host_from(host_info: str) -> str:
    if host_info.startswith("["):
        end = host_info.find("]")
        return host_info[: end + 1] if end >= 0 else ""
    return host_info.partition(":")[0]


__all__ = ["DRIVER_PREFIX", "EXPECTED_SCHEME", "parse_connection_string"]

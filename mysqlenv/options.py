"""Driver option handling and JDBC URL rendering."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

JDBC_PREFIX = "jdbc:mysql://"

DEFAULT_OPTIONS: Mapping[str, str] = MappingProxyType(
    {
        "useSSL": "false",
        "serverTimezone": "UTC",
        "allowPublicKeyRetrieval": "true",
        "useUnicode": "true",
        "characterEncoding": "utf8",
    }
)


class ParameterSet:
    """Ordered driver options; presence checks ignore key casing."""

    def __init__(self, items: Iterable[tuple[str, str]] | None = None) -> None:
        self._values: dict[str, str] = {}
        for key, value in items or ():
            self.add_if_absent(key, value)

    def add_if_absent(self, key: str, value: str | None) -> bool:
        """Store ``key`` unless it is blank or already present verbatim."""

        if not key or not key.strip() or key in self._values:
            return False
        self._values[key] = value or ""
        return True

    def contains_ignore_case(self, key: str) -> bool:
        folded = key.casefold()
        return any(existing.casefold() == folded for existing in self._values)

    def items(self) -> list[tuple[str, str]]:
        return list(self._values.items())

    def copy(self) -> ParameterSet:
        return ParameterSet(self._values.items())

    def render(self) -> str:
        """Serialize as a query string (``key`` alone for empty values)."""

        return "&".join(
            key if not value else f"{key}={value}"
            for key, value in self._values.items()
        )

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParameterSet({self.items()!r})"


def parse_query(query: str | None) -> ParameterSet:
    """Parse ``a=1&b&c=3`` pairs; the first occurrence of a key wins."""

    parameters = ParameterSet()
    if not query or not query.strip():
        return parameters
    for pair in query.split("&"):
        if not pair.strip():
            continue
        key, _, value = pair.partition("=")
        parameters.add_if_absent(key, value)
    return parameters


def merge_default_options(
    parameters: ParameterSet | None,
    defaults: Mapping[str, str] = DEFAULT_OPTIONS,
) -> ParameterSet:
    """Append each default whose key is not already present in any casing."""

    merged = parameters.copy() if parameters is not None else ParameterSet()
    for key, value in defaults.items():
        if not merged.contains_ignore_case(key):
            merged.add_if_absent(key, value)
    return merged


def build_jdbc_url(
    host: str,
    port: int,
    database: str | None,
    parameters: ParameterSet | None = None,
) -> str:
    """Render ``jdbc:mysql://host[:port][/database][?options]``."""

    url = JDBC_PREFIX + host
    if port > 0:
        url += f":{port}"
    if database and database.strip():
        url += f"/{database}"
    query = merge_default_options(parameters).render()
    if query:
        url += f"?{query}"
    return url


__all__ = [
    "DEFAULT_OPTIONS",
    "JDBC_PREFIX",
    "ParameterSet",
    "build_jdbc_url",
    "merge_default_options",
    "parse_query",
]

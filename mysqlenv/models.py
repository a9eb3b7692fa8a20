"""Shared dataclasses used across the resolver modules."""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_PORT = 3306


@dataclass(frozen=True, slots=True)
class ConnectionDescriptor:
    """Resolved MySQL connection target.

    ``username`` and ``password`` are ``None`` when no value was supplied and
    ``""`` when the platform supplied an explicitly empty value.
    """

    url: str
    host: str
    port: int = DEFAULT_PORT
    database: str | None = None
    username: str | None = None
    password: str | None = None
    source: str = ""

    def with_credentials(self, username: str | None, password: str | None) -> ConnectionDescriptor:
        """Return a copy carrying the given credentials."""

        if username == self.username and password == self.password:
            return self
        return replace(self, username=username, password=password)


__all__ = ["ConnectionDescriptor", "DEFAULT_PORT"]

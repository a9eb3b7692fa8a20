"""Layered configuration store the datasource overrides are written into."""

from __future__ import annotations

from typing import Iterable, Iterator, Mapping


class LayerNotFoundError(LookupError):
    """Raised when a named configuration layer is not part of the store."""


class ConfigLayer:
    """Named, ordered set of configuration values."""

    def __init__(self, name: str, values: Mapping[str, object] | None = None) -> None:
        self.name = name
        self._values: dict[str, object] = dict(values or {})

    def get(self, key: str) -> object | None:
        return self._values.get(key)

    def keys(self) -> Iterable[str]:
        return self._values.keys()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, keys={list(self.keys())!r})"


class EnvironmentLayer(ConfigLayer):
    """Layer over process environment variables with relaxed key matching.

    ``datasource.pool.initialization-fail-timeout`` is also found as
    ``datasource_pool_initialization_fail_timeout`` and
    ``DATASOURCE_POOL_INITIALIZATION_FAIL_TIMEOUT``.
    """

    def __init__(self, name: str, environ: Mapping[str, str]) -> None:
        super().__init__(name, environ)

    def get(self, key: str) -> object | None:
        for candidate in _relaxed_names(key):
            value = self._values.get(candidate)
            if value is not None:
                return value
        return None


def _relaxed_names(key: str) -> tuple[str, ...]:
    underscored = key.replace(".", "_").replace("-", "_")
    names = [key]
    for candidate in (underscored, underscored.upper()):
        if candidate not in names:
            names.append(candidate)
    return tuple(names)


class ConfigStore(Mapping[str, str]):
    """Ordered configuration layers, highest precedence first."""

    def __init__(self, layers: Iterable[ConfigLayer] = ()) -> None:
        self._layers: list[ConfigLayer] = []
        for layer in layers:
            self.add_last(layer)

    def add_first(self, layer: ConfigLayer) -> None:
        self._discard(layer.name)
        self._layers.insert(0, layer)

    def add_last(self, layer: ConfigLayer) -> None:
        self._discard(layer.name)
        self._layers.append(layer)

    def replace(self, name: str, layer: ConfigLayer) -> None:
        """Swap the named layer for ``layer`` keeping its position."""

        index = self._index_of(name)
        self._layers[index] = layer

    def remove(self, name: str) -> ConfigLayer:
        return self._layers.pop(self._index_of(name))

    def contains_layer(self, name: str) -> bool:
        return any(layer.name == name for layer in self._layers)

    def get_layer(self, name: str) -> ConfigLayer:
        return self._layers[self._index_of(name)]

    def layer_names(self) -> tuple[str, ...]:
        return tuple(layer.name for layer in self._layers)

    def without(self, name: str) -> ConfigStore:
        """View of this store that skips the named layer."""

        return ConfigStore(layer for layer in self._layers if layer.name != name)

    def __getitem__(self, key: str) -> str:
        for layer in self._layers:
            value = layer.get(key)
            if value is not None:
                return str(value)
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for layer in self._layers:
            for key in layer.keys():
                if key not in seen:
                    seen.add(key)
                    yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def _index_of(self, name: str) -> int:
        for index, layer in enumerate(self._layers):
            if layer.name == name:
                return index
        raise LayerNotFoundError(f"Configuration layer '{name}' not found.")

    def _discard(self, name: str) -> None:
        self._layers = [layer for layer in self._layers if layer.name != name]


__all__ = ["ConfigLayer", "ConfigStore", "EnvironmentLayer", "LayerNotFoundError"]

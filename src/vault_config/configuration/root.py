"""Layered configuration host.

Configuration is an ordered list of providers (layers). Keys are
colon-delimited paths ("Database:Password") compared case-insensitively.
Reads walk the layers from last to first, so the layer added last wins.

    builder = ConfigurationBuilder()
    builder.add_in_memory_collection({"Database:Host": "db.internal"})
    builder.add(VaultConfigurationSource(environment="production", ...))
    configuration = builder.build()

    configuration["Database:Host"]           # "db.internal"
    configuration.get_section("Database")    # view over "Database:*"
    configuration.bind(DatabaseSettings, "Database")  # pydantic model

ConfigurationManager is builder and root at once: each source is built as
soon as it is added, so startup code can read the layers registered so far.

Thread-safety:
    Providers never mutate their snapshot in place on (re)load; they build a
    new dict and swap the reference, so a reader sees either the previous or
    the new complete snapshot.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from pydantic import BaseModel

from vault_config.domain.protocols import (
    ConfigurationProtocol,
    ConfigurationProviderProtocol,
    ConfigurationSourceProtocol,
)

KEY_DELIMITER = ":"

M = TypeVar("M", bound=BaseModel)

_INDEX = re.compile(r"^\d+$")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def _normalize(key: str) -> str:
    return key.casefold()


def combine_keys(*segments: str) -> str:
    """Join key segments with the configuration delimiter, skipping empties."""
    return KEY_DELIMITER.join(segment for segment in segments if segment)


class ConfigurationProvider:
    """Base configuration layer holding a case-insensitive snapshot.

    Subclasses override load() and publish data with _replace().
    """

    def __init__(self) -> None:
        # normalized key -> (original key, value)
        self._data: dict[str, tuple[str, str | None]] = {}
        self._reload_callbacks: list[Callable[[], None]] = []

    @property
    def can_load(self) -> bool:
        return True

    def load(self) -> None:
        """Load the layer's data. The base layer has nothing to load."""

    def try_get(self, key: str) -> tuple[bool, str | None]:
        entry = self._data.get(_normalize(key))
        if entry is None:
            return False, None
        return True, entry[1]

    def set(self, key: str, value: str | None) -> None:
        data = dict(self._data)
        data[_normalize(key)] = (key, value)
        self._data = data

    def keys(self) -> list[str]:
        return [original for original, _ in self._data.values()]

    def on_reload(self, callback: Callable[[], None]) -> None:
        self._reload_callbacks.append(callback)

    def close(self) -> None:
        """Release resources. The base layer holds none."""

    def _replace(self, values: Mapping[str, str | None]) -> None:
        self._data = {_normalize(key): (key, value) for key, value in values.items()}

    def _notify_reload(self) -> None:
        for callback in list(self._reload_callbacks):
            callback()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(keys={len(self._data)})"


class MemoryConfigurationProvider(ConfigurationProvider):
    """Layer backed by an in-memory mapping."""

    def __init__(self, initial_data: Mapping[str, str | None] | None = None) -> None:
        super().__init__()
        self._replace(initial_data or {})


@dataclass
class MemoryConfigurationSource:
    """Source for an in-memory layer.

    Attributes:
        initial_data: Flat colon-delimited keys and their values.
    """

    initial_data: Mapping[str, str | None] = field(default_factory=dict)

    def build(self, configuration: ConfigurationProtocol) -> MemoryConfigurationProvider:
        return MemoryConfigurationProvider(self.initial_data)


def _field_name(segment: str) -> str:
    """"ConnectionString" -> "connection_string", "HTTPPort" -> "http_port"."""
    segment = _ACRONYM_BOUNDARY.sub(r"\1_\2", segment)
    return _WORD_BOUNDARY.sub(r"\1_\2", segment).lower()


def _to_tree(flat: Mapping[str, str | None]) -> dict[str, Any]:
    tree: dict[str, Any] = {}
    for key, value in flat.items():
        node = tree
        *parents, leaf = (_field_name(segment) for segment in key.split(KEY_DELIMITER))
        for segment in parents:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = node[segment] = {}
            node = child
        if not isinstance(node.get(leaf), dict):
            node[leaf] = value
    return _lists_from_indexes(tree)


def _lists_from_indexes(node: Any) -> Any:
    # {"0": a, "1": b} -> [a, b] when the keys are exactly 0..n-1
    if not isinstance(node, dict):
        return node
    converted = {key: _lists_from_indexes(value) for key, value in node.items()}
    if converted and all(_INDEX.match(key) for key in converted):
        indexes = sorted(int(key) for key in converted)
        if indexes == list(range(len(indexes))):
            return [converted[str(index)] for index in indexes]
    return converted


class _ConfigurationView:
    """Read operations shared by the root and its sections."""

    def _prefix(self) -> str:
        raise NotImplementedError

    def _root(self) -> ConfigurationRoot:
        raise NotImplementedError

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value of ``key`` (relative to this view) or ``default``."""
        found, value = self._root().try_get(combine_keys(self._prefix(), key))
        return value if found else default

    def __getitem__(self, key: str) -> str | None:
        found, value = self._root().try_get(combine_keys(self._prefix(), key))
        if not found:
            raise KeyError(key)
        return value

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        found, _ = self._root().try_get(combine_keys(self._prefix(), key))
        return found

    def get_section(self, key: str) -> ConfigurationSection:
        """Return a view over every key below ``key``."""
        return ConfigurationSection(self._root(), combine_keys(self._prefix(), key))

    def as_dict(self) -> dict[str, str | None]:
        """Merged flat snapshot of this view, keys relative to the view."""
        prefix = self._prefix()
        merged = self._root()._merged()
        if not prefix:
            return dict(merged.values())

        marker = _normalize(prefix + KEY_DELIMITER)
        start = len(prefix) + len(KEY_DELIMITER)
        return {
            original[start:]: value
            for normalized, (original, value) in merged.items()
            if normalized.startswith(marker)
        }

    def bind(self, model: type[M], section: str | None = None) -> M:
        """Bind a pydantic model from the keys below ``section``.

        Key segments are converted to snake_case field names
        ("ConnectionString" -> connection_string). Nested models map to nested
        segments and list fields to index segments ("Hosts:0", "Hosts:1").

        Raises:
            pydantic.ValidationError: If the values do not satisfy the model.
        """
        view = self.get_section(section) if section else self
        return model.model_validate(_to_tree(view.as_dict()))


class ConfigurationSection(_ConfigurationView):
    """Read-only view over the keys below a path."""

    def __init__(self, root: ConfigurationRoot, path: str) -> None:
        self._owner = root
        self.path = path

    @property
    def key(self) -> str:
        """Last segment of the section path."""
        return self.path.rsplit(KEY_DELIMITER, 1)[-1]

    @property
    def value(self) -> str | None:
        """Value stored at the section path itself, if any."""
        return self._owner.get(self.path)

    def _prefix(self) -> str:
        return self.path

    def _root(self) -> ConfigurationRoot:
        return self._owner

    def __repr__(self) -> str:
        return f"ConfigurationSection(path={self.path!r})"


class ConfigurationRoot(_ConfigurationView):
    """Read side over an ordered list of providers (last wins)."""

    def __init__(
        self, providers: Iterable[ConfigurationProviderProtocol] = ()
    ) -> None:
        self._providers: list[ConfigurationProviderProtocol] = list(providers)

    @property
    def providers(self) -> tuple[ConfigurationProviderProtocol, ...]:
        return tuple(self._providers)

    def _prefix(self) -> str:
        return ""

    def _root(self) -> ConfigurationRoot:
        return self

    def try_get(self, key: str) -> tuple[bool, str | None]:
        for provider in reversed(self._providers):
            found, value = provider.try_get(key)
            if found:
                return True, value
        return False, None

    def _merged(self) -> dict[str, tuple[str, str | None]]:
        merged: dict[str, tuple[str, str | None]] = {}
        for provider in self._providers:
            for key in provider.keys():
                _, value = provider.try_get(key)
                merged[_normalize(key)] = (key, value)
        return merged

    def keys(self) -> list[str]:
        """Every key defined by any layer (casing from the winning layer)."""
        return [original for original, _ in self._merged().values()]

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._merged())

    def on_change(self, callback: Callable[[], None]) -> None:
        """Register ``callback`` on every layer that reloads."""
        for provider in self._providers:
            provider.on_reload(callback)

    def reload(self) -> None:
        """Reload every layer in order.

        Layers still waiting for explicit initialization (a Vault layer
        before initialize_vault_providers()) are skipped.
        """
        for provider in self._providers:
            if provider.can_load:
                provider.load()

    def close(self) -> None:
        """Close every layer (stops background reload threads)."""
        for provider in reversed(self._providers):
            provider.close()

    def __enter__(self) -> ConfigurationRoot:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(providers={len(self._providers)})"


class ConfigurationBuilder:
    """Collects sources and builds a ConfigurationRoot."""

    def __init__(self) -> None:
        self._sources: list[ConfigurationSourceProtocol] = []

    @property
    def sources(self) -> tuple[ConfigurationSourceProtocol, ...]:
        return tuple(self._sources)

    def add(self, source: ConfigurationSourceProtocol) -> ConfigurationBuilder:
        self._sources.append(source)
        return self

    def add_in_memory_collection(
        self, data: Mapping[str, str | None] | None = None
    ) -> ConfigurationBuilder:
        return self.add(MemoryConfigurationSource(dict(data or {})))

    def build(self) -> ConfigurationRoot:
        """Build each source in order; each sees the layers before it."""
        providers: list[ConfigurationProviderProtocol] = []
        for source in self._sources:
            providers.append(source.build(ConfigurationRoot(providers)))
        return ConfigurationRoot(providers)


class ConfigurationManager(ConfigurationRoot):
    """Mutable configuration: a builder whose layers are live immediately."""

    def __init__(self) -> None:
        super().__init__()
        self._sources: list[ConfigurationSourceProtocol] = []

    @property
    def sources(self) -> tuple[ConfigurationSourceProtocol, ...]:
        return tuple(self._sources)

    def add(self, source: ConfigurationSourceProtocol) -> ConfigurationManager:
        """Build ``source`` against the current layers and append it."""
        provider = source.build(ConfigurationRoot(self._providers))
        self._sources.append(source)
        self._providers.append(provider)
        return self

    def add_in_memory_collection(
        self, data: Mapping[str, str | None] | None = None
    ) -> ConfigurationManager:
        return self.add(MemoryConfigurationSource(dict(data or {})))

    def build(self) -> ConfigurationRoot:
        return self

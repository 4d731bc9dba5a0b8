"""Layered configuration protocols.

Configuration is an ordered list of providers. Keys are colon-delimited
hierarchical paths ("Database:Password") compared case-insensitively, and
the provider added last wins on conflict.

    ConfigurationSourceProtocol  --build()-->  ConfigurationProviderProtocol
                                                     │
    ConfigurationProtocol (read side over all providers, last wins)
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Protocol


class ConfigurationProtocol(Protocol):
    """Read side of a layered configuration."""

    def get(self, key: str, default: str | None = None) -> str | None:
        """Return the value of ``key`` from the highest-priority provider.

        Args:
            key: Colon-delimited key (case-insensitive).
            default: Returned when no provider defines the key.
        """
        ...

    def __contains__(self, key: object) -> bool:
        """True when any provider defines ``key`` (even with a None value)."""
        ...


class ConfigurationProviderProtocol(Protocol):
    """One configuration layer holding a key/value snapshot."""

    @property
    def can_load(self) -> bool:
        """False while the layer waits for explicit initialization."""
        ...

    def load(self) -> None:
        """(Re)load the layer's data."""
        ...

    def try_get(self, key: str) -> tuple[bool, str | None]:
        """Return (found, value) for ``key``."""
        ...

    def keys(self) -> Iterable[str]:
        """Keys defined by this layer (original casing)."""
        ...

    def on_reload(self, callback: Callable[[], None]) -> None:
        """Register a callback fired after the layer's data changes."""
        ...

    def close(self) -> None:
        """Release background resources (timers, threads)."""
        ...


class ConfigurationSourceProtocol(Protocol):
    """Factory for a configuration layer."""

    def build(self, configuration: ConfigurationProtocol) -> ConfigurationProviderProtocol:
        """Create the provider for this source.

        Args:
            configuration: The layers registered before this one, readable
                while the new layer is being built.

        Returns:
            A provider whose data is ready to be read (or, for deferred
            sources, a provider awaiting explicit initialization).
        """
        ...

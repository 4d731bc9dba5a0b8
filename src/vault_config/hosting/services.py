"""Minimal service registry for host applications.

Services are registered by type as process-lifetime singletons, either as a
ready instance or as a factory called on first resolution. The factory
receives the ServiceProvider so it can resolve its own dependencies.

    services = ServiceCollection()
    services.add_singleton(VaultOptions, options)
    services.add_singleton(VaultServiceProtocol, factory=lambda sp: VaultService.from_options(options))

    provider = services.build_service_provider()
    service = provider.get_required(VaultServiceProtocol)
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from typing import Any, TypeVar

from vault_config.core.enums import ErrorCode
from vault_config.core.errors import InvalidArgumentError, VaultConfigurationError

T = TypeVar("T")


class _Registration:
    """One singleton registration; resolves and caches its instance."""

    __slots__ = ("factory", "instance", "_lock", "_resolved")

    def __init__(
        self,
        instance: Any = None,
        factory: Callable[[ServiceProvider], Any] | None = None,
    ) -> None:
        self.instance = instance
        self.factory = factory
        self._resolved = factory is None
        self._lock = threading.RLock()

    @property
    def resolved(self) -> bool:
        return self._resolved

    def resolve(self, provider: ServiceProvider) -> Any:
        if self._resolved:
            return self.instance
        with self._lock:
            if not self._resolved:
                self.instance = self.factory(provider)  # type: ignore[misc]
                self._resolved = True
        return self.instance


class ServiceCollection:
    """Registrations keyed by service type (last registration wins)."""

    def __init__(self) -> None:
        self._registrations: dict[type, _Registration] = {}

    def add_singleton(
        self,
        service_type: type[T],
        instance: T | None = None,
        *,
        factory: Callable[[ServiceProvider], T] | None = None,
    ) -> ServiceCollection:
        """Register a singleton instance or factory for ``service_type``.

        Raises:
            InvalidArgumentError: Unless exactly one of instance / factory is given.
        """
        if (instance is None) == (factory is None):
            raise InvalidArgumentError(
                "instance", "Provide exactly one of instance or factory"
            )
        self._registrations[service_type] = _Registration(instance, factory)
        return self

    def contains(self, service_type: type) -> bool:
        return service_type in self._registrations

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._registrations)

    def __iter__(self) -> Iterator[type]:
        return iter(self._registrations)

    def build_service_provider(self) -> ServiceProvider:
        """Return a provider over the current registrations.

        Registrations are shared, so a singleton resolved through one
        provider is the same object in every other.
        """
        return ServiceProvider(dict(self._registrations))


class ServiceProvider:
    """Resolves registered singletons."""

    def __init__(self, registrations: dict[type, _Registration]) -> None:
        self._registrations = registrations

    def get(self, service_type: type[T]) -> T | None:
        """Return the singleton for ``service_type``, or None if not registered."""
        registration = self._registrations.get(service_type)
        if registration is None:
            return None
        return registration.resolve(self)

    def get_required(self, service_type: type[T]) -> T:
        """Return the singleton for ``service_type``.

        Raises:
            VaultConfigurationError: If nothing is registered (code
                SERVICE_NOT_REGISTERED).
        """
        service = self.get(service_type)
        if service is None:
            raise VaultConfigurationError(
                f"No service registered for {service_type.__name__}",
                code=ErrorCode.SERVICE_NOT_REGISTERED,
                details={"service_type": service_type.__name__},
            )
        return service

    def close(self) -> None:
        """Close every resolved singleton that has a close() method."""
        for registration in reversed(list(self._registrations.values())):
            if not registration.resolved:
                continue
            close = getattr(registration.instance, "close", None)
            if callable(close):
                close()

"""Vault configuration source (merge adapter).

Adds one configuration layer holding the flattened secrets of a single
environment. Added last, it wins over every layer registered before it.

Lifecycle:
    Unloaded --load()--> Loaded

    - The source loads as soon as it is built when a VaultService is already
      attached (add_vault).
    - A deferred source (no service yet) waits for
      initialize_vault_providers() to attach the service registered in the
      host and load it (two-step activation).

Loading waits on the async secret read through the startup join point,
bounded by ``timeout``. Each (re)load builds a new snapshot and swaps it in
whole.

Reload:
    With reload_on_change=True a daemon thread re-reads the secrets every
    reload_interval_seconds. Ticks never overlap a load already running for
    the same provider; a failed tick is logged and the previous snapshot is
    kept. Callbacks registered with on_reload() fire after each successful
    tick. close() stops the thread.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vault_config.configuration.root import (
    ConfigurationBuilder,
    ConfigurationManager,
    ConfigurationProvider,
    ConfigurationRoot,
)
from vault_config.core.enums import ErrorCode
from vault_config.core.errors import InvalidArgumentError, VaultConfigurationError
from vault_config.core.startup import run_blocking
from vault_config.domain.options import DEFAULT_STARTUP_TIMEOUT_SECONDS, VaultOptions
from vault_config.domain.protocols import (
    ConfigurationProtocol,
    LoggerProtocol,
    VaultServiceProtocol,
)
from vault_config.infrastructure.secrets.flattener import flatten_secrets

if TYPE_CHECKING:
    from vault_config.hosting.services import ServiceProvider

DEFAULT_RELOAD_INTERVAL_SECONDS = 300.0
RELOAD_THREAD_JOIN_SECONDS = 5.0


@dataclass(kw_only=True)
class VaultConfigurationSource:
    """Settings for a Vault configuration layer.

    Attributes:
        environment: Path under the mount point to read (e.g. "production").
        optional: On load failure, log a warning and keep an empty layer
            instead of raising.
        reload_on_change: Re-read the secrets periodically.
        reload_interval_seconds: Seconds between reloads.
        section_prefix: Section prepended to every key ("Vault" ->
            "Vault:Database:Password").
        add_unregistered_entries: When False, only keys already defined by an
            earlier layer are added (overrides only).
        vault_service: Service to read from; None defers loading until
            initialize_vault_providers().
        timeout: Upper bound in seconds for each load (None waits forever).
        logger: Optional logger (defaults to the container logger).
    """

    environment: str
    optional: bool = False
    reload_on_change: bool = False
    reload_interval_seconds: float = DEFAULT_RELOAD_INTERVAL_SECONDS
    section_prefix: str | None = None
    add_unregistered_entries: bool = True
    vault_service: VaultServiceProtocol | None = None
    timeout: float | None = DEFAULT_STARTUP_TIMEOUT_SECONDS
    logger: LoggerProtocol | None = None

    def __post_init__(self) -> None:
        if not self.environment or not self.environment.strip():
            raise InvalidArgumentError("environment")

    def build(self, configuration: ConfigurationProtocol) -> VaultConfigurationProvider:
        """Create the provider, loading it now when a service is attached.

        Args:
            configuration: Layers registered before this one; used to filter
                unregistered keys.
        """
        if self.reload_interval_seconds <= 0:
            raise VaultConfigurationError(
                "reload_interval_seconds must be greater than 0 "
                f"(got {self.reload_interval_seconds})",
                code=ErrorCode.INVALID_FIELD_VALUE,
                details={"field": "reload_interval_seconds"},
            )

        provider = VaultConfigurationProvider(self, configuration)
        if self.vault_service is not None:
            provider.load()
        return provider


class VaultConfigurationProvider(ConfigurationProvider):
    """Configuration layer backed by one Vault environment."""

    def __init__(
        self, source: VaultConfigurationSource, configuration: ConfigurationProtocol
    ) -> None:
        super().__init__()
        self._source = source
        self._existing = configuration
        self._service = source.vault_service

        logger = source.logger
        if logger is None:
            from vault_config.core.container import get_logger

            logger = get_logger()
        self._logger = logger.bind(source="vault", environment=source.environment)

        self._load_lock = threading.Lock()
        self._stop_reload = threading.Event()
        self._reload_thread: threading.Thread | None = None
        self._loaded = False

    @property
    def source(self) -> VaultConfigurationSource:
        return self._source

    @property
    def loaded(self) -> bool:
        """True once load() has completed (an optional failure counts)."""
        return self._loaded

    @property
    def has_service(self) -> bool:
        return self._service is not None

    @property
    def can_load(self) -> bool:
        """False for a deferred layer until a service is attached."""
        return self._service is not None

    def attach_service(self, service: VaultServiceProtocol) -> None:
        """Attach the service a deferred provider reads from."""
        self._service = service

    def load(self) -> None:
        """Read, flatten and publish the environment's secrets.

        Raises:
            VaultConfigurationError: If no service is attached (code
                SERVICE_NOT_REGISTERED) and the source is not optional.
            SecretStoreError: If the read fails or times out and the source
                is not optional.
            VaultError: Any other failure of the service, unless optional.
        """
        service = self._service
        if service is None:
            if not self._source.optional:
                raise VaultConfigurationError(
                    "No Vault service is attached to the configuration source for "
                    f"environment '{self._source.environment}'; register one with "
                    "add_vault_service() and call initialize_vault_providers()",
                    code=ErrorCode.SERVICE_NOT_REGISTERED,
                    details={"environment": self._source.environment},
                )
            self._logger.warning("Optional Vault configuration has no service attached")
            return

        with self._load_lock:
            try:
                self._refresh(service)
            except Exception as e:
                if not self._source.optional:
                    raise
                self._logger.warning(
                    "Optional Vault configuration could not be loaded",
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
        self._loaded = True

        if self._source.reload_on_change:
            self._start_reload_thread()

    def reload(self) -> bool:
        """Run one reload tick.

        Skipped when a load is already in progress. Failures are logged and
        the current snapshot is kept.

        Returns:
            True when new data was published and callbacks fired.
        """
        service = self._service
        if service is None:
            self._logger.debug("Vault reload skipped, no service attached")
            return False
        if not self._load_lock.acquire(blocking=False):
            self._logger.debug("Vault reload skipped, load already in progress")
            return False
        try:
            self._refresh(service)
        except Exception as e:
            self._logger.error("Vault configuration reload failed", error=e)
            return False
        finally:
            self._load_lock.release()

        try:
            self._notify_reload()
        except Exception as e:
            self._logger.error("Vault configuration change callback failed", error=e)
        return True

    def close(self) -> None:
        """Stop the reload thread, if any."""
        self._stop_reload.set()
        thread = self._reload_thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=RELOAD_THREAD_JOIN_SECONDS)
        self._reload_thread = None

    def _refresh(self, service: VaultServiceProtocol) -> None:
        environment = self._source.environment

        secrets = run_blocking(
            lambda: service.get_secrets(environment),
            timeout=self._source.timeout,
            operation=f"Vault secrets for environment '{environment}'",
        )
        flattened = flatten_secrets(secrets, self._source.section_prefix)

        if not self._source.add_unregistered_entries:
            skipped = [key for key in flattened if key not in self._existing]
            flattened = {
                key: value for key, value in flattened.items() if key in self._existing
            }
            if skipped:
                self._logger.debug(
                    "Vault keys not registered elsewhere were skipped", keys=skipped
                )

        self._replace(flattened)
        self._logger.info("Vault configuration loaded", count=len(flattened))

    def _start_reload_thread(self) -> None:
        if self._reload_thread is not None or self._stop_reload.is_set():
            return
        self._reload_thread = threading.Thread(
            target=self._reload_loop,
            name=f"vault-reload-{self._source.environment}",
            daemon=True,
        )
        self._reload_thread.start()
        self._logger.info(
            "Vault configuration reload armed",
            interval_seconds=self._source.reload_interval_seconds,
        )

    def _reload_loop(self) -> None:
        while not self._stop_reload.wait(self._source.reload_interval_seconds):
            self.reload()


def add_vault_configuration[C: (ConfigurationBuilder, ConfigurationManager)](
    configuration: C,
    environment: str,
    *,
    vault_service: VaultServiceProtocol | None = None,
    configure_source: Callable[[VaultConfigurationSource], None] | None = None,
) -> C:
    """Append a Vault layer for ``environment``.

    Args:
        configuration: Builder or manager to add the layer to.
        environment: Path under the mount point to read.
        vault_service: Service to read from now; None defers the load to
            initialize_vault_providers().
        configure_source: Callback adjusting the source (optional flag,
            reload, prefix, ...) before it is added.

    Returns:
        ``configuration``, for chaining.

    Raises:
        InvalidArgumentError: If environment is empty.
    """
    source = VaultConfigurationSource(environment=environment, vault_service=vault_service)
    if configure_source is not None:
        configure_source(source)
    configuration.add(source)
    return configuration


def initialize_vault_providers(
    configuration: ConfigurationRoot, services: ServiceProvider
) -> int:
    """Attach the registered VaultService to deferred Vault layers and load them.

    Second step of the two-step activation: call it once the host is built.

    Args:
        configuration: The host's configuration.
        services: The host's service provider.

    Returns:
        Number of layers loaded.

    Raises:
        VaultConfigurationError: If deferred layers exist but no
            VaultServiceProtocol is registered (code SERVICE_NOT_REGISTERED).
    """
    deferred = [
        provider
        for provider in configuration.providers
        if isinstance(provider, VaultConfigurationProvider) and not provider.has_service
    ]
    if not deferred:
        return 0

    options = services.get(VaultOptions)
    if options is not None and not options.is_activated:
        return 0

    service = services.get(VaultServiceProtocol)
    if service is None:
        raise VaultConfigurationError(
            "Vault configuration layers are waiting for a VaultService, but none "
            "is registered (is Vault activated and add_vault_service() called?)",
            code=ErrorCode.SERVICE_NOT_REGISTERED,
        )

    for provider in deferred:
        provider.attach_service(service)
        provider.load()
    return len(deferred)

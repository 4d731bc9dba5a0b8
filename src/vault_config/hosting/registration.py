"""Registration facade.

Wires Vault into a host in one of two ways.

(a) Register and load during build (single call):

    builder = HostApplicationBuilder()
    add_vault(
        builder,
        lambda o: setattr(o, "configuration", LocalConfiguration(...)),
        environment="production",
    )
    host = builder.build()  # secrets are already part of host.configuration

(b) Register the service, then activate the configuration layer once the
    host is built:

    add_vault_service(builder.services, options=options)
    add_vault_configuration(builder.configuration, "production")
    host = builder.build()
    initialize_vault_providers(host.configuration, host.services)

load_vault_secrets() is the simplest bootstrap: it reads the secrets once
through the registered service and copies them into an in-memory layer,
with no live Vault layer (and no reload).

Whatever the entry point, options are validated first and every violation
is reported in one VaultConfigurationError. With is_activated=False only
the options object is registered and Vault is never contacted.
"""

from __future__ import annotations

from collections.abc import Callable

from vault_config.configuration.vault_source import (
    VaultConfigurationSource,
    add_vault_configuration,
)
from vault_config.core.enums import ErrorCode
from vault_config.core.errors import InvalidArgumentError, VaultConfigurationError
from vault_config.core.startup import run_blocking
from vault_config.domain.options import VaultOptions
from vault_config.domain.protocols import LoggerProtocol, VaultServiceProtocol
from vault_config.domain.validators import ensure_valid
from vault_config.hosting.builder import HostApplicationBuilder
from vault_config.hosting.services import ServiceCollection
from vault_config.infrastructure.secrets.flattener import flatten_secrets
from vault_config.infrastructure.secrets.vault_service import VaultService

type ConfigureOptions = Callable[[VaultOptions], None]


def _logger_or_default(logger: LoggerProtocol | None) -> LoggerProtocol:
    if logger is not None:
        return logger
    from vault_config.core.container import get_logger

    return get_logger()


def _resolve_options(
    configure: ConfigureOptions | None, options: VaultOptions | None
) -> VaultOptions:
    resolved = options if options is not None else VaultOptions()
    if configure is not None:
        configure(resolved)
    return resolved


def _require_environment(environment: str | None) -> str:
    if environment is None or not environment.strip():
        raise InvalidArgumentError("environment")
    return environment


def add_vault_service(
    services: ServiceCollection,
    configure: ConfigureOptions | None = None,
    *,
    options: VaultOptions | None = None,
    logger: LoggerProtocol | None = None,
) -> VaultOptions:
    """Validate options and register Vault services.

    Registers the options and, when Vault is activated, a VaultServiceProtocol
    singleton created on first resolution.

    Args:
        services: Service collection to register into.
        configure: Callback filling in the options.
        options: Options to start from (a new VaultOptions when omitted).
        logger: Optional logger.

    Returns:
        The validated options.

    Raises:
        VaultConfigurationError: If the options are invalid.
    """
    logger = _logger_or_default(logger)
    resolved = _resolve_options(configure, options)
    ensure_valid(resolved)

    services.add_singleton(VaultOptions, resolved)
    if not resolved.is_activated:
        logger.info("Vault is deactivated; only options were registered")
        return resolved

    services.add_singleton(
        VaultServiceProtocol,
        factory=lambda _: VaultService.from_options(resolved, logger=logger),
    )
    logger.info(
        "Vault service registered",
        authentication_type=resolved.authentication_type.value,
    )
    return resolved


def add_vault(
    builder: HostApplicationBuilder,
    configure: ConfigureOptions | None = None,
    *,
    environment: str,
    options: VaultOptions | None = None,
    section_prefix: str | None = None,
    add_unregistered_entries: bool = False,
    configure_source: Callable[[VaultConfigurationSource], None] | None = None,
    logger: LoggerProtocol | None = None,
) -> VaultOptions:
    """Register Vault and load its secrets into the configuration now.

    Validates the options, builds the service (authenticating right away),
    registers it, then appends a Vault layer for ``environment`` and loads
    it before returning.

    Args:
        builder: Host builder.
        configure: Callback filling in the options.
        environment: Path under the mount point to load.
        options: Options to start from.
        section_prefix: Section prepended to every secret key.
        add_unregistered_entries: Also add keys no earlier layer defines.
            Off by default: Vault then only overrides known keys.
        configure_source: Further source settings (optional, reload, ...).
        logger: Optional logger.

    Returns:
        The validated options.

    Raises:
        VaultConfigurationError: Invalid options.
        InvalidArgumentError: Empty environment (when activated).
        VaultAuthenticationError: Authentication failed.
        SecretStoreError: The initial load failed (unless the source is optional).
    """
    logger = _logger_or_default(logger)
    resolved = _resolve_options(configure, options)
    ensure_valid(resolved)

    builder.services.add_singleton(VaultOptions, resolved)
    if not resolved.is_activated:
        logger.info("Vault is deactivated; only options were registered")
        return resolved

    _require_environment(environment)
    service = VaultService.from_options(resolved, logger=logger)
    builder.services.add_singleton(VaultServiceProtocol, service)

    def _configure_source(source: VaultConfigurationSource) -> None:
        source.section_prefix = section_prefix
        source.add_unregistered_entries = add_unregistered_entries
        source.timeout = resolved.startup_timeout_seconds
        source.logger = logger
        if configure_source is not None:
            configure_source(source)

    add_vault_configuration(
        builder.configuration,
        environment,
        vault_service=service,
        configure_source=_configure_source,
    )
    return resolved


def load_vault_secrets(
    builder: HostApplicationBuilder,
    environment: str,
    *,
    section_prefix: str | None = None,
    add_unregistered_entries: bool = True,
    logger: LoggerProtocol | None = None,
) -> dict[str, str | None]:
    """Copy the secrets of ``environment`` into an in-memory layer.

    Uses the service registered by add_vault_service(). Nothing is kept
    live: later changes in Vault are not picked up.

    Args:
        builder: Host builder whose services hold the Vault registration.
        environment: Path under the mount point to load.
        section_prefix: Section prepended to every secret key.
        add_unregistered_entries: Also add keys no earlier layer defines.
        logger: Optional logger.

    Returns:
        The flattened entries that were added (empty when deactivated).

    Raises:
        VaultConfigurationError: If add_vault_service() was not called first.
        InvalidArgumentError: Empty environment.
        SecretStoreError: The read failed or timed out.
    """
    logger = _logger_or_default(logger)
    services = builder.services.build_service_provider()

    options = services.get(VaultOptions)
    if options is None:
        raise VaultConfigurationError(
            "Vault options are not registered; call add_vault_service() first",
            code=ErrorCode.SERVICE_NOT_REGISTERED,
        )
    if not options.is_activated:
        logger.info("Vault is deactivated; no secrets loaded")
        return {}

    _require_environment(environment)
    service = services.get_required(VaultServiceProtocol)

    secrets = run_blocking(
        lambda: service.get_secrets(environment),
        timeout=options.startup_timeout_seconds,
        operation=f"Vault secrets for environment '{environment}'",
    )
    entries = flatten_secrets(secrets, section_prefix)
    if not add_unregistered_entries:
        entries = {
            key: value for key, value in entries.items() if key in builder.configuration
        }

    builder.configuration.add_in_memory_collection(entries)
    logger.info(
        "Vault secrets copied into configuration",
        environment=environment,
        count=len(entries),
    )
    return entries

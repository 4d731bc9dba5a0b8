"""Container module - composition root for settings-driven wiring.

Application-scoped singletons, each created on first use and cached with
lru_cache:
- Logging (structlog console adapter)
- Vault options (from VAULT_* settings)
- Vault service (hvac session for those options)

Programmatic registration through vault_config.hosting does not need the
container beyond the default logger.

Usage:
    from vault_config.core.container import get_logger, get_vault_service

    service = get_vault_service()
    secrets = await service.get_secrets("production")

Testing:
    Clear the caches after changing the environment:
        get_vault_service.cache_clear()
        get_vault_options.cache_clear()
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from vault_config.core.config import get_settings

if TYPE_CHECKING:
    from vault_config.domain.options import VaultOptions
    from vault_config.domain.protocols import LoggerProtocol, VaultServiceProtocol


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter settings come from VAULT_LOG_LEVEL and VAULT_LOG_JSON.

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from vault_config.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    return ConsoleAdapter(level=settings.log_level, use_json=settings.log_json)


@lru_cache()
def get_vault_options() -> "VaultOptions":
    """Get Vault options built from settings (app-scoped).

    Returns:
        VaultOptions: Options converted from VAULT_* settings. Not validated
        here; validation happens when a service is built.
    """
    return get_settings().to_options()


@lru_cache()
def get_vault_service() -> "VaultServiceProtocol":
    """Get the Vault service singleton for the settings-driven options.

    Returns:
        VaultServiceProtocol: Connected VaultService.

    Raises:
        VaultConfigurationError: If Vault is deactivated or options are invalid.
        VaultAuthenticationError: If authentication fails.
        SecretStoreError: If the session cannot be opened.

    Usage:
        service = get_vault_service()
        value = await service.get_secret_value("production", "ApiKey")
    """
    from vault_config.infrastructure.secrets.vault_service import VaultService

    return VaultService.from_options(get_vault_options(), logger=get_logger())


__all__ = ["get_logger", "get_vault_options", "get_vault_service"]

"""Layered configuration host and the Vault configuration layer.

Usage:
    from vault_config.configuration import ConfigurationBuilder, add_vault_configuration

    builder = ConfigurationBuilder().add_in_memory_collection({"Database:Host": "db"})
    add_vault_configuration(builder, "production", vault_service=service)
    configuration = builder.build()
    configuration["Database:Password"]
"""

from vault_config.configuration.root import (
    KEY_DELIMITER,
    ConfigurationBuilder,
    ConfigurationManager,
    ConfigurationProvider,
    ConfigurationRoot,
    ConfigurationSection,
    MemoryConfigurationProvider,
    MemoryConfigurationSource,
    combine_keys,
)
from vault_config.configuration.vault_source import (
    DEFAULT_RELOAD_INTERVAL_SECONDS,
    VaultConfigurationProvider,
    VaultConfigurationSource,
    add_vault_configuration,
    initialize_vault_providers,
)

__all__ = [
    "DEFAULT_RELOAD_INTERVAL_SECONDS",
    "KEY_DELIMITER",
    "ConfigurationBuilder",
    "ConfigurationManager",
    "ConfigurationProvider",
    "ConfigurationRoot",
    "ConfigurationSection",
    "MemoryConfigurationProvider",
    "MemoryConfigurationSource",
    "VaultConfigurationProvider",
    "VaultConfigurationSource",
    "add_vault_configuration",
    "combine_keys",
    "initialize_vault_providers",
]

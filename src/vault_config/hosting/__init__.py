"""Host integration: service registry, host builder and Vault registration.

Usage:
    from vault_config.hosting import HostApplicationBuilder, add_vault
"""

from vault_config.hosting.builder import Host, HostApplicationBuilder
from vault_config.hosting.registration import (
    add_vault,
    add_vault_service,
    load_vault_secrets,
)
from vault_config.hosting.services import ServiceCollection, ServiceProvider

__all__ = [
    "Host",
    "HostApplicationBuilder",
    "ServiceCollection",
    "ServiceProvider",
    "add_vault",
    "add_vault_service",
    "load_vault_secrets",
]

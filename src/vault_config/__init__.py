"""Load HashiCorp Vault KV v2 secrets into layered application configuration.

Quick start:
    from vault_config import (
        HostApplicationBuilder,
        LocalConfiguration,
        VaultOptions,
        add_vault,
    )

    builder = HostApplicationBuilder()
    builder.configuration.add_in_memory_collection({"Database:Password": ""})
    add_vault(
        builder,
        options=VaultOptions.for_configuration(
            LocalConfiguration(vault_url="https://vault:8200", mount_point="secret")
        ),
        environment="dev",
    )
    host = builder.build()
    host.configuration["Database:Password"]
"""

from vault_config.configuration import (
    ConfigurationBuilder,
    ConfigurationManager,
    ConfigurationRoot,
    VaultConfigurationSource,
    add_vault_configuration,
    initialize_vault_providers,
)
from vault_config.core.enums import AuthenticationType, ErrorCode
from vault_config.core.errors import (
    InvalidArgumentError,
    SecretStoreError,
    UnsupportedAuthenticationError,
    VaultAuthenticationError,
    VaultConfigurationError,
    VaultError,
)
from vault_config.domain.options import (
    AwsIamConfiguration,
    ConnectionConfiguration,
    CustomConfiguration,
    LocalConfiguration,
    VaultOptions,
)
from vault_config.domain.protocols import CredentialProof, VaultServiceProtocol
from vault_config.hosting import (
    Host,
    HostApplicationBuilder,
    ServiceCollection,
    ServiceProvider,
    add_vault,
    add_vault_service,
    load_vault_secrets,
)
from vault_config.infrastructure.secrets import VaultService, flatten_secrets

__version__ = "0.1.0"

__all__ = [
    "AuthenticationType",
    "AwsIamConfiguration",
    "ConfigurationBuilder",
    "ConfigurationManager",
    "ConfigurationRoot",
    "ConnectionConfiguration",
    "CredentialProof",
    "CustomConfiguration",
    "ErrorCode",
    "Host",
    "HostApplicationBuilder",
    "InvalidArgumentError",
    "LocalConfiguration",
    "SecretStoreError",
    "ServiceCollection",
    "ServiceProvider",
    "UnsupportedAuthenticationError",
    "VaultAuthenticationError",
    "VaultConfigurationError",
    "VaultConfigurationSource",
    "VaultError",
    "VaultOptions",
    "VaultService",
    "VaultServiceProtocol",
    "add_vault",
    "add_vault_configuration",
    "add_vault_service",
    "flatten_secrets",
    "initialize_vault_providers",
    "load_vault_secrets",
]

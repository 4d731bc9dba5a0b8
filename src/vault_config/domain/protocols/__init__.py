"""Domain protocols (ports).

Infrastructure provides the concrete adapters; the rest of the library only
depends on these structural contracts.
"""

from vault_config.domain.protocols.configuration_protocol import (
    ConfigurationProtocol,
    ConfigurationProviderProtocol,
    ConfigurationSourceProtocol,
)
from vault_config.domain.protocols.credential_protocol import CredentialProof
from vault_config.domain.protocols.logger_protocol import LoggerProtocol
from vault_config.domain.protocols.vault_service_protocol import VaultServiceProtocol

__all__ = [
    "ConfigurationProtocol",
    "ConfigurationProviderProtocol",
    "ConfigurationSourceProtocol",
    "CredentialProof",
    "LoggerProtocol",
    "VaultServiceProtocol",
]

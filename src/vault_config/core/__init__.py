"""Core shared kernel.

Foundational pieces used across all layers:
- Result types and validation helpers for collecting option violations
- Error codes and the VaultError exception hierarchy
- Pydantic settings and the composition-root container
- The single blocking join point used during startup

The core package has NO dependencies on the hosting or configuration layers.
"""

from vault_config.core.enums import AuthenticationType, ErrorCode
from vault_config.core.errors import (
    DomainError,
    InvalidArgumentError,
    SecretStoreError,
    UnsupportedAuthenticationError,
    ValidationError,
    VaultAuthenticationError,
    VaultConfigurationError,
    VaultError,
)
from vault_config.core.result import Failure, Result, Success

__all__ = [
    "AuthenticationType",
    "DomainError",
    "ErrorCode",
    "Failure",
    "InvalidArgumentError",
    "Result",
    "SecretStoreError",
    "Success",
    "UnsupportedAuthenticationError",
    "ValidationError",
    "VaultAuthenticationError",
    "VaultConfigurationError",
    "VaultError",
]

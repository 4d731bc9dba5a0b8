"""Core errors package.

Exports all core-level error classes for convenient importing.

Two families live here:
- DomainError / ValidationError: data describing a single violation,
  returned inside Result types and collected by validators.
- VaultError and subclasses: exceptions raised to the caller when startup
  or a secret read cannot proceed.

Usage:
    from vault_config.core.errors import ValidationError, VaultConfigurationError
"""

from vault_config.core.errors.domain_error import DomainError, ValidationError
from vault_config.core.errors.exceptions import (
    InvalidArgumentError,
    SecretStoreError,
    UnsupportedAuthenticationError,
    VaultAuthenticationError,
    VaultConfigurationError,
    VaultError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "VaultError",
    "VaultConfigurationError",
    "VaultAuthenticationError",
    "SecretStoreError",
    "InvalidArgumentError",
    "UnsupportedAuthenticationError",
]

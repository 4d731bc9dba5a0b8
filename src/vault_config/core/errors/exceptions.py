"""Exceptions raised by the Vault configuration pipeline.

Error Hierarchy:
    VaultError (base, inherits from Exception)
    ├── VaultConfigurationError (invalid or missing options, fatal at startup)
    ├── VaultAuthenticationError (credential resolution or validation failed)
    ├── SecretStoreError (live read or session construction failed)
    ├── InvalidArgumentError (empty required argument, also a ValueError)
    └── UnsupportedAuthenticationError (NONE or unmapped authentication type)

Every exception carries a machine-readable ErrorCode so callers can branch
without parsing messages. Underlying causes are chained with ``raise ... from``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from vault_config.core.enums import ErrorCode
from vault_config.core.errors.domain_error import ValidationError


class VaultError(Exception):
    """Base exception for all Vault configuration failures.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message.
        details: Optional structured context (never secret values).
    """

    default_code = ErrorCode.VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def __str__(self) -> str:
        return self.message


class VaultConfigurationError(VaultError):
    """Invalid or missing Vault options.

    When raised by the options validator, ``errors`` holds every violation
    found and the message lists all of them, one per line.
    """

    default_code = ErrorCode.VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
        errors: Sequence[ValidationError] = (),
    ) -> None:
        super().__init__(message, code=code, details=details)
        self.errors: list[ValidationError] = list(errors)

    @classmethod
    def from_violations(
        cls, errors: Sequence[ValidationError]
    ) -> VaultConfigurationError:
        """Aggregate validator violations into a single exception.

        Args:
            errors: Violations collected by the validator (non-empty).

        Returns:
            VaultConfigurationError listing every violation.
        """
        lines = "\n".join(f"- {error.message}" for error in errors)
        return cls(
            f"Invalid Vault configuration ({len(errors)} error(s)):\n{lines}",
            errors=errors,
            details={"fields": [error.field for error in errors if error.field]},
        )


class VaultAuthenticationError(VaultError):
    """Credential resolution or validation against Vault failed."""

    default_code = ErrorCode.AUTHENTICATION_FAILED


class SecretStoreError(VaultError):
    """A live operation against the secret store failed."""

    default_code = ErrorCode.SECRET_READ_FAILED


class InvalidArgumentError(VaultError, ValueError):
    """A required string argument was empty or whitespace."""

    default_code = ErrorCode.INVALID_ARGUMENT

    def __init__(self, argument: str, message: str | None = None) -> None:
        super().__init__(
            message or f"{argument} cannot be empty",
            details={"argument": argument},
        )
        self.argument = argument


class UnsupportedAuthenticationError(VaultError, NotImplementedError):
    """The selected authentication type has no strategy."""

    default_code = ErrorCode.AUTHENTICATION_UNSUPPORTED

"""Base domain error classes for Railway-Oriented Programming.

DomainError describes a failure as data. It does NOT inherit from Exception:
validators return it inside Result types so that every violation can be
collected before anything is raised.

Usage:
    from vault_config.core.errors import ValidationError
    from vault_config.core.enums import ErrorCode

    error = ValidationError(
        code=ErrorCode.REQUIRED_FIELD_MISSING,
        message="configuration.vault_url is required",
        field="configuration.vault_url",
    )
"""

from dataclasses import dataclass

from vault_config.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base domain error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code (enum).
        message: Human-readable error message.
        details: Optional context for debugging.
    """

    code: ErrorCode
    message: str
    details: dict[str, str] | None = None

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure.

    Attributes:
        code: ErrorCode enum.
        message: Human-readable message.
        field: Field name that failed validation.
        details: Additional context.
    """

    field: str | None = None

"""Validation helpers for option fields.

All validation functions return Result types so callers can collect every
failure before deciding what to raise.

Usage:
    from vault_config.core.validation import validate_not_empty
    from vault_config.core.result import Failure

    result = validate_not_empty(config.vault_url, "configuration.vault_url")
    match result:
        case Failure(error):
            errors.append(error)
"""

from typing import Any

from vault_config.core.enums import ErrorCode
from vault_config.core.errors import ValidationError
from vault_config.core.result import Failure, Result, Success


def validate_not_empty(value: Any, field_name: str) -> Result[Any, ValidationError]:
    """Check that a required option field is set.

    Args:
        value: Field value; None and blank strings count as missing.
        field_name: Name of the field being validated.

    Returns:
        Success with the value, or Failure with REQUIRED_FIELD_MISSING.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return Failure(
            error=ValidationError(
                code=ErrorCode.REQUIRED_FIELD_MISSING,
                message=f"{field_name} is required",
                field=field_name,
            )
        )
    return Success(value=value)


def validate_positive(
    value: float | None, field_name: str
) -> Result[float | None, ValidationError]:
    """Validate that an optional number is strictly positive when set.

    Args:
        value: Number to validate (None means "not configured").
        field_name: Name of the field being validated.

    Returns:
        Success with value if None or > 0, Failure with ValidationError otherwise.
    """
    if value is not None and value <= 0:
        return Failure(
            error=ValidationError(
                code=ErrorCode.INVALID_FIELD_VALUE,
                message=f"{field_name} must be greater than 0 (got {value})",
                field=field_name,
            )
        )
    return Success(value=value)

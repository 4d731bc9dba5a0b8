"""Validator for VaultOptions.

Collecting discipline: every rule runs and every violation is returned, so a
single startup failure reports all problems at once. ``ensure_valid`` raises
one VaultConfigurationError aggregating them.

Rules (in order):
    1. is_activated == False -> nothing to check.
    2. authentication_type must not be NONE.
    3. configuration must be set.
    4. configuration variant must match authentication_type exactly
       (subclasses are rejected). On mismatch no field-level rule runs.
    5. vault_url and mount_point must be non-blank.
    6. Per variant:
       - LOCAL: token_file_path non-blank.
       - AWS_IAM: environment non-blank.
       - CUSTOM: auth_method_factory set.
    7. startup_timeout_seconds > 0 when set.
"""

from vault_config.core.enums import AuthenticationType, ErrorCode
from vault_config.core.errors import ValidationError, VaultConfigurationError
from vault_config.core.result import Failure, Result
from vault_config.core.validation import validate_not_empty, validate_positive
from vault_config.domain.options import (
    AwsIamConfiguration,
    ConnectionConfiguration,
    CustomConfiguration,
    LocalConfiguration,
    VaultOptions,
)

_EXPECTED_VARIANTS: dict[AuthenticationType, type[ConnectionConfiguration]] = {
    AuthenticationType.LOCAL: LocalConfiguration,
    AuthenticationType.AWS_IAM: AwsIamConfiguration,
    AuthenticationType.CUSTOM: CustomConfiguration,
}


def _collect(errors: list[ValidationError], *results: Result) -> None:
    for result in results:
        if isinstance(result, Failure):
            errors.append(result.error)


def _validate_variant_fields(
    configuration: ConnectionConfiguration, errors: list[ValidationError]
) -> None:
    match configuration:
        case LocalConfiguration(token_file_path=path):
            _collect(errors, validate_not_empty(path, "configuration.token_file_path"))
        case AwsIamConfiguration(environment=environment):
            _collect(errors, validate_not_empty(environment, "configuration.environment"))
        case CustomConfiguration(auth_method_factory=None):
            errors.append(
                ValidationError(
                    code=ErrorCode.AUTH_METHOD_FACTORY_MISSING,
                    message=(
                        "configuration.auth_method_factory is required for custom "
                        "authentication (a zero-argument callable returning a "
                        "credential proof)"
                    ),
                    field="configuration.auth_method_factory",
                )
            )


def validate_vault_options(options: VaultOptions) -> list[ValidationError]:
    """Validate options and return every violation found.

    Args:
        options: Options to validate.

    Returns:
        Empty list when valid, otherwise one ValidationError per violation.
    """
    if not options.is_activated:
        return []

    errors: list[ValidationError] = []

    if options.authentication_type == AuthenticationType.NONE:
        errors.append(
            ValidationError(
                code=ErrorCode.AUTHENTICATION_TYPE_MISSING,
                message="authentication_type cannot be NONE when Vault is activated",
                field="authentication_type",
            )
        )

    _collect(
        errors,
        validate_positive(options.startup_timeout_seconds, "startup_timeout_seconds"),
    )

    configuration = options.configuration
    if configuration is None:
        errors.append(
            ValidationError(
                code=ErrorCode.CONFIGURATION_MISSING,
                message="configuration is required when Vault is activated",
                field="configuration",
            )
        )
        return errors

    expected = _EXPECTED_VARIANTS.get(options.authentication_type)
    if expected is not None and type(configuration) is not expected:
        errors.append(
            ValidationError(
                code=ErrorCode.CONFIGURATION_TYPE_MISMATCH,
                message=(
                    f"configuration must be a {expected.__name__} for "
                    f"{options.authentication_type.name} authentication "
                    f"(got {type(configuration).__name__})"
                ),
                field="configuration",
            )
        )
        return errors

    _collect(
        errors,
        validate_not_empty(configuration.vault_url, "configuration.vault_url"),
        validate_not_empty(configuration.mount_point, "configuration.mount_point"),
    )
    _validate_variant_fields(configuration, errors)

    return errors


def ensure_valid(options: VaultOptions) -> None:
    """Validate options, raising once with every violation.

    Args:
        options: Options to validate.

    Raises:
        VaultConfigurationError: If any rule fails; ``errors`` lists them all.
    """
    errors = validate_vault_options(options)
    if errors:
        raise VaultConfigurationError.from_violations(errors)

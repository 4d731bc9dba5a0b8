"""Error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.

Categories:
- Validation errors (*_MISSING, *_MISMATCH, VALIDATION_FAILED)
- Authentication errors (AUTHENTICATION_*, TOKEN_FILE_*, AWS_*)
- Secret store errors (SECRET_*, VAULT_*)
- Argument errors (INVALID_ARGUMENT)
"""

from enum import Enum


class ErrorCode(Enum):
    """Error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    VALIDATION_FAILED = "validation_failed"
    AUTHENTICATION_TYPE_MISSING = "authentication_type_missing"
    CONFIGURATION_MISSING = "configuration_missing"
    CONFIGURATION_TYPE_MISMATCH = "configuration_type_mismatch"
    REQUIRED_FIELD_MISSING = "required_field_missing"
    INVALID_FIELD_VALUE = "invalid_field_value"
    AUTH_METHOD_FACTORY_MISSING = "auth_method_factory_missing"
    AUTH_METHOD_FACTORY_FAILED = "auth_method_factory_failed"
    VAULT_NOT_ACTIVATED = "vault_not_activated"
    SERVICE_NOT_REGISTERED = "service_not_registered"

    # Authentication errors
    AUTHENTICATION_FAILED = "authentication_failed"
    AUTHENTICATION_UNSUPPORTED = "authentication_unsupported"
    TOKEN_FILE_NOT_FOUND = "token_file_not_found"
    TOKEN_FILE_UNREADABLE = "token_file_unreadable"
    AWS_CREDENTIALS_UNAVAILABLE = "aws_credentials_unavailable"
    AWS_IAM_VALIDATION_FAILED = "aws_iam_validation_failed"

    # Secret store errors
    VAULT_CONNECTION_FAILED = "vault_connection_failed"
    SECRET_LIST_FAILED = "secret_list_failed"
    SECRET_READ_FAILED = "secret_read_failed"
    STARTUP_TIMEOUT = "startup_timeout"

    # Argument errors
    INVALID_ARGUMENT = "invalid_argument"

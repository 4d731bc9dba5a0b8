"""Authentication strategies.

Usage:
    from vault_config.infrastructure.auth import select_credential

    credential = select_credential(options.authentication_type, options.configuration)
    credential.authenticate(client)
"""

from vault_config.infrastructure.auth.credentials import AwsIamCredential, TokenCredential
from vault_config.infrastructure.auth.strategies import (
    build_aws_iam_credential,
    read_token_file,
    select_credential,
    validate_aws_session,
)

__all__ = [
    "AwsIamCredential",
    "TokenCredential",
    "build_aws_iam_credential",
    "read_token_file",
    "select_credential",
    "validate_aws_session",
]

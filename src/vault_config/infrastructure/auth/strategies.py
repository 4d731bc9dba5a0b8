"""Authentication strategy selection.

Turns (authentication type, connection configuration) into a credential
proof that can open a Vault session.

Strategies:
    - LOCAL: read a token file (``~`` and $VARS expanded, optional
      "Bearer " prefix stripped).
    - AWS_IAM: resolve ambient AWS credentials with boto3, sign an STS
      GetCallerIdentity request (SigV4), then check the binding with a
      login + token self-lookup before returning.
    - CUSTOM: call the caller's zero-argument factory.
    - NONE: always unsupported.
"""

import base64
import json
import os
from pathlib import Path

import boto3
import hvac

from vault_config.core.enums import AuthenticationType, ErrorCode
from vault_config.core.errors import (
    UnsupportedAuthenticationError,
    VaultAuthenticationError,
    VaultConfigurationError,
    VaultError,
)
from vault_config.domain.options import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    AwsIamConfiguration,
    ConnectionConfiguration,
    CustomConfiguration,
    LocalConfiguration,
)
from vault_config.domain.protocols import CredentialProof, LoggerProtocol
from vault_config.infrastructure.auth.credentials import AwsIamCredential, TokenCredential
from vault_config.infrastructure.aws.sigv4 import sign_request

BEARER_PREFIX = "bearer "

STS_REGION = "us-east-1"
STS_HOST = "sts.amazonaws.com"
STS_URL = f"https://{STS_HOST}/"
STS_BODY = "Action=GetCallerIdentity&Version=2011-06-15"
STS_CONTENT_TYPE = "application/x-www-form-urlencoded"


def _b64(value: str) -> str:
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def read_token_file(token_file_path: str) -> str:
    """Read a Vault token from a file.

    Args:
        token_file_path: Path to the token file. ``~`` and environment
            variables are expanded.

    Returns:
        The token without surrounding whitespace or "Bearer " prefix.

    Raises:
        VaultAuthenticationError: If the file is missing, unreadable or empty.

    Example:
        >>> read_token_file("$HOME/.vault-token")  # file holds "Bearer hvs.abc"
        'hvs.abc'
    """
    expanded = Path(os.path.expandvars(os.path.expanduser(token_file_path)))

    try:
        token = expanded.read_text(encoding="utf-8").strip()
    except FileNotFoundError as e:
        raise VaultAuthenticationError(
            f"Vault token file does not exist: {expanded}",
            code=ErrorCode.TOKEN_FILE_NOT_FOUND,
            details={"token_file_path": str(expanded)},
        ) from e
    except OSError as e:
        raise VaultAuthenticationError(
            f"Unable to read Vault token file {expanded}: {e}",
            code=ErrorCode.TOKEN_FILE_UNREADABLE,
            details={"token_file_path": str(expanded)},
        ) from e

    if token.lower().startswith(BEARER_PREFIX):
        token = token[len(BEARER_PREFIX) :].strip()

    if not token:
        raise VaultAuthenticationError(
            f"Vault token file is empty: {expanded}",
            code=ErrorCode.TOKEN_FILE_UNREADABLE,
            details={"token_file_path": str(expanded)},
        )
    return token


def _remediation(config: AwsIamConfiguration) -> str:
    role = config.role_name
    mount = config.aws_auth_mount_point
    return (
        "Check that:\n"
        f"- the role exists in Vault: vault list auth/{mount}/role\n"
        f"- role '{role}' is configured with auth_type=iam\n"
        "- its bound_iam_principal_arn matches the instance/task IAM role\n"
        "- AWS credentials are available (environment, instance profile, task role)"
    )


def build_aws_iam_credential(config: AwsIamConfiguration) -> AwsIamCredential:
    """Sign an STS GetCallerIdentity request with the ambient AWS credentials.

    Args:
        config: AWS IAM connection configuration.

    Returns:
        AwsIamCredential ready to be posted to Vault.

    Raises:
        VaultAuthenticationError: If no AWS credentials can be resolved.
    """
    credentials = boto3.Session().get_credentials()
    if credentials is None:
        raise VaultAuthenticationError(
            f"No AWS credentials available to authenticate to Vault with role "
            f"'{config.role_name}'.\n{_remediation(config)}",
            code=ErrorCode.AWS_CREDENTIALS_UNAVAILABLE,
            details={"role_name": config.role_name},
        )
    frozen = credentials.get_frozen_credentials()

    signed_headers = sign_request(
        access_key=frozen.access_key,
        secret_key=frozen.secret_key,
        session_token=frozen.token,
        region=STS_REGION,
        service="sts",
        method="POST",
        host=STS_HOST,
        path="/",
        query="",
        headers={"Content-Type": STS_CONTENT_TYPE},
        body=STS_BODY,
    )

    return AwsIamCredential(
        mount_point=config.aws_auth_mount_point,
        role_name=config.role_name,
        request_url=_b64(STS_URL),
        request_headers=_b64(json.dumps(signed_headers)),
        request_body=_b64(STS_BODY),
    )


def validate_aws_session(
    config: AwsIamConfiguration,
    credential: AwsIamCredential,
    *,
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
) -> None:
    """Log in with ``credential`` and look up the resulting token.

    Synchronous on purpose: it runs once at startup so a misconfigured role
    or binding fails immediately. The throwaway client is closed afterwards.

    Args:
        config: AWS IAM connection configuration.
        credential: Signed login request to check.
        timeout: HTTP timeout in seconds for the login and lookup calls.

    Raises:
        VaultAuthenticationError: If login or lookup fails.
    """
    client = hvac.Client(
        url=config.vault_url,
        verify=not config.ignore_tls_errors,
        timeout=timeout,
    )
    try:
        credential.authenticate(client)
        client.auth.token.lookup_self()
    except Exception as e:
        raise VaultAuthenticationError(
            f"Unable to authenticate to Vault with role '{config.role_name}'.\n"
            f"Error: {e}\n\n{_remediation(config)}",
            code=ErrorCode.AWS_IAM_VALIDATION_FAILED,
            details={
                "role_name": config.role_name,
                "aws_auth_mount_point": config.aws_auth_mount_point,
            },
        ) from e
    finally:
        client.adapter.close()


def _require[C: ConnectionConfiguration](
    configuration: ConnectionConfiguration | None,
    expected: type[C],
    authentication_type: AuthenticationType,
) -> C:
    if type(configuration) is not expected:
        raise VaultConfigurationError(
            f"configuration must be a {expected.__name__} for "
            f"{authentication_type.name} authentication",
            code=ErrorCode.CONFIGURATION_TYPE_MISMATCH,
        )
    return configuration  # type: ignore[return-value]


def select_credential(
    authentication_type: AuthenticationType,
    configuration: ConnectionConfiguration | None,
    *,
    logger: LoggerProtocol | None = None,
    timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
) -> CredentialProof:
    """Produce the credential proof for the selected strategy.

    Args:
        authentication_type: Selected strategy.
        configuration: Matching connection configuration variant.
        logger: Optional logger for strategy diagnostics.
        timeout: HTTP timeout in seconds for the AWS IAM validation calls.

    Returns:
        A CredentialProof.

    Raises:
        UnsupportedAuthenticationError: For NONE (or an unmapped type).
        VaultConfigurationError: Variant mismatch, missing or failing factory.
        VaultAuthenticationError: Token file or AWS IAM failures.
    """
    match authentication_type:
        case AuthenticationType.LOCAL:
            local = _require(configuration, LocalConfiguration, authentication_type)
            if logger:
                logger.debug("Reading Vault token file", path=local.token_file_path)
            return TokenCredential(read_token_file(local.token_file_path))

        case AuthenticationType.AWS_IAM:
            aws = _require(configuration, AwsIamConfiguration, authentication_type)
            try:
                credential = build_aws_iam_credential(aws)
            except VaultError:
                raise
            except Exception as e:
                raise VaultAuthenticationError(
                    f"Unable to sign the AWS IAM login request for role "
                    f"'{aws.role_name}'.\nError: {e}\n\n"
                    f"{_remediation(aws)}",
                    code=ErrorCode.AWS_CREDENTIALS_UNAVAILABLE,
                    details={"role_name": aws.role_name},
                ) from e
            validate_aws_session(aws, credential, timeout=timeout)
            if logger:
                logger.info(
                    "AWS IAM authentication validated",
                    role_name=aws.role_name,
                    aws_auth_mount_point=aws.aws_auth_mount_point,
                )
            return credential

        case AuthenticationType.CUSTOM:
            custom = _require(configuration, CustomConfiguration, authentication_type)
            factory = custom.auth_method_factory
            if factory is None:
                raise VaultConfigurationError(
                    "configuration.auth_method_factory is required for custom authentication",
                    code=ErrorCode.AUTH_METHOD_FACTORY_MISSING,
                )
            try:
                credential = factory()
            except Exception as e:
                raise VaultConfigurationError(
                    f"Custom auth_method_factory failed: {e}",
                    code=ErrorCode.AUTH_METHOD_FACTORY_FAILED,
                ) from e
            if not isinstance(credential, CredentialProof):
                raise VaultConfigurationError(
                    "Custom auth_method_factory must return an object with an "
                    f"authenticate(client) method (got {type(credential).__name__})",
                    code=ErrorCode.AUTH_METHOD_FACTORY_FAILED,
                )
            return credential

        case _:
            raise UnsupportedAuthenticationError(
                f"Authentication type '{authentication_type.name}' is not supported",
                details={"authentication_type": authentication_type.value},
            )

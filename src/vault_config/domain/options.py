"""Vault options (data model).

The caller builds one VaultOptions at startup, usually through a configure
callback, and the registration facade validates it before anything touches
the network.

Connection configurations form a closed family of variants, one per
authentication type:

    ConnectionConfiguration (base: url, mount point, TLS flag)
    ├── LocalConfiguration      -> AuthenticationType.LOCAL
    ├── AwsIamConfiguration     -> AuthenticationType.AWS_IAM
    └── CustomConfiguration     -> AuthenticationType.CUSTOM

Variants are frozen dataclasses. VaultOptions.for_configuration() derives the
authentication type from the variant, so a mismatch cannot be built through
that path; options assembled field by field are checked by the validator.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from vault_config.core.enums import AuthenticationType

if TYPE_CHECKING:
    from vault_config.domain.protocols.credential_protocol import CredentialProof

DEFAULT_TOKEN_FILE_PATH = "~/.vault-token"
DEFAULT_AWS_AUTH_MOUNT_POINT = "aws"
DEFAULT_STARTUP_TIMEOUT_SECONDS = 30.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True, slots=True, kw_only=True)
class ConnectionConfiguration:
    """Settings shared by every authentication type.

    Attributes:
        vault_url: Vault server URL (e.g. https://vault.internal:8200).
        mount_point: KV v2 secrets engine mount path.
        ignore_tls_errors: Skip TLS certificate validation. Opt-in only;
            never enable in production.
    """

    authentication_type: ClassVar[AuthenticationType] = AuthenticationType.NONE

    vault_url: str = ""
    mount_point: str = ""
    ignore_tls_errors: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class LocalConfiguration(ConnectionConfiguration):
    """Token-file authentication.

    Attributes:
        token_file_path: Path to a file holding the Vault token. ``~`` and
            environment variables ($VAR, ${VAR}) are expanded.
    """

    authentication_type: ClassVar[AuthenticationType] = AuthenticationType.LOCAL

    token_file_path: str = DEFAULT_TOKEN_FILE_PATH


@dataclass(frozen=True, slots=True, kw_only=True)
class AwsIamConfiguration(ConnectionConfiguration):
    """AWS IAM authentication through a signed STS GetCallerIdentity call.

    Attributes:
        environment: Deployment environment, used to derive the role name.
        aws_auth_mount_point: Mount path of Vault's AWS auth method.
        aws_iam_role_name: Vault role to log in as. Derived as
            ``{mount_point}-{environment}-role`` when not set.
    """

    authentication_type: ClassVar[AuthenticationType] = AuthenticationType.AWS_IAM

    environment: str = ""
    aws_auth_mount_point: str = DEFAULT_AWS_AUTH_MOUNT_POINT
    aws_iam_role_name: str | None = None

    @property
    def role_name(self) -> str:
        """Vault role used for login (explicit or derived)."""
        if self.aws_iam_role_name and self.aws_iam_role_name.strip():
            return self.aws_iam_role_name
        return f"{self.mount_point}-{self.environment}-role"


@dataclass(frozen=True, slots=True, kw_only=True)
class CustomConfiguration(ConnectionConfiguration):
    """Caller-supplied authentication.

    Attributes:
        auth_method_factory: Zero-argument callable returning a
            CredentialProof. Called once, when the service is built.
    """

    authentication_type: ClassVar[AuthenticationType] = AuthenticationType.CUSTOM

    auth_method_factory: Callable[[], CredentialProof] | None = None


@dataclass(kw_only=True)
class VaultOptions:
    """Aggregate Vault options.

    Mutable so that configure callbacks can fill it in; treated as read-only
    once the registration facade has validated it.

    Attributes:
        is_activated: When False the whole pipeline is skipped and only the
            options object is registered.
        authentication_type: Selected authentication strategy.
        configuration: Connection configuration; its variant must match
            authentication_type.
        startup_timeout_seconds: Upper bound for each blocking secret load
            during startup (None waits forever). Also bounds each Vault
            HTTP request (30 seconds when None).
    """

    is_activated: bool = True
    authentication_type: AuthenticationType = AuthenticationType.NONE
    configuration: ConnectionConfiguration | None = None
    startup_timeout_seconds: float | None = DEFAULT_STARTUP_TIMEOUT_SECONDS

    @property
    def request_timeout_seconds(self) -> float:
        """HTTP timeout for Vault requests (hvac default when unbounded)."""
        if self.startup_timeout_seconds is None:
            return DEFAULT_REQUEST_TIMEOUT_SECONDS
        return self.startup_timeout_seconds

    @classmethod
    def for_configuration(
        cls, configuration: ConnectionConfiguration, **kwargs: object
    ) -> VaultOptions:
        """Build options whose authentication type matches the variant.

        Args:
            configuration: A LocalConfiguration, AwsIamConfiguration or
                CustomConfiguration.
            **kwargs: Other VaultOptions fields.

        Returns:
            VaultOptions with authentication_type taken from the variant.

        Example:
            >>> options = VaultOptions.for_configuration(
            ...     LocalConfiguration(vault_url="https://vault:8200", mount_point="kv")
            ... )
            >>> options.authentication_type
            <AuthenticationType.LOCAL: 'local'>
        """
        return cls(
            authentication_type=configuration.authentication_type,
            configuration=configuration,
            **kwargs,  # type: ignore[arg-type]
        )

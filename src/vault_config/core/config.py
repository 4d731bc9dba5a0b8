"""Environment-driven settings using Pydantic Settings.

Programmatic configure callbacks are the primary way to set Vault options.
This module covers deployments that prefer configuring Vault entirely from
environment variables (or a local .env file).

Architecture:
- Flat settings structure, every field prefixed with VAULT_
- Type validation via Pydantic
- Converted to domain VaultOptions with to_options()

Environment variables:
    VAULT_IS_ACTIVATED=true
    VAULT_AUTHENTICATION_TYPE=aws_iam
    VAULT_URL=https://vault.internal:8200
    VAULT_MOUNT_POINT=kv
    VAULT_ENVIRONMENT=production
    VAULT_LOG_LEVEL=DEBUG

Usage:
    from vault_config.core.config import get_settings

    options = get_settings().to_options()
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vault_config.core.enums import AuthenticationType
from vault_config.domain.options import (
    DEFAULT_AWS_AUTH_MOUNT_POINT,
    DEFAULT_STARTUP_TIMEOUT_SECONDS,
    DEFAULT_TOKEN_FILE_PATH,
    AwsIamConfiguration,
    ConnectionConfiguration,
    CustomConfiguration,
    LocalConfiguration,
    VaultOptions,
)


class VaultSettings(BaseSettings):
    """Vault settings loaded from VAULT_* environment variables.

    CUSTOM authentication needs a credential factory, which cannot come from
    the environment; options built for it fail validation until a factory
    is supplied in code.
    """

    is_activated: bool = Field(
        default=True,
        description="Enable the Vault pipeline (false registers options only)",
    )
    authentication_type: AuthenticationType = Field(
        default=AuthenticationType.NONE,
        description="Authentication strategy (local, aws_iam, custom)",
    )
    url: str = Field(
        default="",
        description="Vault server URL (e.g., https://vault.internal:8200)",
    )
    mount_point: str = Field(
        default="",
        description="KV v2 secrets engine mount path",
    )
    ignore_tls_errors: bool = Field(
        default=False,
        description="Skip TLS certificate validation (never in production)",
    )

    # Local token authentication
    token_file_path: str = Field(
        default=DEFAULT_TOKEN_FILE_PATH,
        description="Token file path; ~ and $VARS are expanded",
    )

    # AWS IAM authentication
    environment: str = Field(
        default="",
        description="Deployment environment, used to derive the AWS IAM role name",
    )
    aws_auth_mount_point: str = Field(
        default=DEFAULT_AWS_AUTH_MOUNT_POINT,
        description="Mount path of Vault's AWS auth method",
    )
    aws_iam_role_name: str | None = Field(
        default=None,
        description="Vault role for AWS IAM login (default {mount_point}-{environment}-role)",
    )

    startup_timeout_seconds: float | None = Field(
        default=DEFAULT_STARTUP_TIMEOUT_SECONDS,
        description="Upper bound for each blocking secret load at startup",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines instead of the console renderer",
    )

    model_config = SettingsConfigDict(
        env_prefix="VAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Remove trailing slashes from the Vault URL."""
        return v.strip().rstrip("/")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """
        Upper-case and check the log level.

        Raises:
            ValueError: If the level is not a standard logging level.
        """
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"log_level must be a standard logging level, got {v!r}")
        return level

    def _connection_configuration(self) -> ConnectionConfiguration | None:
        common = {
            "vault_url": self.url,
            "mount_point": self.mount_point,
            "ignore_tls_errors": self.ignore_tls_errors,
        }
        match self.authentication_type:
            case AuthenticationType.LOCAL:
                return LocalConfiguration(token_file_path=self.token_file_path, **common)
            case AuthenticationType.AWS_IAM:
                return AwsIamConfiguration(
                    environment=self.environment,
                    aws_auth_mount_point=self.aws_auth_mount_point,
                    aws_iam_role_name=self.aws_iam_role_name,
                    **common,
                )
            case AuthenticationType.CUSTOM:
                return CustomConfiguration(**common)
            case _:
                return None

    def to_options(self) -> VaultOptions:
        """
        Build domain options from these settings.

        Returns:
            VaultOptions with the connection configuration variant matching
            authentication_type (None when no type is selected).
        """
        return VaultOptions(
            is_activated=self.is_activated,
            authentication_type=self.authentication_type,
            configuration=self._connection_configuration(),
            startup_timeout_seconds=self.startup_timeout_seconds,
        )


@lru_cache
def get_settings() -> VaultSettings:
    """
    Get cached settings instance.

    Loaded once per process; call get_settings.cache_clear() in tests after
    changing the environment.

    Returns:
        VaultSettings: Cached settings instance.
    """
    return VaultSettings()

"""HashiCorp Vault KV v2 secret service.

Reads secrets from a KV v2 mount through hvac. hvac is a synchronous client,
so each call is offloaded to the default executor and the public API stays
async. One authenticated hvac session is opened at construction and shared
by every call; reads are never cached.

Storage layout:
    {mount_point}/data/{environment}     -> secret tree for one environment
    {mount_point}/metadata/              -> environment listing

Usage:
    service = VaultService.from_options(options)
    password = await service.get_nested_secret_value("production", "database.password")
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from functools import partial
from typing import Any, TypeVar

import hvac
from hvac.exceptions import InvalidPath

from vault_config.core.enums import ErrorCode
from vault_config.core.errors import (
    InvalidArgumentError,
    SecretStoreError,
    VaultConfigurationError,
    VaultError,
)
from vault_config.domain.options import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ConnectionConfiguration,
    VaultOptions,
)
from vault_config.domain.protocols import CredentialProof, LoggerProtocol
from vault_config.domain.validators import ensure_valid
from vault_config.infrastructure.auth import select_credential
from vault_config.infrastructure.secrets.flattener import decode_top_level_value

T = TypeVar("T")

PATH_SEPARATOR = "."


def _require_argument(value: str | None, argument: str) -> str:
    if value is None or not value.strip():
        raise InvalidArgumentError(argument)
    return value


class VaultService:
    """Vault KV v2 adapter implementing VaultServiceProtocol.

    Args:
        configuration: Connection settings (url, mount point, TLS flag).
        credential: Proof used to authenticate the hvac session.
        logger: Optional logger (defaults to the container logger).
        timeout: HTTP timeout in seconds for every request of the session.

    Raises:
        SecretStoreError: If the session cannot be opened (code
            VAULT_CONNECTION_FAILED).
        VaultError: Raised unchanged when the credential itself raises one.
    """

    def __init__(
        self,
        configuration: ConnectionConfiguration,
        credential: CredentialProof,
        *,
        logger: LoggerProtocol | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        if logger is None:
            from vault_config.core.container import get_logger

            logger = get_logger()

        self._mount_point = configuration.mount_point.strip("/")
        self._logger = logger.bind(
            vault_url=configuration.vault_url, mount_point=self._mount_point
        )

        if configuration.ignore_tls_errors:
            self._logger.warning(
                "TLS certificate validation is disabled for Vault; "
                "do not use ignore_tls_errors in production"
            )

        try:
            self._client = hvac.Client(
                url=configuration.vault_url,
                verify=not configuration.ignore_tls_errors,
                timeout=timeout,
            )
            credential.authenticate(self._client)
        except VaultError:
            raise
        except Exception as e:
            raise SecretStoreError(
                f"Unable to open a Vault session at {configuration.vault_url}: {e}",
                code=ErrorCode.VAULT_CONNECTION_FAILED,
                details={"vault_url": configuration.vault_url},
            ) from e

        self._logger.info("Vault session opened")

    @classmethod
    def from_options(
        cls, options: VaultOptions, *, logger: LoggerProtocol | None = None
    ) -> VaultService:
        """Validate options, select the credential and open the session.

        Args:
            options: Activated, valid Vault options.
            logger: Optional logger.

        Returns:
            Connected VaultService.

        Raises:
            VaultConfigurationError: If options are deactivated or invalid.
            VaultAuthenticationError: If the credential cannot be produced.
            UnsupportedAuthenticationError: For AuthenticationType.NONE.
        """
        if not options.is_activated:
            raise VaultConfigurationError(
                "Vault is deactivated (is_activated=False); no service can be built",
                code=ErrorCode.VAULT_NOT_ACTIVATED,
            )
        ensure_valid(options)

        credential = select_credential(
            options.authentication_type,
            options.configuration,
            logger=logger,
            timeout=options.request_timeout_seconds,
        )
        return cls(
            options.configuration,  # type: ignore[arg-type]
            credential,
            logger=logger,
            timeout=options.request_timeout_seconds,
        )  # type: ignore[arg-type]

    @property
    def mount_point(self) -> str:
        """KV v2 mount point this service reads from."""
        return self._mount_point

    async def _run(self, func: Callable[..., T], /, **kwargs: Any) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, **kwargs))

    async def list_environments(self) -> list[str]:
        """List top-level paths under the mount point.

        Returns:
            Path names; empty when the mount holds nothing.

        Raises:
            SecretStoreError: If the list call fails (code SECRET_LIST_FAILED).
        """
        try:
            response = await self._run(
                self._client.secrets.kv.v2.list_secrets,
                path="",
                mount_point=self._mount_point,
            )
        except InvalidPath:
            self._logger.debug("No environments found under mount point")
            return []
        except Exception as e:
            raise SecretStoreError(
                f"Unable to list environments under mount point '{self._mount_point}': {e}",
                code=ErrorCode.SECRET_LIST_FAILED,
                details={"mount_point": self._mount_point},
            ) from e

        keys = ((response or {}).get("data") or {}).get("keys") or []
        return list(keys)

    async def get_secrets(self, environment: str) -> dict[str, Any]:
        """Read the whole secret tree stored for ``environment``.

        Returns:
            Secret tree (empty dict when the path does not exist).

        Raises:
            InvalidArgumentError: If environment is empty.
            SecretStoreError: If the read fails (code SECRET_READ_FAILED).
        """
        _require_argument(environment, "environment")

        try:
            response = await self._run(
                self._client.secrets.kv.v2.read_secret_version,
                path=environment,
                mount_point=self._mount_point,
                raise_on_deleted_version=False,
            )
        except InvalidPath:
            self._logger.debug("Secret path not found", environment=environment)
            return {}
        except Exception as e:
            raise SecretStoreError(
                f"Unable to read secrets for environment '{environment}' "
                f"from mount point '{self._mount_point}': {e}",
                code=ErrorCode.SECRET_READ_FAILED,
                details={"environment": environment, "mount_point": self._mount_point},
            ) from e

        data = ((response or {}).get("data") or {}).get("data") or {}
        self._logger.debug(
            "Secrets read", environment=environment, keys=sorted(data)
        )
        return dict(data)

    async def get_secret_value(self, environment: str, key: str) -> Any | None:
        """Read one top-level value; None when ``key`` is absent."""
        _require_argument(environment, "environment")
        _require_argument(key, "key")

        secrets = await self.get_secrets(environment)
        return secrets.get(key)

    async def get_nested_secret_value(self, environment: str, path: str) -> Any | None:
        """Walk a dotted path through the secret tree.

        A top-level value holding serialized JSON is decoded before walking
        into it, following the flattener's rule. Deeper strings are leaves.

        Example:
            >>> # tree: {"database": {"primary": {"password": "s3cret"}}}
            >>> await service.get_nested_secret_value("dev", "database.primary.password")
            's3cret'
        """
        _require_argument(environment, "environment")
        _require_argument(path, "path")

        current: Any = await self.get_secrets(environment)
        segments = path.split(PATH_SEPARATOR)

        for depth, segment in enumerate(segments):
            if not isinstance(current, Mapping) or segment not in current:
                self._logger.debug(
                    "Nested secret path not found",
                    environment=environment,
                    path=path,
                    segment=segment,
                )
                return None
            current = current[segment]
            if depth == 0 and len(segments) > 1:
                current = decode_top_level_value(current)

        return current

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._client.adapter.close()

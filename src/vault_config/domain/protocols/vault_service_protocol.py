"""Secret access protocol (port).

This protocol defines what applications need from the secret store at
runtime. ``VaultService`` is the concrete adapter.

Applications are READ-ONLY consumers of secrets. Every call is a live round
trip: nothing is cached.
"""

from typing import Any, Protocol


class VaultServiceProtocol(Protocol):
    """Protocol for reading KV v2 secrets."""

    async def list_environments(self) -> list[str]:
        """List top-level paths under the mount point.

        Returns:
            Path names (folders keep their trailing slash).

        Raises:
            SecretStoreError: If the list call fails.
        """
        ...

    async def get_secrets(self, environment: str) -> dict[str, Any]:
        """Read every key/value pair stored at ``{mount_point}/{environment}``.

        Args:
            environment: Path under the mount point (e.g. "production").

        Returns:
            The secret tree. Empty when the path does not exist.

        Raises:
            InvalidArgumentError: If environment is empty.
            SecretStoreError: If the read fails.
        """
        ...

    async def get_secret_value(self, environment: str, key: str) -> Any | None:
        """Read one top-level value.

        Returns:
            The value, or None when the key is absent.

        Raises:
            InvalidArgumentError: If environment or key is empty.
        """
        ...

    async def get_nested_secret_value(self, environment: str, path: str) -> Any | None:
        """Read a nested value through a dotted path ("database.primary.password").

        Returns:
            The value, or None as soon as a segment is missing or not navigable.

        Raises:
            InvalidArgumentError: If environment or path is empty.
        """
        ...

"""In-memory stand-ins for the Vault secret service.

FakeVaultService implements VaultServiceProtocol over a dict of
environment -> secret tree, records every read and can be told to fail or
stall, so configuration and hosting tests never touch hvac.
"""

import asyncio
import copy
from typing import Any


class FakeVaultService:
    """VaultServiceProtocol backed by a dict."""

    def __init__(
        self,
        secrets: dict[str, dict[str, Any]] | None = None,
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.secrets = secrets if secrets is not None else {}
        self.error = error
        self.delay = delay
        self.calls: list[str] = []
        self.closed = False

    async def list_environments(self) -> list[str]:
        return list(self.secrets)

    async def get_secrets(self, environment: str) -> dict[str, Any]:
        self.calls.append(environment)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.secrets.get(environment, {}))

    async def get_secret_value(self, environment: str, key: str) -> Any | None:
        return (await self.get_secrets(environment)).get(key)

    async def get_nested_secret_value(self, environment: str, path: str) -> Any | None:
        current: Any = await self.get_secrets(environment)
        for segment in path.split("."):
            if not isinstance(current, dict) or segment not in current:
                return None
            current = current[segment]
        return current

    def close(self) -> None:
        self.closed = True

"""Secrets infrastructure package.

- VaultService: live KV v2 reads through hvac (implements VaultServiceProtocol)
- flatten_secrets: nested secret tree -> colon-delimited configuration keys

Use vault_config.core.container.get_vault_service() for the settings-driven
singleton, or the hosting facade to register it in a ServiceCollection.
"""

from vault_config.infrastructure.secrets.flattener import (
    decode_top_level_value,
    flatten_secrets,
)
from vault_config.infrastructure.secrets.vault_service import VaultService

__all__ = [
    "VaultService",
    "decode_top_level_value",
    "flatten_secrets",
]

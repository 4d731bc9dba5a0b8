"""Core enums package.

Exports all core-level enums for convenient importing.

Usage:
    from vault_config.core.enums import AuthenticationType, ErrorCode
"""

from vault_config.core.enums.authentication_type import AuthenticationType
from vault_config.core.enums.error_code import ErrorCode

__all__ = ["AuthenticationType", "ErrorCode"]

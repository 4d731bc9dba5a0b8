"""Logging adapters implementing LoggerProtocol."""

from vault_config.infrastructure.logging.console_adapter import ConsoleAdapter

__all__ = ["ConsoleAdapter"]

"""LoggerProtocol definition for structured logging.

Standardizes structured logging across the library while staying
backend-agnostic. Implementations MUST keep logs structured (message plus
key-value context) and safe.

Log Levels:
    - DEBUG: Per-key detail (secret keys, nested path misses)
    - INFO: Lifecycle events (service ready, secrets loaded, reload armed)
    - WARNING: Degraded behavior (TLS validation disabled, optional load failed)
    - ERROR: Failed load or reload
    - CRITICAL: Reserved for host applications

Security:
    - NEVER log secret values or tokens; log keys, counts and paths only.

Usage:
    from vault_config.core.container import get_logger

    logger = get_logger().bind(environment="production", mount_point="kv")
    logger.info("Vault secrets loaded", count=12)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message.

        Args:
            message: Human-readable message (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Human-readable message.
            error: Optional exception; implementations add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message with optional exception details."""
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return a new logger with permanently bound context.

        The original logger is unchanged.

        Example:
            source_logger = logger.bind(environment="dev", source="vault")
            source_logger.info("Loading secrets")  # environment, source included
        """
        ...

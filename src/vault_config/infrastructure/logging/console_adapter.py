"""Console logging adapter.

Writes structured logs to stderr using structlog, so a host application's
stdout stays free for its own output.
- Interactive use: human-readable console renderer
- CI / containers: JSON renderer (one object per line)

Does NOT inherit from LoggerProtocol (PEP 544 structural subtyping). Any
object with the same call signatures is compatible with LoggerProtocol.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

LOGGER_NAME = "vault_config"


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelNamesMapping().get(level.strip().upper())
    if number is None:
        raise ValueError(f"Unknown log level: {level!r}")
    return number


class ConsoleAdapter:
    """Console logger for the Vault configuration pipeline.

    Args:
        level: Minimum level to emit ("DEBUG", "INFO", ... or a logging int).
        use_json: JSON output when True, human-readable when False.
    """

    def __init__(self, *, level: str | int = "INFO", use_json: bool = False) -> None:
        processors: list[structlog.types.Processor] = [
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
        ]

        if use_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

        self._logger = structlog.wrap_logger(
            structlog.PrintLogger(file=sys.stderr),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(_level_number(level)),
            context_class=dict,
        ).bind(logger=LOGGER_NAME)

    @staticmethod
    def _with_error(context: dict[str, Any], error: Exception | None) -> dict[str, Any]:
        if error is not None:
            context["error_type"] = type(error).__name__
            context["error_message"] = str(error)
        return context

    def debug(self, message: str, /, **context: Any) -> None:
        self._logger.debug(message, **context)

    def info(self, message: str, /, **context: Any) -> None:
        self._logger.info(message, **context)

    def warning(self, message: str, /, **context: Any) -> None:
        self._logger.warning(message, **context)

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error message, adding error_type/error_message when given."""
        self._logger.error(message, **self._with_error(context, error))

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical message, adding error_type/error_message when given."""
        self._logger.critical(message, **self._with_error(context, error))

    def bind(self, **context: Any) -> ConsoleAdapter:
        """Return a new adapter with bound context.

        Args:
            **context: Context added to every subsequent log entry.

        Returns:
            ConsoleAdapter: New adapter; this one is unchanged.
        """
        bound_adapter = ConsoleAdapter.__new__(ConsoleAdapter)
        bound_adapter._logger = self._logger.bind(**context)
        return bound_adapter

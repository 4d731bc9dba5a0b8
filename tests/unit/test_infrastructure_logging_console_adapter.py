"""Unit tests for ConsoleAdapter with real structlog.

Tests cover:
- JSON output on stderr
- Level filtering
- Exception fields on error/critical
- Context binding
"""

import json
import sys
from io import StringIO
from unittest.mock import patch

import pytest

from vault_config.domain.protocols import LoggerProtocol
from vault_config.infrastructure.logging import ConsoleAdapter


def _lines(output: StringIO) -> list[dict]:
    return [json.loads(line) for line in output.getvalue().splitlines() if line]


@pytest.mark.unit
class TestConsoleAdapter:
    """Test ConsoleAdapter output."""

    def test_json_mode_writes_to_stderr(self):
        """Test JSON lines go to stderr with level and timestamp."""
        captured = StringIO()

        with patch.object(sys, "stderr", captured):
            adapter = ConsoleAdapter(use_json=True)
            adapter.info("Vault configuration loaded", count=3)

        [entry] = _lines(captured)
        assert entry["event"] == "Vault configuration loaded"
        assert entry["count"] == 3
        assert entry["level"] == "info"
        assert entry["logger"] == "vault_config"
        assert "timestamp" in entry

    def test_level_filters_lower_levels(self):
        """Test messages below the configured level are dropped."""
        captured = StringIO()

        with patch.object(sys, "stderr", captured):
            adapter = ConsoleAdapter(level="WARNING", use_json=True)
            adapter.debug("debug")
            adapter.info("info")
            adapter.warning("warning")

        assert [entry["event"] for entry in _lines(captured)] == ["warning"]

    def test_debug_level_emits_debug(self):
        """Test DEBUG level keeps debug messages."""
        captured = StringIO()

        with patch.object(sys, "stderr", captured):
            ConsoleAdapter(level="debug", use_json=True).debug("keys", keys=["a"])

        assert _lines(captured)[0]["keys"] == ["a"]

    def test_error_adds_exception_fields(self):
        """Test error= adds error_type and error_message."""
        captured = StringIO()

        with patch.object(sys, "stderr", captured):
            adapter = ConsoleAdapter(use_json=True)
            adapter.error("reload failed", error=ConnectionError("reset"))
            adapter.critical("fatal", error=ValueError("bad"))

        error, critical = _lines(captured)
        assert error["error_type"] == "ConnectionError"
        assert error["error_message"] == "reset"
        assert critical["level"] == "critical"
        assert critical["error_type"] == "ValueError"

    def test_bind_returns_new_adapter_with_context(self):
        """Test bound context is added without changing the original."""
        captured = StringIO()

        with patch.object(sys, "stderr", captured):
            adapter = ConsoleAdapter(use_json=True)
            bound = adapter.bind(environment="dev")
            bound.info("bound")
            adapter.info("plain")

        bound_entry, plain_entry = _lines(captured)
        assert bound is not adapter
        assert bound_entry["environment"] == "dev"
        assert "environment" not in plain_entry

    def test_console_renderer_output(self):
        """Test human-readable mode includes the message."""
        captured = StringIO()

        with patch.object(sys, "stderr", captured):
            ConsoleAdapter().warning("TLS certificate validation is disabled")

        assert "TLS certificate validation is disabled" in captured.getvalue()

    def test_unknown_level_rejected(self):
        """Test an unknown level name fails fast."""
        with pytest.raises(ValueError, match="Unknown log level"):
            ConsoleAdapter(level="LOUD")

    def test_satisfies_logger_protocol(self):
        """Test the adapter matches LoggerProtocol structurally."""
        adapter: LoggerProtocol = ConsoleAdapter()

        for name in ("debug", "info", "warning", "error", "critical", "bind"):
            assert callable(getattr(adapter, name))

"""Pytest configuration.

This configuration ensures:
1. Container and settings caches never leak between tests
2. A local .env file never changes test outcomes
3. Components get a mock logger so assertions can inspect log calls
"""

from unittest.mock import Mock

import pytest

from vault_config.core.config import get_settings
from vault_config.core.container import get_logger, get_vault_options, get_vault_service
from vault_config.domain.options import LocalConfiguration, VaultOptions
from tests.utils.fakes import FakeVaultService


def _clear_caches() -> None:
    get_vault_service.cache_clear()
    get_vault_options.cache_clear()
    get_logger.cache_clear()
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def isolated_container(monkeypatch, tmp_path):
    """Clear cached singletons and run each test from an empty directory."""
    monkeypatch.chdir(tmp_path)
    _clear_caches()
    yield
    _clear_caches()


@pytest.fixture
def mock_logger():
    """LoggerProtocol mock whose bind() returns itself."""
    logger = Mock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def token_file(tmp_path):
    """Token file holding a bearer-prefixed token."""
    path = tmp_path / "vault-token"
    path.write_text("Bearer hvs.test-token\n", encoding="utf-8")
    return path


@pytest.fixture
def local_options(token_file):
    """Valid, activated options for token-file authentication."""
    return VaultOptions.for_configuration(
        LocalConfiguration(
            vault_url="https://vault.test:8200",
            mount_point="secret",
            token_file_path=str(token_file),
        )
    )


@pytest.fixture
def fake_vault():
    """FakeVaultService holding the "dev" environment used across tests."""
    return FakeVaultService(
        {
            "dev": {
                "Database": {"Password": "p@ss", "Port": 5432},
                "Unused:Key": "x",
            }
        }
    )

"""Integration tests: host wiring through a real VaultService.

Only the hvac client is mocked. Options validation, token-file
authentication, the async service, the startup join point, flattening and
the configuration layers all run for real.

Tests cover:
- Register-and-load (add_vault)
- Two-step activation (add_vault_service + initialize_vault_providers)
- Settings-driven service from VAULT_* environment variables
- Reload picking up a rotated secret
- Startup timeout against a hung Vault request
"""

import threading
import time
from unittest.mock import MagicMock, patch

import pytest
from hvac.exceptions import InvalidPath

from vault_config import (
    ErrorCode,
    HostApplicationBuilder,
    SecretStoreError,
    VaultService,
    add_vault,
    add_vault_configuration,
    add_vault_service,
    initialize_vault_providers,
)
from vault_config.core.container import get_vault_service
from vault_config.domain.protocols import VaultServiceProtocol


def _kv_response(data):
    return {"data": {"data": data, "metadata": {"version": 1}}}


@pytest.fixture
def hvac_client():
    """Patch hvac in the service module and return the client mock."""
    with patch("vault_config.infrastructure.secrets.vault_service.hvac") as mock_hvac:
        client = MagicMock()
        mock_hvac.Client.return_value = client
        client.secrets.kv.v2.read_secret_version.return_value = _kv_response(
            {
                "Database": {"Password": "p@ss", "Port": 5432},
                "Features": '{"Beta": true, "Regions": ["eu", "us"]}',
            }
        )
        yield client


@pytest.fixture
def builder():
    builder = HostApplicationBuilder()
    builder.configuration.add_in_memory_collection(
        {
            "Database:Password": "from-file",
            "Database:Host": "db.internal",
            "Features:Beta": "false",
        }
    )
    return builder


@pytest.mark.integration
class TestRegisterAndLoad:
    """Test the single-call entry point."""

    def test_secrets_override_file_values(
        self, builder, local_options, hvac_client, mock_logger
    ):
        """Test Vault values replace known keys and leave the rest alone."""
        add_vault(builder, options=local_options, environment="dev", logger=mock_logger)

        with builder.build() as host:
            configuration = host.configuration
            assert configuration["Database:Password"] == "p@ss"
            assert configuration["Database:Host"] == "db.internal"
            assert configuration["Features:Beta"] == "true"
            assert "Database:Port" not in configuration
            assert isinstance(host.services.get(VaultServiceProtocol), VaultService)

        assert hvac_client.token == "hvs.test-token"
        hvac_client.secrets.kv.v2.read_secret_version.assert_called_once_with(
            path="dev", mount_point="secret", raise_on_deleted_version=False
        )
        hvac_client.adapter.close.assert_called_once()

    def test_json_values_flattened_when_unregistered_allowed(
        self, builder, local_options, hvac_client, mock_logger
    ):
        """Test a top-level JSON string expands into indexed keys."""
        add_vault(
            builder,
            options=local_options,
            environment="dev",
            add_unregistered_entries=True,
            logger=mock_logger,
        )

        configuration = builder.build().configuration

        assert configuration["Features:Regions:0"] == "eu"
        assert configuration["Features:Regions:1"] == "us"
        assert configuration["Database:Port"] == "5432"

    def test_missing_environment_is_empty(
        self, builder, local_options, hvac_client, mock_logger
    ):
        """Test an environment with no secrets leaves earlier values."""
        hvac_client.secrets.kv.v2.read_secret_version.side_effect = InvalidPath()

        add_vault(builder, options=local_options, environment="qa", logger=mock_logger)

        assert builder.build().configuration["Database:Password"] == "from-file"


@pytest.mark.integration
class TestTwoStepActivation:
    """Test registering the service and activating the layer later."""

    def test_layer_loads_after_host_build(
        self, builder, local_options, hvac_client, mock_logger
    ):
        """Test the deferred layer stays empty until initialized."""
        add_vault_service(builder.services, options=local_options, logger=mock_logger)
        add_vault_configuration(
            builder.configuration,
            "dev",
            configure_source=lambda s: setattr(s, "logger", mock_logger),
        )
        host = builder.build()

        assert host.configuration["Database:Password"] == "from-file"
        hvac_client.secrets.kv.v2.read_secret_version.assert_not_called()

        assert initialize_vault_providers(host.configuration, host.services) == 1

        assert host.configuration["Database:Password"] == "p@ss"
        assert host.configuration["Database:Port"] == "5432"
        host.close()

    def test_reload_picks_up_rotated_secret(
        self, builder, local_options, hvac_client, mock_logger
    ):
        """Test a reload tick publishes the new value."""
        add_vault(builder, options=local_options, environment="dev", logger=mock_logger)
        host = builder.build()
        hvac_client.secrets.kv.v2.read_secret_version.return_value = _kv_response(
            {"Database": {"Password": "rotated"}}
        )

        assert host.configuration.providers[-1].reload() is True

        assert host.configuration["Database:Password"] == "rotated"
        host.close()


@pytest.mark.integration
class TestSettingsDrivenService:
    """Test the container builds a service from VAULT_* variables."""

    def test_service_from_environment(self, monkeypatch, token_file, hvac_client):
        """Test get_vault_service() authenticates with settings from the env."""
        monkeypatch.setenv("VAULT_AUTHENTICATION_TYPE", "local")
        monkeypatch.setenv("VAULT_URL", "https://vault.test:8200/")
        monkeypatch.setenv("VAULT_MOUNT_POINT", "/secret/")
        monkeypatch.setenv("VAULT_TOKEN_FILE_PATH", str(token_file))

        service = get_vault_service()

        assert isinstance(service, VaultService)
        assert service.mount_point == "secret"
        assert get_vault_service() is service
        assert hvac_client.token == "hvs.test-token"


@pytest.mark.integration
class TestStartupTimeout:
    """Test the startup timeout against a blocking hvac call."""

    def test_hung_read_fails_within_timeout(
        self, builder, local_options, hvac_client, mock_logger
    ):
        """Test a read stuck in the HTTP layer ends startup after the timeout."""
        release = threading.Event()

        def hung_read(**kwargs):
            release.wait(10)
            return _kv_response({})

        hvac_client.secrets.kv.v2.read_secret_version.side_effect = hung_read
        local_options.startup_timeout_seconds = 0.2

        started = time.monotonic()
        try:
            with pytest.raises(SecretStoreError) as exc_info:
                add_vault(
                    builder, options=local_options, environment="dev", logger=mock_logger
                )
            elapsed = time.monotonic() - started
        finally:
            release.set()

        assert exc_info.value.code == ErrorCode.STARTUP_TIMEOUT
        assert elapsed < 2

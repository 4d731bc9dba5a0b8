"""Unit tests for the VaultOptions validator.

Tests cover:
- Valid (type, configuration) pairs produce no violations
- Shape mismatches produce exactly one mismatch violation
- Missing fields are collected, not raised one at a time
- Deactivated options are never checked
- token_file_path is required for local authentication
"""

import pytest

from vault_config.core.enums import AuthenticationType, ErrorCode
from vault_config.core.errors import VaultConfigurationError
from vault_config.domain.options import (
    AwsIamConfiguration,
    CustomConfiguration,
    LocalConfiguration,
    VaultOptions,
)
from vault_config.domain.validators import ensure_valid, validate_vault_options
from vault_config.infrastructure.auth import TokenCredential

URL = "https://vault:8200"

VALID = {
    AuthenticationType.LOCAL: LocalConfiguration(
        vault_url=URL, mount_point="secret", token_file_path="~/.vault-token"
    ),
    AuthenticationType.AWS_IAM: AwsIamConfiguration(
        vault_url=URL, mount_point="kv", environment="production"
    ),
    AuthenticationType.CUSTOM: CustomConfiguration(
        vault_url=URL,
        mount_point="kv",
        auth_method_factory=lambda: TokenCredential("t"),
    ),
}


@pytest.mark.unit
class TestValidateVaultOptions:
    """Test validate_vault_options()."""

    @pytest.mark.parametrize("authentication_type", list(VALID))
    def test_matching_valid_pairs_have_no_errors(self, authentication_type):
        """Test every valid pair passes with zero violations."""
        options = VaultOptions(
            authentication_type=authentication_type,
            configuration=VALID[authentication_type],
        )

        assert validate_vault_options(options) == []

    @pytest.mark.parametrize(
        ("authentication_type", "configuration"),
        [
            (t, config)
            for t in VALID
            for other, config in VALID.items()
            if other != t
        ],
    )
    def test_shape_mismatch_is_single_mismatch_error(
        self, authentication_type, configuration
    ):
        """Test a mismatched variant yields only the mismatch violation."""
        options = VaultOptions(
            authentication_type=authentication_type, configuration=configuration
        )

        errors = validate_vault_options(options)

        assert [error.code for error in errors] == [
            ErrorCode.CONFIGURATION_TYPE_MISMATCH
        ]

    def test_mismatch_reports_no_field_errors_even_when_fields_blank(self):
        """Test blank fields are not reported alongside a mismatch."""
        options = VaultOptions(
            authentication_type=AuthenticationType.AWS_IAM,
            configuration=LocalConfiguration(),
        )

        errors = validate_vault_options(options)

        assert len(errors) == 1
        assert errors[0].field == "configuration"

    def test_deactivated_options_are_not_checked(self):
        """Test is_activated=False skips every rule."""
        assert validate_vault_options(VaultOptions(is_activated=False)) == []

    def test_none_type_and_missing_configuration(self):
        """Test NONE and a missing configuration are both reported."""
        errors = validate_vault_options(VaultOptions())

        assert [error.code for error in errors] == [
            ErrorCode.AUTHENTICATION_TYPE_MISSING,
            ErrorCode.CONFIGURATION_MISSING,
        ]

    def test_missing_fields_are_collected(self):
        """Test every blank required field is reported at once."""
        options = VaultOptions.for_configuration(
            LocalConfiguration(vault_url=" ", mount_point="", token_file_path="")
        )

        errors = validate_vault_options(options)

        assert [error.field for error in errors] == [
            "configuration.vault_url",
            "configuration.mount_point",
            "configuration.token_file_path",
        ]

    def test_local_token_file_path_is_required(self):
        """Test local authentication rejects a blank token path."""
        options = VaultOptions.for_configuration(
            LocalConfiguration(vault_url=URL, mount_point="kv", token_file_path="  ")
        )

        errors = validate_vault_options(options)

        assert [error.code for error in errors] == [ErrorCode.REQUIRED_FIELD_MISSING]
        assert errors[0].field == "configuration.token_file_path"

    def test_local_default_token_file_path_passes(self):
        """Test the conventional default satisfies the rule."""
        options = VaultOptions.for_configuration(
            LocalConfiguration(vault_url=URL, mount_point="kv")
        )

        assert validate_vault_options(options) == []

    def test_aws_environment_is_required(self):
        """Test AWS IAM authentication needs an environment."""
        options = VaultOptions.for_configuration(
            AwsIamConfiguration(vault_url=URL, mount_point="kv")
        )

        errors = validate_vault_options(options)

        assert [error.field for error in errors] == ["configuration.environment"]

    def test_custom_factory_is_required(self):
        """Test custom authentication needs a factory."""
        options = VaultOptions.for_configuration(
            CustomConfiguration(vault_url=URL, mount_point="kv")
        )

        errors = validate_vault_options(options)

        assert [error.code for error in errors] == [
            ErrorCode.AUTH_METHOD_FACTORY_MISSING
        ]

    def test_non_positive_timeout_is_reported(self):
        """Test startup_timeout_seconds must be positive."""
        options = VaultOptions.for_configuration(
            VALID[AuthenticationType.LOCAL], startup_timeout_seconds=0
        )

        errors = validate_vault_options(options)

        assert [error.field for error in errors] == ["startup_timeout_seconds"]


@pytest.mark.unit
class TestEnsureValid:
    """Test ensure_valid()."""

    def test_valid_options_pass(self):
        """Test nothing is raised for valid options."""
        ensure_valid(VaultOptions.for_configuration(VALID[AuthenticationType.LOCAL]))

    def test_raises_once_with_every_violation(self):
        """Test one aggregated error lists every problem."""
        options = VaultOptions.for_configuration(
            AwsIamConfiguration(vault_url="", mount_point="", environment="")
        )

        with pytest.raises(VaultConfigurationError) as exc_info:
            ensure_valid(options)

        error = exc_info.value
        assert len(error.errors) == 3
        assert "configuration.vault_url is required" in str(error)
        assert "configuration.mount_point is required" in str(error)
        assert "configuration.environment is required" in str(error)

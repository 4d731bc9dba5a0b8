"""Option validators.

Usage:
    from vault_config.domain.validators import ensure_valid, validate_vault_options
"""

from vault_config.domain.validators.vault_options_validator import (
    ensure_valid,
    validate_vault_options,
)

__all__ = ["ensure_valid", "validate_vault_options"]

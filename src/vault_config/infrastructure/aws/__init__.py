"""AWS helpers (SigV4 request signing)."""

from vault_config.infrastructure.aws.sigv4 import sign_request

__all__ = ["sign_request"]

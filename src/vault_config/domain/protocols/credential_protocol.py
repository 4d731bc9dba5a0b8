"""Credential proof protocol.

A credential proof is what an authentication strategy produces: something
that can open a session on a Vault client. Built-in proofs cover token files
and AWS IAM; custom factories can return any object with a matching
``authenticate`` method (for example one wrapping ``client.auth.approle.login``).
"""

from typing import Protocol, runtime_checkable

import hvac


@runtime_checkable
class CredentialProof(Protocol):
    """Opens an authenticated session on an hvac client."""

    def authenticate(self, client: hvac.Client) -> None:
        """Authenticate ``client`` in place (set or obtain its token).

        Args:
            client: Unauthenticated hvac client bound to the Vault URL.

        Raises:
            Exception: Any transport or Vault error; callers wrap it.
        """
        ...

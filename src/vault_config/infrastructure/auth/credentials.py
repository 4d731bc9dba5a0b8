"""Built-in credential proofs.

File: credentials.py -> TokenCredential, AwsIamCredential

Both implement CredentialProof structurally (no inheritance).
"""

from dataclasses import dataclass, field

import hvac


@dataclass(frozen=True, slots=True)
class TokenCredential:
    """A static Vault token."""

    token: str = field(repr=False)

    def authenticate(self, client: hvac.Client) -> None:
        """Attach the token to ``client`` (no network call)."""
        client.token = self.token


@dataclass(frozen=True, slots=True, kw_only=True)
class AwsIamCredential:
    """A signed STS GetCallerIdentity request for Vault's AWS auth method.

    All request fields are base64-encoded, as Vault expects them.

    Attributes:
        mount_point: Mount path of the AWS auth method (e.g. "aws").
        role_name: Vault role to log in as.
        request_url: Base64 STS endpoint URL.
        request_headers: Base64 JSON of the signed headers.
        request_body: Base64 request body.
        request_method: HTTP method of the signed request.
    """

    mount_point: str
    role_name: str
    request_url: str
    request_headers: str = field(repr=False)
    request_body: str
    request_method: str = "POST"

    @property
    def login_path(self) -> str:
        """Vault API path of the login endpoint."""
        return f"/v1/auth/{self.mount_point.strip('/')}/login"

    def login_payload(self) -> dict[str, str]:
        """JSON body posted to the login endpoint."""
        return {
            "role": self.role_name,
            "iam_http_request_method": self.request_method,
            "iam_request_url": self.request_url,
            "iam_request_headers": self.request_headers,
            "iam_request_body": self.request_body,
        }

    def authenticate(self, client: hvac.Client) -> None:
        """Log in through the AWS auth method; hvac stores the client token."""
        client.login(self.login_path, json=self.login_payload())

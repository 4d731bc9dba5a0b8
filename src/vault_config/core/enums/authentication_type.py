"""Vault authentication strategies.

Defines how the library proves its identity to Vault before reading secrets.

Types:
- NONE: Unselected sentinel (always rejected when Vault is activated)
- LOCAL: Static token read from a local file (e.g. ~/.vault-token)
- AWS_IAM: Signed STS GetCallerIdentity exchange against the AWS auth method
- CUSTOM: Caller-supplied credential factory (AppRole, LDAP, Kubernetes, ...)
"""

from enum import Enum


class AuthenticationType(str, Enum):
    """Vault authentication types."""

    NONE = "none"
    LOCAL = "local"
    AWS_IAM = "aws_iam"
    CUSTOM = "custom"

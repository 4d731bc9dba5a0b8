"""AWS Signature Version 4 request signing.

Minimal SigV4 implementation used to prove possession of AWS credentials to
Vault's AWS auth method. Vault replays the signed STS request, so the
signature must match what AWS computes.

Algorithm:
    1. amz_date = YYYYMMDDTHHMMSSZ (UTC), date_stamp = YYYYMMDD
    2. add host, x-amz-date and (with temporary credentials)
       x-amz-security-token to the headers
    3. canonical request = METHOD \\n URI \\n QUERY \\n canonical headers \\n
       signed header names \\n hex(sha256(body))
    4. string to sign = AWS4-HMAC-SHA256 \\n amz_date \\n scope \\n
       hex(sha256(canonical request))
    5. signing key = HMAC chain over date, region, service, "aws4_request"
    6. Authorization = algorithm, credential scope, signed headers, signature

Reference:
    https://docs.aws.amazon.com/IAM/latest/UserGuide/create-signed-request.html
"""

import hashlib
import hmac
from collections.abc import Mapping
from datetime import UTC, datetime

ALGORITHM = "AWS4-HMAC-SHA256"
TERMINATOR = "aws4_request"


def sha256_hex(data: str | bytes) -> str:
    """Hex-encoded SHA-256 digest of ``data`` (UTF-8 for str)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def _hmac(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def derive_signing_key(
    secret_key: str, date_stamp: str, region: str, service: str
) -> bytes:
    """Derive the SigV4 signing key.

    Args:
        secret_key: AWS secret access key.
        date_stamp: Request date (YYYYMMDD).
        region: AWS region (e.g. us-east-1).
        service: Service name (e.g. sts).

    Returns:
        32-byte signing key.
    """
    k_date = _hmac(f"AWS4{secret_key}".encode("utf-8"), date_stamp)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, service)
    return _hmac(k_service, TERMINATOR)


def sign_request(
    *,
    access_key: str,
    secret_key: str,
    session_token: str | None,
    region: str,
    service: str,
    method: str,
    host: str,
    path: str,
    query: str,
    headers: Mapping[str, str],
    body: str | None,
    now: datetime | None = None,
) -> dict[str, str]:
    """Sign a request and return the full header set to send.

    Args:
        access_key: AWS access key id.
        secret_key: AWS secret access key.
        session_token: Session token for temporary credentials (optional).
        region: Signing region.
        service: Signing service name.
        method: HTTP method (upper case).
        host: Target host.
        path: Canonical URI ("/" when empty).
        query: Canonical query string (already encoded and sorted).
        headers: Headers to sign in addition to host/x-amz-date.
        body: Request payload (None for empty).
        now: Signing time; defaults to the current UTC time.

    Returns:
        The input headers plus host, x-amz-date, optional
        x-amz-security-token and Authorization.

    Example:
        >>> signed = sign_request(
        ...     access_key="AKID", secret_key="secret", session_token=None,
        ...     region="us-east-1", service="sts", method="POST",
        ...     host="sts.amazonaws.com", path="/", query="",
        ...     headers={"Content-Type": "application/x-www-form-urlencoded"},
        ...     body="Action=GetCallerIdentity&Version=2011-06-15",
        ... )
        >>> signed["Authorization"].startswith("AWS4-HMAC-SHA256 Credential=AKID/")
        True
    """
    now = (now or datetime.now(UTC)).astimezone(UTC)
    amz_date = now.strftime("%Y%m%dT%H%M%SZ")
    date_stamp = now.strftime("%Y%m%d")

    signed_headers = dict(headers)
    signed_headers["host"] = host
    signed_headers["x-amz-date"] = amz_date
    if session_token:
        signed_headers["x-amz-security-token"] = session_token

    canonical = sorted(
        (name.lower(), " ".join(value.strip().split()))
        for name, value in signed_headers.items()
    )
    canonical_headers = "".join(f"{name}:{value}\n" for name, value in canonical)
    signed_header_names = ";".join(name for name, _ in canonical)

    canonical_request = "\n".join(
        [
            method.upper(),
            path or "/",
            query or "",
            canonical_headers,
            signed_header_names,
            sha256_hex(body or ""),
        ]
    )

    credential_scope = f"{date_stamp}/{region}/{service}/{TERMINATOR}"
    string_to_sign = "\n".join(
        [ALGORITHM, amz_date, credential_scope, sha256_hex(canonical_request)]
    )

    signing_key = derive_signing_key(secret_key, date_stamp, region, service)
    signature = hmac.new(
        signing_key, string_to_sign.encode("utf-8"), hashlib.sha256
    ).hexdigest()

    signed_headers["Authorization"] = (
        f"{ALGORITHM} Credential={access_key}/{credential_scope}, "
        f"SignedHeaders={signed_header_names}, Signature={signature}"
    )
    return signed_headers

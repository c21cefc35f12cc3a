"""HMAC-SHA256 signed tokens for access and refresh credentials.

Format: ``base64url(json_payload).base64url(signature)``. Every token
carries an ``exp`` claim; callers put the credential kind in ``type``.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time

ACCESS = "access"
REFRESH = "refresh"


def create_signed_token(payload: dict, secret: str, expires_in: int) -> str:
    """Create a base64url-encoded, HMAC-signed JSON payload with expiration.

    Args:
        payload: Claims to encode in the token.
        secret: HMAC signing secret.
        expires_in: Token lifetime in seconds.
    """
    payload = {**payload, "exp": int(time.time()) + expires_in}
    payload_bytes = json.dumps(payload, separators=(",", ":")).encode()
    payload_b64 = base64.urlsafe_b64encode(payload_bytes).decode()

    sig = hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).digest()
    sig_b64 = base64.urlsafe_b64encode(sig).decode()

    return f"{payload_b64}.{sig_b64}"


def verify_signed_token(token: str, secret: str, expected_type: str | None = None) -> dict | None:
    """Verify and decode a signed token.

    Returns:
        Decoded claims, or ``None`` if the token is malformed, expired,
        tampered with, or of a different ``type`` than ``expected_type``.
    """
    if not token:
        return None

    parts = token.split(".")
    if len(parts) != 2:
        return None

    payload_b64, sig_b64 = parts

    expected_sig = hmac.new(secret.encode(), payload_b64.encode(), hashlib.sha256).digest()
    try:
        actual_sig = base64.urlsafe_b64decode(sig_b64)
    except (binascii.Error, ValueError):
        return None

    if not hmac.compare_digest(expected_sig, actual_sig):
        return None

    try:
        payload = json.loads(base64.urlsafe_b64decode(payload_b64))
    except (binascii.Error, ValueError):
        return None

    if not isinstance(payload, dict):
        return None

    exp = payload.get("exp")
    if not isinstance(exp, (int, float)) or time.time() > exp:
        return None

    if expected_type is not None and payload.get("type") != expected_type:
        return None

    return payload

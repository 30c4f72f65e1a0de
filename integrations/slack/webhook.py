"""Slack request signature validation."""

import hashlib
import hmac
import time
from typing import Optional, Union

MAX_REQUEST_AGE_SECONDS = 60 * 5


def sign_slack_request(signing_secret: str, timestamp: str, body: Union[bytes, str]) -> str:
    """Compute the ``v0=`` signature Slack sends for ``body``.

    The base string is ``v0:{timestamp}:{body}`` signed with HMAC-SHA256
    using the app's signing secret.
    """
    body_bytes = body.encode("utf-8") if isinstance(body, str) else body
    base_string = f"v0:{timestamp}:".encode("utf-8") + body_bytes
    computed_hmac = hmac.new(
        key=signing_secret.encode("utf-8"),
        msg=base_string,
        digestmod=hashlib.sha256,
    ).hexdigest()
    return f"v0={computed_hmac}"


def validate_slack_signature(
    signing_secret: str,
    timestamp: str,
    body: Union[bytes, str],
    signature: str,
    now: Optional[int] = None,
) -> bool:
    """Validate a Slack request signature (v0 scheme).

    Security features:
    - Constant-time comparison
    - Timestamp replay protection (reject > 5 minutes old)

    Args:
        signing_secret: Slack app signing secret.
        timestamp: X-Slack-Request-Timestamp header value.
        body: Raw request body, exactly as received.
        signature: X-Slack-Signature header value (e.g., "v0=abc123...").
        now: Current epoch seconds, defaults to the system clock.

    Returns:
        True if signature is valid and timestamp is fresh, False otherwise.
    """
    if not timestamp or not signature:
        return False

    current_time = int(time.time()) if now is None else now
    try:
        request_time = int(timestamp)
    except (ValueError, TypeError):
        return False
    if abs(current_time - request_time) > MAX_REQUEST_AGE_SECONDS:
        return False

    expected_signature = sign_slack_request(signing_secret, timestamp, body)
    return hmac.compare_digest(expected_signature, signature)

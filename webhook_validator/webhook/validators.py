"""Webhook signature validation."""

import hmac


class ValidationError(Exception):
    """Raised when a webhook request fails signature validation."""

    def __init__(self, key_label: str, webhook_id: str, ip: str | None) -> None:
        self.key_label = key_label
        self.webhook_id = webhook_id
        self.ip = ip
        super().__init__(f"invalid webhook: {key_label} {webhook_id} {ip}")


def validate_payload(
    raw_body: bytes | str,
    signature: str | None = None,
    secret_key: str | None = None,
) -> bool:
    """Check a payload against its ``algorithm=hexdigest`` signature.

    A request with neither a signature nor a secret passes, since no
    validation is configured for it. A request with only one of the two
    fails.

    Args:
        raw_body: The request body exactly as received. A str is UTF-8 encoded.
        signature: The X-Hub-Signature header value, e.g. ``sha1=6364b3...``.
        secret_key: The secret the sender is expected to sign with.

    Returns:
        True if the signature matches the payload, False otherwise.
    """
    if not (signature or secret_key):
        return True
    if not (signature and secret_key):
        return False

    algorithm_and_hash = signature.split("=")
    if len(algorithm_and_hash) != 2:
        return False
    algorithm, expected_hash = algorithm_and_hash

    if isinstance(raw_body, str):
        raw_body = raw_body.encode("utf-8")

    try:
        digest = hmac.new(secret_key.encode("utf-8"), raw_body, algorithm).hexdigest()
    except (ValueError, TypeError):
        # Unknown or unusable digest name
        return False

    return hmac.compare_digest(digest.encode("ascii"), expected_hash.encode("utf-8"))

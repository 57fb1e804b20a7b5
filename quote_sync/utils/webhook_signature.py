import base64
import hashlib
import hmac

from quote_sync.exceptions import WebhookVerificationError


def verify_webhook_signature(body: bytes, signature: str | None, verifier_token: str) -> None:
    """
    Check the ``intuit-signature`` header: base64(HMAC-SHA256(verifier_token, raw body)).
    Raises WebhookVerificationError on a missing or mismatched signature.
    """
    if not signature:
        raise WebhookVerificationError("Missing webhook signature")

    digest = hmac.new(verifier_token.encode(), body, hashlib.sha256).digest()
    expected = base64.b64encode(digest).decode()
    if not hmac.compare_digest(signature.strip(), expected):
        raise WebhookVerificationError("Webhook signature mismatch")

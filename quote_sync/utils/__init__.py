from quote_sync.utils.oauth_state import generate_state, verify_state
from quote_sync.utils.webhook_signature import verify_webhook_signature

__all__ = ["generate_state", "verify_state", "verify_webhook_signature"]

import base64
import hmac
import json
import secrets
from datetime import datetime, timezone
from typing import Any

from quote_sync.common.constants import StateTTL
from quote_sync.config import settings


def _sign(payload_b64: str) -> str:
    return hmac.new(
        settings.OAUTH_STATE_SECRET.encode(),
        payload_b64.encode(),
        "sha256",
    ).hexdigest()


def generate_state() -> str:
    payload = {
        "nonce": secrets.token_urlsafe(16),
        "timestamp": int(datetime.now(timezone.utc).timestamp()),
    }

    payload_json = json.dumps(payload, separators=(",", ":"))
    payload_b64 = base64.urlsafe_b64encode(payload_json.encode()).decode()

    return f"{payload_b64}.{_sign(payload_b64)}"


def verify_state(state: str) -> dict[str, Any] | None:
    try:
        payload_b64, signature = state.split(".", 1)
    except ValueError:
        return None

    if not hmac.compare_digest(signature, _sign(payload_b64)):
        return None

    try:
        payload_json = base64.urlsafe_b64decode(payload_b64).decode()
        payload = json.loads(payload_json)
    except (ValueError, json.JSONDecodeError):
        return None

    timestamp = payload.get("timestamp")
    if not timestamp:
        return None

    state_age = datetime.now(timezone.utc).timestamp() - timestamp
    if state_age > StateTTL.OAUTH_STATE_SECONDS:
        return None

    return payload

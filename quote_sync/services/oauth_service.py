import asyncio

from intuitlib.client import AuthClient
from intuitlib.enums import Scopes
from intuitlib.exceptions import AuthClientError

from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.config import settings
from quote_sync.exceptions import AuthError
from quote_sync.models.oauth import CallbackDTO
from quote_sync.services.credential_store import CredentialStore
from quote_sync.utils.oauth_state import generate_state, verify_state

CONNECTED = "connected"


class OAuthService:
    """One-time QuickBooks connect flow that seeds the credential record."""

    def __init__(self, credential_store: CredentialStore, auth_client: AuthClient | None = None):
        self.credential_store = credential_store
        self._auth_client = auth_client
        self._log = setup_logger()

    @property
    def auth_client(self) -> AuthClient:
        if self._auth_client is None:
            self._auth_client = AuthClient(
                client_id=settings.QBO_CLIENT_ID,
                client_secret=settings.QBO_CLIENT_SECRET,
                redirect_uri=settings.QBO_REDIRECT_URI,
                environment=settings.QBO_ENVIRONMENT,
            )
        return self._auth_client

    def get_authorization_url(self) -> str:
        state = generate_state()
        return self.auth_client.get_authorization_url([Scopes.ACCOUNTING], state_token=state)

    async def handle_callback(self, callback_dto: CallbackDTO) -> CallbackDTO:
        if verify_state(callback_dto.state) is None:
            raise ValueError("Invalid or expired state")

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                None, self.auth_client.get_bearer_token, callback_dto.code, callback_dto.realmId
            )
        except AuthClientError as e:
            self._log.error(f"Token exchange failed: status={e.status_code}, realm_id={callback_dto.realmId}")
            raise AuthError(f"Token exchange rejected with status {e.status_code}") from e

        access_token = self.auth_client.access_token
        refresh_token = self.auth_client.refresh_token
        if not access_token or not refresh_token:
            raise AuthError("Failed to obtain tokens from Intuit OAuth")

        await self.credential_store.save(callback_dto.realmId, access_token, refresh_token)

        self._log.info(f"QuickBooks connected: realm_id={callback_dto.realmId}")
        callback_dto.status = CONNECTED
        return callback_dto

import asyncio
import time
from datetime import datetime, timezone
from functools import partial

from intuitlib.client import AuthClient
from intuitlib.exceptions import AuthClientError

from quote_sync.common.constants import CredentialFields, ErrorMessage, LogMessage, TokenLifetime
from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.config import settings
from quote_sync.db.credentials_datastore import CredentialsDataStore
from quote_sync.exceptions import AuthError, StorageError
from quote_sync.models.credentials import QuickBooksCredentials
from quote_sync.services.token_cipher import TokenCipher


class CredentialStore:
    """
    Owns the persisted QuickBooks tokens.

    One instance is shared per process. ``refresh`` is single-flight: while a
    refresh is in progress every caller awaits that same refresh instead of
    spending the refresh token a second time. A caller that arrives after the
    refresh finished, still holding the refresh token it consumed, gets the
    access token that refresh produced for as long as that token is valid.
    """

    def __init__(
        self,
        datastore: CredentialsDataStore | None = None,
        cipher: TokenCipher | None = None,
        auth_client: AuthClient | None = None,
        key: str | None = None,
    ):
        self.key = key or settings.CREDENTIALS_KEY
        self.datastore = datastore or CredentialsDataStore()
        self.cipher = cipher or TokenCipher()
        self._auth_client = auth_client
        self._refresh_task: asyncio.Task | None = None
        self._last_refresh: tuple[str, str, float] | None = None
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

    async def read(self) -> QuickBooksCredentials:
        try:
            details = await self.datastore.get_connection_details(self.key)
        except Exception as e:
            raise StorageError(ErrorMessage.CREDENTIALS_MALFORMED.format(error=str(e))) from e

        if details is None:
            raise StorageError(ErrorMessage.CREDENTIALS_NOT_FOUND.format(key=self.key))

        try:
            return QuickBooksCredentials(
                realm_id=details.get(CredentialFields.REALM_ID),
                access_token=self.cipher.decrypt(details[CredentialFields.ACCESS_TOKEN]),
                refresh_token=self.cipher.decrypt(details[CredentialFields.REFRESH_TOKEN]),
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise StorageError(ErrorMessage.CREDENTIALS_MALFORMED.format(error=str(e))) from e

    async def refresh(self, refresh_token: str) -> str:
        if self._last_refresh is not None:
            used_refresh_token, access_token, expires_at = self._last_refresh
            if used_refresh_token == refresh_token and time.monotonic() < expires_at:
                self._log.info(LogMessage.REFRESH_ALREADY_DONE.format(key=self.key))
                return access_token

        if self._refresh_task is None or self._refresh_task.done():
            self._refresh_task = asyncio.create_task(self._refresh(refresh_token))
        return await asyncio.shield(self._refresh_task)

    async def save(self, realm_id: str, access_token: str, refresh_token: str) -> None:
        try:
            await self.datastore.update_connection_details(
                self.key,
                {
                    CredentialFields.REALM_ID: realm_id,
                    CredentialFields.ACCESS_TOKEN: self.cipher.encrypt(access_token),
                    CredentialFields.REFRESH_TOKEN: self.cipher.encrypt(refresh_token),
                    CredentialFields.REFRESHED_AT: datetime.now(timezone.utc).isoformat(),
                },
            )
        except Exception as e:
            raise StorageError(f"Failed to persist credentials: {e}") from e
        self._log.info(LogMessage.CREDENTIALS_SAVED.format(key=self.key, realm_id=realm_id))

    async def _refresh(self, refresh_token: str) -> str:
        auth_client = self.auth_client
        auth_client.access_token = None
        auth_client.refresh_token = None
        auth_client.expires_in = None

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, partial(auth_client.refresh, refresh_token=refresh_token))
        except AuthClientError as e:
            self._log.error(f"Token refresh rejected: status={e.status_code}, intuit_tid={e.intuit_tid}")
            raise AuthError(f"Token refresh rejected with status {e.status_code}: {e.content}") from e

        new_access_token = auth_client.access_token
        new_refresh_token = auth_client.refresh_token
        if not new_access_token:
            raise AuthError("Token refresh returned no access token")
        expires_in = auth_client.expires_in or TokenLifetime.ACCESS_TOKEN_SECONDS

        connection_details = {
            CredentialFields.ACCESS_TOKEN: self.cipher.encrypt(new_access_token),
            CredentialFields.REFRESHED_AT: datetime.now(timezone.utc).isoformat(),
        }
        if new_refresh_token:
            connection_details[CredentialFields.REFRESH_TOKEN] = self.cipher.encrypt(new_refresh_token)

        try:
            updated = await self.datastore.update_connection_details(self.key, connection_details)
        except Exception as e:
            raise StorageError(f"Failed to persist refreshed credentials: {e}") from e

        self._last_refresh = (
            refresh_token,
            new_access_token,
            time.monotonic() + expires_in - TokenLifetime.EXPIRY_MARGIN_SECONDS,
        )
        self._log.info(
            LogMessage.TOKENS_REFRESHED.format(
                key=self.key,
                realm_id=updated.get(CredentialFields.REALM_ID),
                rotated=bool(new_refresh_token),
            )
        )
        return new_access_token

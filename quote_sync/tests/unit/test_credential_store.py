import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from cryptography.fernet import Fernet
from intuitlib.exceptions import AuthClientError
from quote_sync.exceptions import AuthError, StorageError
from quote_sync.services.credential_store import CredentialStore
from quote_sync.services.token_cipher import TokenCipher


def _auth_client_error(status_code: int = 400) -> AuthClientError:
    response = Mock()
    response.status_code = status_code
    response.content = b'{"error": "invalid_grant"}'
    response.text = '{"error": "invalid_grant"}'
    response.headers = {"intuit_tid": "tid-123"}
    return AuthClientError(response)


class TestCredentialStore:
    @pytest.fixture
    def cipher(self):
        return TokenCipher(key=Fernet.generate_key().decode())

    @pytest.fixture
    def datastore(self):
        datastore = Mock()
        datastore.get_connection_details = AsyncMock()
        datastore.update_connection_details = AsyncMock(return_value={"realm_id": "realm_456"})
        return datastore

    @pytest.fixture
    def auth_client(self):
        client = Mock()
        client.access_token = None
        client.refresh_token = None
        client.expires_in = None
        return client

    @pytest.fixture
    def store(self, datastore, cipher, auth_client):
        return CredentialStore(datastore=datastore, cipher=cipher, auth_client=auth_client, key="default")

    @pytest.fixture
    def stored_details(self, cipher):
        return {
            "realm_id": "realm_456",
            "access_token": cipher.encrypt("access_old"),
            "refresh_token": cipher.encrypt("refresh_old"),
            "company_name": "Acme Fuels",
        }

    @pytest.mark.asyncio
    async def test_read_returns_decrypted_credentials(self, store, datastore, stored_details):
        datastore.get_connection_details.return_value = stored_details

        credentials = await store.read()

        assert credentials.realm_id == "realm_456"
        assert credentials.access_token == "access_old"
        assert credentials.refresh_token == "refresh_old"
        datastore.get_connection_details.assert_called_once_with("default")

    @pytest.mark.asyncio
    async def test_read_raises_storage_error_when_record_missing(self, store, datastore):
        datastore.get_connection_details.return_value = None

        with pytest.raises(StorageError, match="No QuickBooks credentials"):
            await store.read()

    @pytest.mark.asyncio
    async def test_read_raises_storage_error_when_record_malformed(self, store, datastore, cipher):
        datastore.get_connection_details.return_value = {"realm_id": "realm_456", "access_token": "not-encrypted"}

        with pytest.raises(StorageError, match="malformed"):
            await store.read()

    @pytest.mark.asyncio
    async def test_read_raises_storage_error_when_realm_missing(self, store, datastore, cipher):
        datastore.get_connection_details.return_value = {
            "access_token": cipher.encrypt("a"),
            "refresh_token": cipher.encrypt("r"),
        }

        with pytest.raises(StorageError):
            await store.read()

    @pytest.mark.asyncio
    async def test_read_raises_storage_error_when_database_unavailable(self, store, datastore):
        datastore.get_connection_details.side_effect = OSError("connection refused")

        with pytest.raises(StorageError):
            await store.read()

    @pytest.mark.asyncio
    async def test_refresh_persists_new_access_and_rotated_refresh_token(self, store, datastore, auth_client, cipher):
        def _refresh(refresh_token):
            assert refresh_token == "refresh_old"
            auth_client.access_token = "access_new"
            auth_client.refresh_token = "refresh_new"

        auth_client.refresh.side_effect = _refresh

        access_token = await store.refresh("refresh_old")

        assert access_token == "access_new"
        datastore.update_connection_details.assert_called_once()
        key, details = datastore.update_connection_details.call_args[0]
        assert key == "default"
        assert cipher.decrypt(details["access_token"]) == "access_new"
        assert cipher.decrypt(details["refresh_token"]) == "refresh_new"
        assert "realm_id" not in details

    @pytest.mark.asyncio
    async def test_refresh_keeps_existing_refresh_token_when_provider_omits_one(
        self, store, datastore, auth_client, cipher
    ):
        auth_client.refresh_token = "stale_from_previous_call"

        def _refresh(refresh_token):
            auth_client.access_token = "access_new"

        auth_client.refresh.side_effect = _refresh

        await store.refresh("refresh_old")

        details = datastore.update_connection_details.call_args[0][1]
        assert "refresh_token" not in details
        assert cipher.decrypt(details["access_token"]) == "access_new"

    @pytest.mark.asyncio
    async def test_refresh_rejected_raises_auth_error_without_persisting(self, store, datastore, auth_client):
        auth_client.refresh.side_effect = _auth_client_error(400)

        with pytest.raises(AuthError, match="400"):
            await store.refresh("refresh_old")

        datastore.update_connection_details.assert_not_called()

    @pytest.mark.asyncio
    async def test_refresh_persist_failure_raises_storage_error(self, store, datastore, auth_client):
        def _refresh(refresh_token):
            auth_client.access_token = "access_new"

        auth_client.refresh.side_effect = _refresh
        datastore.update_connection_details.side_effect = OSError("disk full")

        with pytest.raises(StorageError):
            await store.refresh("refresh_old")

    @pytest.mark.asyncio
    async def test_concurrent_refreshes_share_a_single_exchange(self, store, datastore, auth_client):
        calls = []

        def _refresh(refresh_token):
            calls.append(refresh_token)
            auth_client.access_token = "access_new"
            auth_client.refresh_token = "refresh_new"

        auth_client.refresh.side_effect = _refresh

        results = await asyncio.gather(*(store.refresh("refresh_old") for _ in range(5)))

        assert results == ["access_new"] * 5
        assert len(calls) == 1
        datastore.update_connection_details.assert_called_once()

    @pytest.mark.asyncio
    async def test_stale_refresh_token_after_completed_refresh_reuses_result(self, store, datastore, auth_client):
        used = []

        def _refresh(refresh_token):
            used.append(refresh_token)
            auth_client.access_token = f"access_for_{refresh_token}"
            auth_client.refresh_token = f"rotated_{refresh_token}"
            auth_client.expires_in = 3600

        auth_client.refresh.side_effect = _refresh

        first = await store.refresh("refresh_old")
        second = await store.refresh("refresh_old")

        assert first == second == "access_for_refresh_old"
        assert used == ["refresh_old"]
        datastore.update_connection_details.assert_called_once()

    @pytest.mark.asyncio
    async def test_refresh_with_new_refresh_token_exchanges_again(self, store, auth_client):
        def _refresh(refresh_token):
            auth_client.access_token = f"access_for_{refresh_token}"
            auth_client.refresh_token = f"rotated_{refresh_token}"
            auth_client.expires_in = 3600

        auth_client.refresh.side_effect = _refresh

        first = await store.refresh("refresh_1")
        second = await store.refresh("rotated_refresh_1")

        assert first == "access_for_refresh_1"
        assert second == "access_for_rotated_refresh_1"
        assert auth_client.refresh.call_count == 2

    @pytest.mark.asyncio
    async def test_refresh_exchanges_again_once_previous_access_token_expired(self, store, auth_client):
        used = []

        def _refresh(refresh_token):
            used.append(refresh_token)
            auth_client.access_token = f"access_{len(used)}"
            auth_client.expires_in = 30

        auth_client.refresh.side_effect = _refresh

        first = await store.refresh("refresh_old")
        second = await store.refresh("refresh_old")

        assert first == "access_1"
        assert second == "access_2"
        assert auth_client.refresh.call_count == 2

    @pytest.mark.asyncio
    async def test_rejected_refresh_is_not_reused(self, store, auth_client):
        auth_client.refresh.side_effect = _auth_client_error(400)

        with pytest.raises(AuthError):
            await store.refresh("refresh_old")

        def _refresh(refresh_token):
            auth_client.access_token = "access_new"

        auth_client.refresh.side_effect = _refresh

        assert await store.refresh("refresh_old") == "access_new"
        assert auth_client.refresh.call_count == 2

    @pytest.mark.asyncio
    async def test_save_encrypts_tokens(self, store, datastore, cipher):
        await store.save("realm_789", "access_x", "refresh_x")

        key, details = datastore.update_connection_details.call_args[0]
        assert key == "default"
        assert details["realm_id"] == "realm_789"
        assert cipher.decrypt(details["access_token"]) == "access_x"
        assert cipher.decrypt(details["refresh_token"]) == "refresh_x"

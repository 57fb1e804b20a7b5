from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from quote_sync.db.credentials_datastore import CredentialsDataStore
from quote_sync.db.tables import Base, CredentialsDBModel


class TestCredentialsDataStore:
    @pytest.fixture
    def datastore(self):
        return CredentialsDataStore()

    @pytest.mark.asyncio
    async def test_get_connection_details_returns_copy(self, datastore):
        details = {"realm_id": "realm_456", "access_token": "enc"}
        row = CredentialsDBModel(key="default", connection_details=details)

        with patch.object(datastore, "execute_scalar", new_callable=AsyncMock) as mock_scalar:
            mock_scalar.return_value = row

            result = await datastore.get_connection_details("default")

            assert result == details
            assert result is not details

    @pytest.mark.asyncio
    async def test_get_connection_details_missing(self, datastore):
        with patch.object(datastore, "execute_scalar", new_callable=AsyncMock) as mock_scalar:
            mock_scalar.return_value = None

            assert await datastore.get_connection_details("default") is None


class TestCredentialsDataStoreIntegration:
    @pytest_asyncio.fixture
    async def datastore(self, tmp_path):
        datastore = CredentialsDataStore()
        datastore._url = f"sqlite+aiosqlite:///{tmp_path / 'credentials.db'}"
        async with datastore.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        yield datastore
        await datastore.close()

    @pytest.mark.asyncio
    async def test_update_creates_then_merges(self, datastore):
        created = await datastore.update_connection_details(
            "default", {"realm_id": "realm_456", "access_token": "a1", "refresh_token": "r1"}
        )
        merged = await datastore.update_connection_details("default", {"access_token": "a2"})

        assert created == {"realm_id": "realm_456", "access_token": "a1", "refresh_token": "r1"}
        assert merged == {"realm_id": "realm_456", "access_token": "a2", "refresh_token": "r1"}
        assert await datastore.get_connection_details("default") == merged

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, datastore):
        await datastore.update_connection_details("default", {"realm_id": "realm_1"})
        await datastore.update_connection_details("other", {"realm_id": "realm_2"})

        assert (await datastore.get_connection_details("default"))["realm_id"] == "realm_1"
        assert (await datastore.get_connection_details("other"))["realm_id"] == "realm_2"

from sqlalchemy import select

from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.db.base_engine import BaseSQLEngine
from quote_sync.db.tables import CredentialsDBModel


class CredentialsDataStore(BaseSQLEngine):
    def __init__(self):
        super().__init__()
        self._log = setup_logger()

    async def get_connection_details(self, key: str) -> dict | None:
        try:
            query = select(CredentialsDBModel).where(CredentialsDBModel.key == key)
            row = await self.execute_scalar(query)
            if row is None:
                return None
            return dict(row.connection_details) if isinstance(row.connection_details, dict) else {}
        except Exception as e:
            self._log.error(f"Failed to get connection details for key={key}: {e}")
            raise

    async def update_connection_details(self, key: str, connection_details: dict) -> dict:
        """Merge ``connection_details`` into the stored record, creating it when absent."""
        try:
            async with self.sessionmaker() as session:
                async with session.begin():
                    row = (
                        await session.execute(select(CredentialsDBModel).where(CredentialsDBModel.key == key))
                    ).scalars().first()
                    if row is None:
                        updated_details = dict(connection_details)
                        session.add(CredentialsDBModel(key=key, connection_details=updated_details))
                    else:
                        existing_details = row.connection_details if isinstance(row.connection_details, dict) else {}
                        updated_details = {**existing_details, **connection_details}
                        row.connection_details = updated_details
            return updated_details
        except Exception as e:
            self._log.error(f"Failed to update connection details for key={key}: {e}")
            raise

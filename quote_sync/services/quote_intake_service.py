from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.db.quote_datastore import QuoteDataStore
from quote_sync.models.quote import QuoteIntakeDTO


class QuoteIntakeService:
    def __init__(self, datastore: QuoteDataStore | None = None):
        self.datastore = datastore or QuoteDataStore()
        self._log = setup_logger()

    async def save_quote(self, quote_dto: QuoteIntakeDTO) -> QuoteIntakeDTO:
        quote_dto.quote_id = await self.datastore.save_quote(quote_dto)
        self._log.info(
            f"Quote intake completed: quote_id={quote_dto.quote_id}, customer={quote_dto.customer_name}, "
            f"date={quote_dto.quote_date.isoformat()}, products={len(quote_dto.products)}"
        )
        return quote_dto

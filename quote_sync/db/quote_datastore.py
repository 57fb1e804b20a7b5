from datetime import date

from sqlalchemy import select

from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.db.base_engine import BaseSQLEngine
from quote_sync.db.tables import CustomerDBModel, QuoteDBModel, SiteDBModel
from quote_sync.models.quote import Customer, Quote, QuoteIntakeDTO, Site


class QuoteDataStore(BaseSQLEngine):
    """
    Customer, site and quote records written by quote intake.

    Lookups are exact-match and uncached: quotes change through intake at any
    time, so every reconciliation reads the current rows.
    """

    def __init__(self):
        super().__init__()
        self._log = setup_logger()

    async def find_customer_by_name(self, name: str) -> Customer | None:
        """Customers are keyed by email, so a name can match several rows; the newest one is used."""
        try:
            query = (
                select(CustomerDBModel)
                .where(CustomerDBModel.name == name)
                .order_by(CustomerDBModel.created_at.desc(), CustomerDBModel.id)
            )
            rows = await self.execute_query_fetch_all(query)
            if not rows:
                return None
            if len(rows) > 1:
                self._log.warning(
                    f"Customer name is ambiguous, using newest: name={name}, matches={len(rows)}, "
                    f"customer_id={rows[0].id}"
                )
            return Customer.model_validate(rows[0])
        except Exception as e:
            self._log.error(f"Failed to get customer by name={name}: {e}")
            raise

    async def find_site_by_customer_and_address(self, customer_id: str, address: str) -> Site | None:
        try:
            query = select(SiteDBModel).where(
                SiteDBModel.customer_id == customer_id,
                SiteDBModel.address == address,
            )
            row = await self.execute_scalar(query)
            return Site.model_validate(row) if row else None
        except Exception as e:
            self._log.error(f"Failed to get site for customer_id={customer_id}, address={address}: {e}")
            raise

    async def find_quote_by_site_and_date(self, site_id: str, quote_date: date) -> Quote | None:
        try:
            query = (
                select(QuoteDBModel)
                .where(QuoteDBModel.site_id == site_id, QuoteDBModel.quote_date == quote_date)
                .order_by(QuoteDBModel.created_at.desc(), QuoteDBModel.id.desc())
            )
            row = await self.execute_scalar(query)
            return Quote.model_validate(row) if row else None
        except Exception as e:
            self._log.error(f"Failed to get quote for site_id={site_id}, date={quote_date}: {e}")
            raise

    async def save_quote(self, quote_dto: QuoteIntakeDTO) -> str:
        """Upsert the customer (by email) and site (by customer + address), then insert the quote."""
        email = quote_dto.customer_email.strip().lower()
        address = quote_dto.site_address.strip()
        try:
            async with self.sessionmaker() as session:
                async with session.begin():
                    customer = (
                        await session.execute(select(CustomerDBModel).where(CustomerDBModel.email == email))
                    ).scalars().first()
                    if customer is None:
                        customer = quote_dto.to_customer_row()
                        session.add(customer)
                        await session.flush()
                    else:
                        customer.name = quote_dto.customer_name.strip()

                    site = (
                        await session.execute(
                            select(SiteDBModel).where(
                                SiteDBModel.customer_id == customer.id,
                                SiteDBModel.address == address,
                            )
                        )
                    ).scalars().first()
                    if site is None:
                        site = quote_dto.to_site_row(customer.id)
                        session.add(site)
                        await session.flush()

                    quote = quote_dto.to_db_rows(site.id)[0]
                    session.add(quote)
                    await session.flush()
                    quote_id = quote.id

            self._log.info(f"Quote saved: quote_id={quote_id}, customer_id={customer.id}, site_id={site.id}")
            return quote_id
        except Exception as e:
            self._log.error(f"Failed to save quote for customer_email={email}: {e}")
            raise

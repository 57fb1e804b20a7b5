from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from quote_sync.common.constants import QuoteIntakeStatus
from quote_sync.db.tables import CustomerDBModel, QuoteDBModel, SiteDBModel
from quote_sync.models.base import DtoModel


class QuoteProduct(BaseModel):
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)


class Customer(BaseModel):
    id: str
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class Site(BaseModel):
    id: str
    customer_id: str
    address: str

    model_config = ConfigDict(from_attributes=True)


class Quote(BaseModel):
    id: str
    site_id: str
    quote_date: date
    products: list[QuoteProduct]

    model_config = ConfigDict(from_attributes=True)


class QuoteIntakeDTO(DtoModel):
    """DTO for the quote intake flow (request + response)"""

    customer_name: str = Field(..., alias="customerName", min_length=1)
    customer_email: str = Field(..., alias="customerEmail", min_length=3)
    site_address: str = Field(..., alias="siteAddress", min_length=1)
    quote_date: date = Field(..., alias="date")
    products: list[QuoteProduct] = Field(..., min_length=1)
    quote_id: str | None = None

    @classmethod
    def from_db_rows(cls, *args, **kwargs):
        raise NotImplementedError("Quote intake is not read back from DB")

    @classmethod
    def from_db_row(cls, *args, **kwargs):
        raise NotImplementedError("Quote intake is not read back from DB")

    def to_db_rows(self, site_id: str) -> list[QuoteDBModel]:
        return [
            QuoteDBModel(
                site_id=site_id,
                quote_date=self.quote_date,
                products=[product.model_dump(mode="json") for product in self.products],
            )
        ]

    def to_customer_row(self) -> CustomerDBModel:
        return CustomerDBModel(name=self.customer_name.strip(), email=self.customer_email.strip().lower())

    def to_site_row(self, customer_id: str) -> SiteDBModel:
        return SiteDBModel(customer_id=customer_id, address=self.site_address.strip())

    @classmethod
    def from_request(cls, payload: dict) -> "QuoteIntakeDTO":
        return cls.model_validate(payload)

    def to_response(self, *args, **kwargs) -> dict:
        if not self.quote_id:
            raise ValueError("Quote id not set")
        return {"status": QuoteIntakeStatus.SAVED, "quote_id": self.quote_id}

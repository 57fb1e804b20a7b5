from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel

from quote_sync.common.constants import QuickBooksFields


class InvoiceLine(BaseModel):
    """One sales line of a QuickBooks invoice."""

    line_id: str | None = None
    description: str | None = None
    amount: Decimal | None = None
    item_ref: dict[str, Any] | None = None
    quantity: Decimal | None = None
    unit_price: Decimal | None = None

    @property
    def product_name(self) -> str | None:
        if self.item_ref and self.item_ref.get(QuickBooksFields.NAME):
            return self.item_ref[QuickBooksFields.NAME]
        return self.description

    @classmethod
    def from_qbo(cls, line: dict) -> "InvoiceLine":
        detail = line.get(QuickBooksFields.SALES_ITEM_LINE_DETAIL) or {}
        return cls(
            line_id=line.get(QuickBooksFields.ID),
            description=line.get(QuickBooksFields.DESCRIPTION),
            amount=line.get(QuickBooksFields.AMOUNT),
            item_ref=detail.get(QuickBooksFields.ITEM_REF),
            quantity=detail.get(QuickBooksFields.QTY),
            unit_price=detail.get(QuickBooksFields.UNIT_PRICE),
        )


class Invoice(BaseModel):
    id: str
    sync_token: str
    customer_name: str | None = None
    bill_address_line1: str | None = None
    transaction_date: date | None = None
    lines: list[InvoiceLine] = []

    @classmethod
    def from_qbo(cls, data: dict) -> "Invoice":
        """
        Build an Invoice from the QuickBooks ``Invoice`` object.

        Only lines carrying a SalesItemLineDetail are kept; sub-total and
        discount lines have no product to match.
        """
        if not isinstance(data, dict):
            raise ValueError("Invoice payload must be an object")

        customer_ref = data.get(QuickBooksFields.CUSTOMER_REF) or {}
        bill_addr = data.get(QuickBooksFields.BILL_ADDR) or {}
        raw_lines = data.get(QuickBooksFields.LINE) or []

        return cls(
            id=str(data[QuickBooksFields.ID]),
            sync_token=str(data[QuickBooksFields.SYNC_TOKEN]),
            customer_name=_clean(customer_ref.get(QuickBooksFields.NAME)),
            bill_address_line1=_clean(bill_addr.get(QuickBooksFields.LINE1)),
            transaction_date=_parse_date(data.get(QuickBooksFields.TXN_DATE)),
            lines=[
                InvoiceLine.from_qbo(line)
                for line in raw_lines
                if isinstance(line, dict) and QuickBooksFields.SALES_ITEM_LINE_DETAIL in line
            ],
        )


class InvoiceLineUpdate(BaseModel):
    """Replacement sales line carrying the quoted unit price."""

    line_id: str | None = None
    description: str | None = None
    item_ref: dict[str, Any] | None = None
    quantity: Decimal
    unit_price: Decimal
    amount: Decimal

    def to_qbo(self) -> dict:
        detail: dict[str, Any] = {
            QuickBooksFields.QTY: float(self.quantity),
            QuickBooksFields.UNIT_PRICE: float(self.unit_price),
        }
        if self.item_ref:
            detail[QuickBooksFields.ITEM_REF] = self.item_ref

        line: dict[str, Any] = {
            QuickBooksFields.DETAIL_TYPE: QuickBooksFields.SALES_ITEM_LINE_DETAIL,
            QuickBooksFields.AMOUNT: float(self.amount),
            QuickBooksFields.SALES_ITEM_LINE_DETAIL: detail,
        }
        if self.line_id:
            line[QuickBooksFields.ID] = self.line_id
        if self.description:
            line[QuickBooksFields.DESCRIPTION] = self.description
        return line


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _parse_date(value: Any) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from quote_sync.common.constants import LogMessage, ReconciliationStatus, SkipReason
from quote_sync.common.logging.json_logger import setup_logger
from quote_sync.db.quote_datastore import QuoteDataStore
from quote_sync.exceptions import (
    AuthError,
    InvoiceValidationError,
    NotFoundError,
    StorageError,
    UnauthorizedError,
    UpstreamError,
)
from quote_sync.models.credentials import QuickBooksCredentials
from quote_sync.models.invoice import Invoice, InvoiceLineUpdate
from quote_sync.models.notification import ChangeNotification
from quote_sync.models.quote import Quote, QuoteProduct
from quote_sync.models.reconciliation import ReconciliationOutcome
from quote_sync.services.credential_store import CredentialStore
from quote_sync.services.product_normalizer import names_match, normalize_product_name
from quote_sync.services.quickbooks_client import QuickBooksInvoiceClient

AMOUNT_QUANTUM = Decimal("0.01")
DEFAULT_QUANTITY = Decimal("1")


def calculate_line_amount(unit_price: Decimal, quantity: Decimal) -> Decimal:
    """Line total rounded half-up to cents (3.333 x 3 -> 10.00)."""
    return (unit_price * quantity).quantize(AMOUNT_QUANTUM, rounding=ROUND_HALF_UP)


class ReconciliationService:
    """
    Reprices newly created QuickBooks invoices from the matching quote.

    Events are handled one at a time. Per-invoice problems (missing data, no
    quote, upstream rejection) end in a skipped or failed outcome and never
    stop the rest of the notification. Only credential storage failures
    escape, since no invoice can be processed without credentials.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        invoice_client: QuickBooksInvoiceClient | None = None,
        quote_datastore: QuoteDataStore | None = None,
    ):
        self.credential_store = credential_store
        self.invoice_client = invoice_client or QuickBooksInvoiceClient()
        self.quote_datastore = quote_datastore or QuoteDataStore()
        self._log = setup_logger()

    async def process_notification(self, notification: ChangeNotification) -> list[ReconciliationOutcome]:
        self._log.info(LogMessage.NOTIFICATION_RECEIVED.format(count=len(notification.events)))

        outcomes: list[ReconciliationOutcome] = []
        for event in notification.events:
            if not event.is_invoice_create:
                self._log.debug(
                    LogMessage.EVENT_IGNORED.format(
                        entity_type=event.entity_type, operation=event.operation, entity_id=event.entity_id
                    )
                )
                continue
            outcomes.append(await self.reconcile_invoice(event.entity_id))
        return outcomes

    async def reconcile_invoice(self, invoice_id: str) -> ReconciliationOutcome:
        credentials = await self.credential_store.read()

        try:
            return await self._reconcile_invoice(invoice_id, credentials)
        except StorageError:
            raise
        except AuthError as e:
            self._log.error(LogMessage.TOKEN_REFRESH_FAILED.format(invoice_id=invoice_id, error=str(e)))
            return ReconciliationOutcome.failed(invoice_id, str(e))
        except UpstreamError as e:
            self._log.error(LogMessage.INVOICE_FETCH_FAILED.format(invoice_id=invoice_id, error=str(e)))
            return ReconciliationOutcome.failed(invoice_id, str(e))
        except InvoiceValidationError as e:
            self._log.warning(LogMessage.MISSING_FIELD.format(invoice_id=invoice_id, field=e.field))
            return ReconciliationOutcome.skipped(invoice_id, f"{SkipReason.MISSING_FIELD}:{e.field}")
        except NotFoundError as e:
            self._log.warning(str(e))
            return ReconciliationOutcome.skipped(invoice_id, e.reason)
        except Exception as e:
            self._log.exception(LogMessage.UNEXPECTED_ERROR.format(invoice_id=invoice_id, error=str(e)))
            return ReconciliationOutcome.failed(invoice_id, str(e))

    async def _reconcile_invoice(self, invoice_id: str, credentials: QuickBooksCredentials) -> ReconciliationOutcome:
        invoice, access_token = await self._fetch_invoice(credentials, invoice_id)
        customer_name, site_address, transaction_date = self._required_fields(invoice)
        quote = await self._resolve_quote(invoice.id, customer_name, site_address, transaction_date)

        line_updates, unmatched_items = self._match_lines(invoice, quote)
        if not line_updates:
            self._log.warning(LogMessage.NO_MATCHING_LINES.format(invoice_id=invoice.id, quote_id=quote.id))
            return ReconciliationOutcome.skipped(
                invoice.id, SkipReason.NO_MATCHING_LINES, quote_id=quote.id, unmatched_items=unmatched_items
            )

        try:
            await self.invoice_client.update_invoice(
                credentials.realm_id, invoice.id, invoice.sync_token, line_updates, access_token
            )
        except UpstreamError as e:
            self._log.error(
                LogMessage.INVOICE_UPDATE_FAILED.format(invoice_id=invoice.id, error=str(e), fault=e.fault)
            )
            return ReconciliationOutcome.failed(invoice.id, str(e))

        self._log.info(
            LogMessage.INVOICE_UPDATED.format(invoice_id=invoice.id, quote_id=quote.id, lines=len(line_updates))
        )
        return ReconciliationOutcome(
            invoice_id=invoice.id,
            status=ReconciliationStatus.UPDATED,
            quote_id=quote.id,
            matched_lines=len(line_updates),
            unmatched_items=unmatched_items,
        )

    async def _fetch_invoice(self, credentials: QuickBooksCredentials, invoice_id: str) -> tuple[Invoice, str]:
        try:
            invoice = await self.invoice_client.fetch_invoice(
                credentials.realm_id, invoice_id, credentials.access_token
            )
            return invoice, credentials.access_token
        except UnauthorizedError:
            self._log.info(LogMessage.INVOICE_FETCH_UNAUTHORIZED.format(invoice_id=invoice_id))

        access_token = await self.credential_store.refresh(credentials.refresh_token)
        invoice = await self.invoice_client.fetch_invoice(credentials.realm_id, invoice_id, access_token)
        return invoice, access_token

    @staticmethod
    def _required_fields(invoice: Invoice) -> tuple[str, str, date]:
        if not invoice.customer_name:
            raise InvoiceValidationError("CustomerRef.name")
        if not invoice.bill_address_line1:
            raise InvoiceValidationError("BillAddr.Line1")
        if not invoice.transaction_date:
            raise InvoiceValidationError("TxnDate")
        return invoice.customer_name, invoice.bill_address_line1, invoice.transaction_date

    async def _resolve_quote(
        self, invoice_id: str, customer_name: str, site_address: str, transaction_date: date
    ) -> Quote:
        customer = await self.quote_datastore.find_customer_by_name(customer_name)
        if customer is None:
            raise NotFoundError(
                LogMessage.CUSTOMER_NOT_FOUND.format(invoice_id=invoice_id, customer=customer_name),
                SkipReason.CUSTOMER_NOT_FOUND,
            )

        site = await self.quote_datastore.find_site_by_customer_and_address(customer.id, site_address)
        if site is None:
            raise NotFoundError(
                LogMessage.SITE_NOT_FOUND.format(invoice_id=invoice_id, customer_id=customer.id, address=site_address),
                SkipReason.SITE_NOT_FOUND,
            )

        quote = await self.quote_datastore.find_quote_by_site_and_date(site.id, transaction_date)
        if quote is None:
            raise NotFoundError(
                LogMessage.QUOTE_NOT_FOUND.format(invoice_id=invoice_id, site_id=site.id, date=transaction_date),
                SkipReason.QUOTE_NOT_FOUND,
            )
        return quote

    def _match_lines(self, invoice: Invoice, quote: Quote) -> tuple[list[InvoiceLineUpdate], list[str]]:
        line_updates: list[InvoiceLineUpdate] = []
        unmatched_items: list[str] = []

        for line in invoice.lines:
            product = self._find_quoted_product(line.product_name, quote.products)
            if product is None:
                self._log.info(
                    LogMessage.LINE_NOT_MATCHED.format(
                        invoice_id=invoice.id,
                        item=line.product_name,
                        normalized=normalize_product_name(line.product_name),
                    )
                )
                unmatched_items.append(line.product_name or "")
                continue

            quantity = line.quantity if line.quantity is not None else DEFAULT_QUANTITY
            line_updates.append(
                InvoiceLineUpdate(
                    line_id=line.line_id,
                    description=line.description,
                    item_ref=line.item_ref,
                    quantity=quantity,
                    unit_price=product.price,
                    amount=calculate_line_amount(product.price, quantity),
                )
            )

        return line_updates, unmatched_items

    @staticmethod
    def _find_quoted_product(item_name: str | None, products: list[QuoteProduct]) -> QuoteProduct | None:
        return next((product for product in products if names_match(item_name, product.name)), None)

from quote_sync.models.credentials import QuickBooksCredentials
from quote_sync.models.invoice import Invoice, InvoiceLine, InvoiceLineUpdate
from quote_sync.models.notification import ChangeNotification, EntityChange
from quote_sync.models.oauth import CallbackDTO
from quote_sync.models.quote import Customer, Quote, QuoteIntakeDTO, QuoteProduct, Site
from quote_sync.models.reconciliation import ReconciliationOutcome

__all__ = [
    "QuickBooksCredentials",
    "Invoice",
    "InvoiceLine",
    "InvoiceLineUpdate",
    "CallbackDTO",
    "ChangeNotification",
    "EntityChange",
    "Customer",
    "Site",
    "Quote",
    "QuoteProduct",
    "QuoteIntakeDTO",
    "ReconciliationOutcome",
]

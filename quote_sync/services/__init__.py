from quote_sync.services.credential_store import CredentialStore
from quote_sync.services.oauth_service import OAuthService
from quote_sync.services.product_normalizer import names_match, normalize_product_name
from quote_sync.services.quickbooks_client import QuickBooksInvoiceClient
from quote_sync.services.quote_intake_service import QuoteIntakeService
from quote_sync.services.reconciliation_service import ReconciliationService, calculate_line_amount

__all__ = [
    "CredentialStore",
    "OAuthService",
    "QuickBooksInvoiceClient",
    "QuoteIntakeService",
    "ReconciliationService",
    "calculate_line_amount",
    "names_match",
    "normalize_product_name",
]

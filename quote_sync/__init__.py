from quote_sync.services.product_normalizer import normalize_product_name
from quote_sync.services.reconciliation_service import ReconciliationService

__all__ = [
    "ReconciliationService",
    "normalize_product_name",
]

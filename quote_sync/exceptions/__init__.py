from quote_sync.exceptions.reconciliation_exceptions import (
    AuthError,
    InvoiceValidationError,
    NotFoundError,
    QuoteSyncError,
    StorageError,
    UnauthorizedError,
    UpstreamError,
    WebhookVerificationError,
)

__all__ = [
    "QuoteSyncError",
    "AuthError",
    "UpstreamError",
    "UnauthorizedError",
    "NotFoundError",
    "StorageError",
    "InvoiceValidationError",
    "WebhookVerificationError",
]

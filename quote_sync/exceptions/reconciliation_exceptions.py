class QuoteSyncError(Exception):
    """Base exception for quote reconciliation errors."""


class AuthError(QuoteSyncError):
    """Raised when a token exchange or refresh is rejected."""


class UpstreamError(QuoteSyncError):
    """Raised when a QuickBooks API call fails for a reason other than authorization."""

    def __init__(self, message: str, status_code: int | None = None, fault: list[dict] | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.fault = fault or []


class UnauthorizedError(UpstreamError):
    """Raised when QuickBooks answers 401 for the supplied access token."""


class NotFoundError(QuoteSyncError):
    """Raised when a customer, site or quote does not exist."""

    def __init__(self, message: str, reason: str):
        super().__init__(message)
        self.reason = reason


class StorageError(QuoteSyncError):
    """Raised when the persisted credential record is absent or unreadable."""


class InvoiceValidationError(QuoteSyncError):
    """Raised when an invoice lacks a field required for reconciliation."""

    def __init__(self, field: str):
        super().__init__(f"Invoice is missing required field: {field}")
        self.field = field


class WebhookVerificationError(QuoteSyncError):
    """Raised when webhook signature verification fails."""

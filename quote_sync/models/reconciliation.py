from pydantic import BaseModel

from quote_sync.common.constants import ReconciliationStatus


class ReconciliationOutcome(BaseModel):
    invoice_id: str
    status: str
    reason: str | None = None
    quote_id: str | None = None
    matched_lines: int = 0
    unmatched_items: list[str] = []

    @classmethod
    def skipped(cls, invoice_id: str, reason: str, **kwargs) -> "ReconciliationOutcome":
        return cls(invoice_id=invoice_id, status=ReconciliationStatus.SKIPPED, reason=reason, **kwargs)

    @classmethod
    def failed(cls, invoice_id: str, reason: str) -> "ReconciliationOutcome":
        return cls(invoice_id=invoice_id, status=ReconciliationStatus.FAILED, reason=reason)

    @property
    def is_updated(self) -> bool:
        return self.status == ReconciliationStatus.UPDATED

from functools import lru_cache

from quote_sync.services.credential_store import CredentialStore
from quote_sync.services.oauth_service import OAuthService
from quote_sync.services.quote_intake_service import QuoteIntakeService
from quote_sync.services.reconciliation_service import ReconciliationService


@lru_cache
def get_credential_store() -> CredentialStore:
    return CredentialStore()


@lru_cache
def get_reconciliation_service() -> ReconciliationService:
    return ReconciliationService(credential_store=get_credential_store())


@lru_cache
def get_quote_intake_service() -> QuoteIntakeService:
    return QuoteIntakeService()


def get_oauth_service() -> OAuthService:
    return OAuthService(credential_store=get_credential_store())

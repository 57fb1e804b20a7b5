from quote_sync.db.tables import Base, CredentialsDBModel, CustomerDBModel, QuoteDBModel, SiteDBModel

__all__ = [
    "Base",
    "CustomerDBModel",
    "SiteDBModel",
    "QuoteDBModel",
    "CredentialsDBModel",
]

from quote_sync.config import settings


def build_database_url(settings_obj) -> str:
    if settings_obj.DATABASE_URL:
        return settings_obj.DATABASE_URL
    if not (
        settings_obj.QUOTES_DB_ENGINE
        and settings_obj.QUOTES_DB_USER
        and settings_obj.QUOTES_DB_PW
        and settings_obj.QUOTES_DB_URL
    ):
        return ""
    schema = settings_obj.QUOTES_SCHEMA_NAME
    return (
        f"{settings_obj.QUOTES_DB_ENGINE}://"
        f"{settings_obj.QUOTES_DB_USER}:{settings_obj.QUOTES_DB_PW}"
        f"@{settings_obj.QUOTES_DB_URL}/{schema}"
    )


def create_quotes_data_store_url() -> str:
    url = build_database_url(settings)
    if not url:
        raise RuntimeError("Database not configured. Set DATABASE_URL environment variable.")
    return url

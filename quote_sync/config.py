from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PORT: int = 8080
    ENV: str = "DEV"
    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "quote-sync"
    DATABASE_URL: str = ""
    QUOTES_DB_ENGINE: str = ""
    QUOTES_DB_USER: str = ""
    QUOTES_DB_PW: str = ""
    QUOTES_DB_URL: str = ""
    QUOTES_SCHEMA_NAME: str = "quotes"
    QBO_CLIENT_ID: str = ""
    QBO_CLIENT_SECRET: str = ""
    QBO_ENVIRONMENT: str = "sandbox"
    QBO_REDIRECT_URI: str = ""
    QBO_WEBHOOK_VERIFIER_TOKEN: str = ""
    QBO_MINOR_VERSION: str = "65"
    TOKEN_ENCRYPTION_KEY: str = ""
    OAUTH_STATE_SECRET: str = ""
    CREDENTIALS_KEY: str = "default"


settings = Settings()

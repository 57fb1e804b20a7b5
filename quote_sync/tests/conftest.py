import os

from cryptography.fernet import Fernet


def pytest_configure(config):
    """
    Pytest hook that runs before any test collection or imports.
    Sets up environment variables needed for tests.
    """
    os.environ["TOKEN_ENCRYPTION_KEY"] = Fernet.generate_key().decode()
    os.environ["OAUTH_STATE_SECRET"] = "test-oauth-state-secret"
    os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
    os.environ["QBO_CLIENT_ID"] = "test-client-id"
    os.environ["QBO_CLIENT_SECRET"] = "test-client-secret"
    os.environ["QBO_REDIRECT_URI"] = "https://quotes.example.com/api/v1/oauth/callback"
    os.environ["QBO_ENVIRONMENT"] = "sandbox"
    os.environ["QBO_WEBHOOK_VERIFIER_TOKEN"] = ""
    os.environ["ENV"] = "LOCAL"

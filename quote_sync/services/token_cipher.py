from cryptography.fernet import Fernet, InvalidToken

from quote_sync.config import settings


class TokenCipher:
    """Encrypts OAuth tokens before they are written to the credentials table."""

    def __init__(self, key: str | None = None):
        self.fernet = Fernet((key or settings.TOKEN_ENCRYPTION_KEY).encode())

    def encrypt(self, token: str) -> str:
        return self.fernet.encrypt(token.encode()).decode()

    def decrypt(self, encrypted_token: str) -> str:
        try:
            return self.fernet.decrypt(encrypted_token.encode()).decode()
        except InvalidToken as e:
            raise ValueError("Token could not be decrypted with the configured key") from e

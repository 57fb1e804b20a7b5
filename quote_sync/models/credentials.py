from pydantic import BaseModel, Field


class QuickBooksCredentials(BaseModel):
    """Decrypted QuickBooks connection tokens for one realm."""

    realm_id: str = Field(..., min_length=1)
    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)

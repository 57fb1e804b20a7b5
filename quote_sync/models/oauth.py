from pydantic import BaseModel, Field


class CallbackDTO(BaseModel):
    """DTO for the OAuth connect callback (query + response)"""

    code: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    realmId: str = Field(..., min_length=1)
    status: str | None = None

    @classmethod
    def from_request(cls, code: str, state: str, realm_id: str) -> "CallbackDTO":
        return cls(code=code, state=state, realmId=realm_id)

    def to_response(self) -> dict:
        if not self.status:
            raise ValueError("Status not set")
        return {"status": self.status, "realm_id": self.realmId}

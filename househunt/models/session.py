"""
Session model - the credential handed over by the external auth service.
"""
from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """Logged-in viewer: user id plus bearer token. Never mutated here."""
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    token: str = Field(repr=False)

    @property
    def authorization_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

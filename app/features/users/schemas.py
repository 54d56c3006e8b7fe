from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """The authenticated caller: one user acting under one role."""
    user_id: str = Field(..., description="Subject of the session token")
    role: str = Field(..., description="Active role id; may be outside the known enumeration")

    model_config = ConfigDict(frozen=True)

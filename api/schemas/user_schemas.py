from pydantic import BaseModel
from typing import Optional


class User(BaseModel):
    """Authenticated caller as resolved from the access_token cookie."""
    email: str
    preferences: Optional[dict] = None
    hashed_password: str


class UserInfoResponse(BaseModel):
    email: str
    preferences: Optional[dict] = None

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class LoginSchema(BaseModel):
    email: str
    password: str


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    user: UserOut
    token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds

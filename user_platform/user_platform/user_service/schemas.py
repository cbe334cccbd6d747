from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserCreate(BaseModel):
    firstname: str = Field(max_length=64)
    lastname: str = Field(max_length=64)
    email: str = Field(max_length=64)
    password: str


class UserResponse(BaseModel):
    id: int
    firstname: str
    lastname: str
    email: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class TokenClaims(UserResponse):
    """Identity embedded in a signed token. Has no field for the password record."""


class AuthenticationRequest(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

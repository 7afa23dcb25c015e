from typing import Optional

from pydantic import BaseModel, Field


class Token(BaseModel):
    access_token: str
    token_type: str


class LoginRequest(BaseModel):
    login: str


class RegisterRequest(BaseModel):
    login: str = Field(min_length=2, max_length=50)
    display_name: str = Field(min_length=1, max_length=100)
    club: Optional[str] = None

from __future__ import annotations

from pydantic import BaseModel, Field


class RegisterIn(BaseModel):
    name: str = Field(min_length=2, max_length=120)
    email: str = Field(min_length=5, max_length=160)
    password: str = Field(min_length=8)


class RegisterOut(BaseModel):
    message: str
    user_id: int


class LoginIn(BaseModel):
    email: str
    password: str


class TokenOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    account_id: int


class MessageOut(BaseModel):
    message: str

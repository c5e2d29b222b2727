from typing import Optional

from pydantic import BaseModel


class SignupIn(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None
    country: Optional[str] = None


class LoginIn(BaseModel):
    username: str
    password: str


class TokenOut(BaseModel):
    token: str
    isAdmin: bool


class CurrentUser(BaseModel):
    username: str
    isAdmin: bool = False

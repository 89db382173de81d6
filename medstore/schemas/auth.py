# medstore/schemas/auth.py
from pydantic import BaseModel, EmailStr

from medstore.schemas.common import CamelModel


class LoginIn(BaseModel):
    email: EmailStr
    password: str


class TokenOut(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class UserOut(CamelModel):
    id: int
    name: str
    email: str
    is_admin: bool

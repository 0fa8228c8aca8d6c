# app/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class SignupIn(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str
    confirm_password: str


class LoginIn(BaseModel):
    email: EmailStr
    password: str
    role: Optional[str] = None   # customer | driver | admin | Administrator; без роли входим под своей


class SwitchRoleIn(BaseModel):
    role: str


class PromoteIn(BaseModel):
    email: EmailStr


class SessionOut(BaseModel):
    ok: bool = True
    token: str
    role: str
    redirect: str
    user: dict
    message: Optional[str] = None

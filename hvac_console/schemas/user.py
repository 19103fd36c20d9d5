"""
Pydantic schemas for console authentication.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional


class UserRegisterRequest(BaseModel):
    """Request body for POST /register on the backend."""
    email: EmailStr
    password: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)


class UserLoginRequest(BaseModel):
    """Request body for POST /login on the backend."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class User(BaseModel):
    """Profile of the signed-in company account."""
    model_config = ConfigDict(extra="ignore")

    id: int
    email: str
    company_name: Optional[str] = None
    phone: Optional[str] = None
    industry: Optional[str] = None


class AuthResponse(BaseModel):
    """Token and profile returned by register and login."""
    token: str
    user: User

"""
Pydantic schemas for User entity.
"""
from typing import Optional
from datetime import datetime
from app.schemas.common import CamelModel


class UserResponse(CamelModel):
    """Public user representation. Never carries password material."""
    id: str
    name: str
    username: str
    created_at: datetime


class RegisterRequest(CamelModel):
    """Registration payload. Fields are optional so missing ones get a friendly 400."""
    name: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    confirm_password: Optional[str] = None


class LoginRequest(CamelModel):
    """Schema for user login."""
    username: Optional[str] = None
    password: Optional[str] = None


class ProfileUpdate(CamelModel):
    """Schema for profile update."""
    name: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class AuthResult(CamelModel):
    """User plus bearer token returned by register and login."""
    user: UserResponse
    token: str


class UserResult(CamelModel):
    user: UserResponse

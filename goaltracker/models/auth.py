"""
Authentication models and schemas for user management.
"""
from pydantic import BaseModel, EmailStr, Field, validator
from typing import Optional
from datetime import datetime
from goaltracker.config import get_settings
from goaltracker.utils.datetime_utils import as_utc


def _check_password_length(value: str) -> str:
    min_length = get_settings().PASSWORD_MIN_LENGTH
    if len(value) < min_length:
        raise ValueError(f'Password must be at least {min_length} characters long')
    return value


# Request models
class UserRegisterRequest(BaseModel):
    """Request model for user registration."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., max_length=128, description="User password")

    @validator('password')
    def validate_password(cls, v):
        return _check_password_length(v)


class UserLoginRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., description="User password")


class UserUpdateRequest(BaseModel):
    """Request model for updating the current user."""
    email: EmailStr = Field(..., description="New email address")


class PasswordResetRequest(BaseModel):
    """Request model for resetting the current user's password."""
    current_password: str = Field(..., description="Current password")
    new_password: str = Field(..., max_length=128, description="New password")

    @validator('new_password')
    def validate_new_password(cls, v):
        return _check_password_length(v)


# Response models
class TokenResponse(BaseModel):
    """Response model for an issued bearer token."""
    token: str = Field(..., description="JWT access token")


class UserResponse(BaseModel):
    """Response model for user information (never includes the password hash)."""
    id: str
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @validator('created_at', 'updated_at')
    def mark_utc(cls, v):
        return as_utc(v)

    class Config:
        from_attributes = True


class UserEnvelope(BaseModel):
    success: bool = True
    data: UserResponse


class MessageResponse(BaseModel):
    success: bool = True
    message: str


# Internal model for JWT payload
class TokenPayload(BaseModel):
    """JWT token payload structure."""
    sub: str = Field(..., description="User ID (subject)")
    email: str = Field(..., description="User email")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")

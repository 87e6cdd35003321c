"""Auth request/response schemas"""
from typing import Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    role: Literal['vendor', 'buyer', 'supplier'] = 'vendor'
    city: str = Field(..., min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    role: str
    city: str
    profile_image: Optional[str] = None
    rating: float
    review_count: int
    created_at: datetime


class TokenResponse(BaseModel):
    user: UserResponse
    token: str
    token_type: str = "bearer"


class IdentityResponse(BaseModel):
    user_id: str
    role: str

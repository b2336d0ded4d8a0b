from pydantic import BaseModel, ConfigDict, EmailStr, Field
from uuid import UUID
from datetime import datetime
from typing import Optional


class UserBase(BaseModel):
    username: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    phone_number: Optional[str] = None


class UserCreate(UserBase):
    """Payload for POST /auth/register."""
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=1, max_length=64)
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None


class UserRead(BaseModel):
    id: UUID
    username: str
    email: str
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class RegisterResponse(BaseModel):
    message: str
    user: UserRead


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"

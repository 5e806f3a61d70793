from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models.user import UserRole
from schemas.common import not_null


class UserBase(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(default=None, max_length=100)


class UserCreate(UserBase):
    password: str
    role: UserRole = UserRole.SUBSCRIBER
    is_active: bool = True


class UserUpdate(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    name: Optional[str] = Field(default=None, max_length=100)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    avatar: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=1000)
    website: Optional[str] = None

    @field_validator("email", "role", "is_active")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    avatar: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=1000)
    website: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class UserResponse(UserBase):
    id: int
    role: UserRole
    is_active: bool
    avatar: Optional[str] = None
    bio: Optional[str] = None
    website: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class SessionResponse(BaseModel):
    user: UserResponse
    expires_at: datetime


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    new_password: str


class AdminSetupRequest(BaseModel):
    email: EmailStr
    name: Optional[str] = None
    password: Optional[str] = None

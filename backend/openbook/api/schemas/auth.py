import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_username(value: str) -> str:
    value = value.strip()
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username may only contain letters, digits, '.', '_' and '-'")
    return value


def _check_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


class LoginRequest(BaseModel):
    """Request model for user login"""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator('username')
    @classmethod
    def strip_username(cls, v):
        return v.strip()


class RegisterRequest(BaseModel):
    """Request model for self-registration"""
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return _check_username(v)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)


class ProfileUpdateRequest(BaseModel):
    """Self-service profile update"""
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    avatar: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = Field(None, max_length=1000)

    @field_validator('username')
    @classmethod
    def validate_username(cls, v):
        return _check_username(v) if v is not None else v

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        return _check_email(v) if v is not None else v


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(..., min_length=1, alias="currentPassword")
    new_password: str = Field(..., min_length=6, max_length=128, alias="newPassword")

    class Config:
        populate_by_name = True


class AdminUserCreateRequest(RegisterRequest):
    """Account created by an administrator"""
    is_admin: bool = Field(False, alias="isAdmin")
    tags: List[str] = Field(default_factory=list)
    bio: str = Field("", max_length=1000)
    avatar: Optional[str] = Field(None, max_length=500)

    class Config:
        populate_by_name = True


class AdminUserUpdateRequest(ProfileUpdateRequest):
    """Account update by an administrator; omitted fields stay unchanged"""
    is_admin: Optional[bool] = Field(None, alias="isAdmin")
    tags: Optional[List[str]] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)

    class Config:
        populate_by_name = True


class UserResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    user: Dict[str, Any]


class AuthTokenResponse(UserResponse):
    """Login and registration response"""
    token: str


class UserListResponse(BaseModel):
    success: bool = True
    users: List[Dict[str, Any]]


class PermissionNamesResponse(BaseModel):
    success: bool = True
    permissions: List[str]

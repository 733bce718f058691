"""
Pydantic schemas for authentication endpoints.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    """Request schema for user signup."""
    username: str = Field(..., min_length=1, max_length=50, description="Public display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password (8 to 72 bytes)")
    profile_picture: Optional[str] = Field(default=None, description="Profile picture URL")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Username is required")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        """Validate password length in bytes (bcrypt limit is 72 bytes)."""
        password_bytes = v.encode("utf-8")
        if len(password_bytes) > 72:
            raise ValueError("Password must be 72 characters or fewer")
        if len(password_bytes) < 8:
            raise ValueError("Password must be at least 8 characters")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "username": "abebe",
                "email": "abebe@example.com",
                "password": "SecurePass123",
                "profile_picture": None
            }
        }


class SignupResponse(BaseModel):
    success: bool = True
    message: str
    user_id: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"

"""
Pydantic schemas for registration and login
"""
from pydantic import BaseModel, Field, field_validator

from quizzard.schemas.user import validate_username, normalize_email


class RegisterRequest(BaseModel):
    """Request schema for account registration"""
    username: str
    email: str
    password: str = Field(..., min_length=6, max_length=1024)

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        return validate_username(value)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return normalize_email(value)


class LoginRequest(BaseModel):
    """Request schema for login"""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.strip().lower()


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str

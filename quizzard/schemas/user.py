"""
Pydantic schemas for user profiles, stats and friends
"""
import re
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")
EMAIL_PATTERN = re.compile(r"^[\w\-.]+@([\w-]+\.)+[\w-]{2,4}$")


def validate_username(value: str) -> str:
    """Trimmed, 3-12 characters of letters, numbers and underscores"""
    value = value.strip()
    if not 3 <= len(value) <= 12:
        raise ValueError("Username must be between 3 and 12 characters.")
    if not USERNAME_PATTERN.match(value):
        raise ValueError("Username can only contain letters, numbers, and underscores.")
    return value


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email format.")
    return value


class UserProfile(BaseModel):
    """A user as returned to its owner (credential never included)"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    username: str
    email: str
    mana: int
    mage_meter: int = Field(..., alias="mageMeter")
    friends: List[UUID] = Field(default_factory=list, validation_alias="friend_ids")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")


class PublicUser(BaseModel):
    """A friend's profile as seen by another user"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    username: str
    mana: int
    mage_meter: int = Field(..., alias="mageMeter")


class UserUpdate(BaseModel):
    """Profile edits; omitted fields are left unchanged"""
    username: Optional[str] = None
    email: Optional[str] = None

    @field_validator("username")
    @classmethod
    def check_username(cls, value):
        return validate_username(value) if value is not None else value

    @field_validator("email")
    @classmethod
    def check_email(cls, value):
        return normalize_email(value) if value is not None else value


class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: str = Field(..., alias="currentPassword")
    new_password: str = Field(..., alias="newPassword", min_length=6, max_length=1024)


class UserStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mana: int
    mage_meter: int = Field(..., alias="mageMeter")


class FriendRequest(BaseModel):
    username: str = Field(..., min_length=1)


class FriendResponse(BaseModel):
    message: str
    user: UserProfile


class FriendListResponse(BaseModel):
    friends: List[PublicUser]

"""
User Domain Model

Represents a marketplace member (buyer and/or seller).

Author: Thriftly
Date: 2026-10-19
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from thriftly.domain.base import Entity, utcnow


class Rating(BaseModel):
    """Aggregate seller rating"""
    average: float = Field(0.0, ge=0, le=5, description="Average score (0-5)")
    count: int = Field(0, ge=0, description="Number of ratings received")


def normalize_email(value: str) -> str:
    email = (value or "").strip().lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValueError("Invalid email address")
    return email


def normalize_username(value):
    """Trim surrounding whitespace; "@" is reserved for email logins"""
    if not isinstance(value, str):
        return value
    username = value.strip()
    if "@" in username:
        raise ValueError("Username cannot contain '@'")
    return username


class User(Entity):
    """
    User domain model

    Fields:
        username: Public handle (unique)
        email: Login email, stored lowercased (unique)
        password_hash: Output of the PasswordHasher, never serialized outward
        first_name / last_name / bio / location / phone / avatar: Profile
        is_verified: Whether the account has been verified
        rating: Aggregate seller rating
        favorites: Liked product ids, kept in sync with Product.likes
        last_active: Refreshed on every successful login
    """

    username: str = Field(..., min_length=3, max_length=30, description="Public handle")
    email: str = Field(..., description="Login email (lowercased)")
    password_hash: str = Field(..., description="Hashed password")

    # Profile
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    avatar: Optional[str] = Field(None, description="Avatar URL")
    bio: str = Field("", max_length=500)
    location: str = Field("", max_length=100)
    phone: str = Field("", max_length=30)
    is_verified: bool = False

    rating: Rating = Field(default_factory=Rating)
    favorites: List[int] = Field(default_factory=list, description="Liked product ids")
    last_active: datetime = Field(default_factory=utcnow)

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("username", mode="before")
    @classmethod
    def _normalize_username(cls, value):
        return normalize_username(value)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def to_dict(self) -> dict:
        """Public representation - password hash removed, full_name added"""
        data = self.model_dump(mode="json", exclude={"password_hash"})
        data["full_name"] = self.full_name
        return data


class UserCreate(BaseModel):
    """Schema for registering a new user"""
    username: str = Field(..., min_length=3, max_length=30)
    email: str
    password: str = Field(..., min_length=6, max_length=128)
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("username", mode="before")
    @classmethod
    def _normalize_username(cls, value):
        return normalize_username(value)


class UserUpdate(BaseModel):
    """Schema for profile updates - only these fields are user-editable"""
    first_name: Optional[str] = Field(None, max_length=50)
    last_name: Optional[str] = Field(None, max_length=50)
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)

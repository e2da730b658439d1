"""Pydantic schemas for account endpoints."""

from typing import Optional

from pydantic import BaseModel, Field

from server.repositories.user_repository import User


class Credentials(BaseModel):
    """Username and password, as sent to /auth/login."""
    username: str
    password: str


class RegisterRequest(Credentials):
    """Credentials plus the optional profile fields known at sign-up."""
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = None


class SessionResponse(BaseModel):
    """Account summary returned with a newly issued API key."""
    user_id: str
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    api_key: str


class ProfileResponse(BaseModel):
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    university: Optional[str] = None
    address: Optional[str] = None


class ProfileUpdateRequest(BaseModel):
    """
    Partial profile update. Omitted or null fields are left unchanged;
    an empty string clears the field.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    university: Optional[str] = None
    address: Optional[str] = None


def session_to_response(user: User, api_key: str) -> SessionResponse:
    return SessionResponse(
        user_id=user.user_id,
        username=user.username,
        name=user.display_name,
        email=user.email,
        api_key=api_key,
    )


def profile_to_response(user: User) -> ProfileResponse:
    return ProfileResponse(
        username=user.username,
        name=user.display_name,
        email=user.email,
        university=user.university,
        address=user.address,
    )

"""Account API routes: registration, sign-in and profile."""

from fastapi import APIRouter, Depends, status

from server.auth import get_current_user
from server.schemas.accounts import (
    Credentials,
    ProfileResponse,
    ProfileUpdateRequest,
    RegisterRequest,
    SessionResponse,
    profile_to_response,
    session_to_response
)
from server.service_locator import get_account_service
from server.services.account_service import AccountService

router = APIRouter(prefix="/auth", tags=["Accounts"])


@router.post("/register", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    accounts: AccountService = Depends(get_account_service)
):
    """
    Create an account and sign it in.

    Parameters:
        - username: Unique username
        - password: Plain password (stored as a bcrypt hash)
        - name, email: Optional profile fields

    Returns:
        - The account summary and its first API key ('drv_' prefix)

    Raises:
        - 400: Username taken, blank username/password, or malformed email
    """
    session = accounts.register(
        request.username,
        request.password,
        display_name=request.name,
        email=request.email,
    )
    return session_to_response(session.user, session.api_key)


@router.post("/login", response_model=SessionResponse)
async def login(
    request: Credentials,
    accounts: AccountService = Depends(get_account_service)
):
    """
    Sign in and rotate the API key. The previous key stops working.

    Raises:
        - 401: Invalid credentials
    """
    session = accounts.login(request.username, request.password)
    return session_to_response(session.user, session.api_key)


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: str = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service)
):
    return profile_to_response(accounts.get_profile(current_user))


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: str = Depends(get_current_user),
    accounts: AccountService = Depends(get_account_service)
):
    """
    Update some or all profile fields and return the whole profile.

    Raises:
        - 400: Malformed email
        - 401: Invalid or missing API Key
    """
    user = accounts.update_profile(current_user, {
        "display_name": request.name,
        "email": request.email,
        "university": request.university,
        "address": request.address,
    })
    return profile_to_response(user)

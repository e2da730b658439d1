"""Account registration, sign-in and profile management."""

import sqlite3
from dataclasses import dataclass
from typing import Dict, Optional

from common.logging_config import get_logger
from server.auth import hash_password, verify_password, generate_api_key
from server.exceptions import (
    InvalidArgumentError,
    InvalidCredentialsError,
    NotFoundError,
    UserAlreadyExistsError,
)
from server.repositories.user_repository import PROFILE_FIELDS, User, UserRepository
from server.utils import generate_uuid, utcnow

logger = get_logger(__name__)


@dataclass
class Session:
    """A freshly issued API key together with the account it belongs to."""
    user: User
    api_key: str


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _check_email(email: Optional[str]) -> None:
    if email is not None and "@" not in email:
        raise InvalidArgumentError("Email address is not valid")


class AccountService:
    """
    Accounts are identified by username. Every successful register or
    login issues a new API key, replacing the previous one.
    """

    def __init__(self):
        self.user_repo = UserRepository()

    def register(
        self,
        username: str,
        password: str,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Session:
        username = username.strip()
        if not username or not password:
            raise InvalidArgumentError("Username and password are required")

        display_name = _clean(display_name)
        email = _clean(email)
        _check_email(email)

        logger.info(f"Registering account: {username}")
        if self.user_repo.get_by_username(username) is not None:
            logger.warning(f"Registration refused: username '{username}' is taken")
            raise UserAlreadyExistsError(f"Username '{username}' already exists")

        api_key = generate_api_key()
        try:
            user = self.user_repo.create_user(
                user_id=generate_uuid(),
                username=username,
                password_hash=hash_password(password),
                api_key=api_key,
                created_at=utcnow(),
                display_name=display_name,
                email=email,
            )
        except sqlite3.IntegrityError:
            logger.warning(f"Registration lost a race for username '{username}'")
            raise UserAlreadyExistsError(f"Username '{username}' already exists")

        return Session(user=user, api_key=api_key)

    def login(self, username: str, password: str) -> Session:
        logger.info(f"Sign-in attempt: {username}")
        user = self.user_repo.get_by_username(username.strip())
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(f"Sign-in refused for '{username}'")
            raise InvalidCredentialsError("Invalid username or password")

        api_key = generate_api_key()
        self.user_repo.update_api_key(user.user_id, api_key, utcnow())
        user.api_key = api_key
        logger.info(f"Signed in: {username} [user_id={user.user_id}]")

        return Session(user=user, api_key=api_key)

    def resolve_api_key(self, api_key: str) -> Optional[str]:
        """Return the id of the account holding api_key, or None."""
        user = self.user_repo.get_by_api_key(api_key)
        if user is None:
            logger.warning("Rejected an unknown API key")
            return None
        return user.user_id

    def get_profile(self, user_id: str) -> User:
        user = self.user_repo.get_by_user_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def update_profile(self, user_id: str, changes: Dict[str, Optional[str]]) -> User:
        """
        Apply a partial profile update. Fields given as None keep their
        stored value; fields given as blank strings are cleared.
        """
        user = self.get_profile(user_id)

        updates = {}
        for field in PROFILE_FIELDS:
            value = changes.get(field)
            if value is None:
                continue
            updates[field] = value.strip() or None

        _check_email(updates.get("email"))

        self.user_repo.update_profile(user_id, updates)
        for field, value in updates.items():
            setattr(user, field, value)

        return user

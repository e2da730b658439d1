"""Account repository for database operations."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from common.logging_config import get_logger
from server.database import get_db_connection, to_db_timestamp, from_db_timestamp

logger = get_logger(__name__)

PROFILE_FIELDS = ("display_name", "email", "university", "address")

USER_COLUMNS = (
    "user_id, username, password_hash, api_key, "
    "display_name, email, university, address, created_at, key_updated_at"
)


@dataclass
class User:
    user_id: str
    username: str
    password_hash: str
    api_key: Optional[str]
    created_at: datetime
    key_updated_at: Optional[datetime]
    display_name: Optional[str] = None
    email: Optional[str] = None
    university: Optional[str] = None
    address: Optional[str] = None


def _row_to_user(row) -> User:
    return User(
        user_id=row["user_id"],
        username=row["username"],
        password_hash=row["password_hash"],
        api_key=row["api_key"],
        display_name=row["display_name"],
        email=row["email"],
        university=row["university"],
        address=row["address"],
        created_at=from_db_timestamp(row["created_at"]),
        key_updated_at=from_db_timestamp(row["key_updated_at"]),
    )


class UserRepository:
    @staticmethod
    def create_user(
        user_id: str,
        username: str,
        password_hash: str,
        api_key: str,
        created_at: datetime,
        display_name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        logger.debug(f"Creating account: {username} [user_id={user_id}]")

        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"INSERT INTO users ({USER_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, NULL, NULL, ?, ?)",
                    (user_id, username, password_hash, api_key, display_name, email,
                     to_db_timestamp(created_at), to_db_timestamp(created_at))
                )
                conn.commit()
                logger.info(f"Account created: {username} [user_id={user_id}]")
            except Exception as e:
                logger.error(f"Failed to create account {username}: {e}", exc_info=True)
                raise

        return User(
            user_id=user_id,
            username=username,
            password_hash=password_hash,
            api_key=api_key,
            display_name=display_name,
            email=email,
            created_at=created_at,
            key_updated_at=created_at,
        )

    @staticmethod
    def get_by_user_id(user_id: str) -> Optional[User]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE user_id = ?", (user_id,))
            row = cursor.fetchone()

            if row is None:
                logger.debug(f"Account not found [user_id={user_id}]")
                return None

            return _row_to_user(row)

    @staticmethod
    def get_by_username(username: str) -> Optional[User]:
        logger.debug(f"Fetching account by username: {username}")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE username = ?", (username,))
            row = cursor.fetchone()

            if row is None:
                logger.debug(f"Account not found: {username}")
                return None

            return _row_to_user(row)

    @staticmethod
    def get_by_api_key(api_key: str) -> Optional[User]:
        with get_db_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE api_key = ?", (api_key,))
            row = cursor.fetchone()

            if row is None:
                logger.debug("No account holds the provided API key")
                return None

            return _row_to_user(row)

    @staticmethod
    def update_api_key(user_id: str, new_api_key: str, updated_at: datetime) -> None:
        logger.debug(f"Rotating API key [user_id={user_id}]")
        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    "UPDATE users SET api_key = ?, key_updated_at = ? WHERE user_id = ?",
                    (new_api_key, to_db_timestamp(updated_at), user_id)
                )
                conn.commit()
                logger.info(f"API key rotated [user_id={user_id}]")
            except Exception as e:
                logger.error(f"Failed to rotate API key [user_id={user_id}]: {e}", exc_info=True)
                raise

    @staticmethod
    def update_profile(user_id: str, changes: Dict[str, str]) -> None:
        """
        Overwrite the given profile columns. Keys outside PROFILE_FIELDS
        are rejected before any SQL is built.
        """
        unknown = set(changes) - set(PROFILE_FIELDS)
        if unknown:
            raise ValueError(f"Not profile fields: {sorted(unknown)}")
        if not changes:
            return

        assignments = ", ".join(f"{column} = ?" for column in changes)
        with get_db_connection() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"UPDATE users SET {assignments} WHERE user_id = ?",
                    (*changes.values(), user_id)
                )
                conn.commit()
                logger.info(f"Profile updated [user_id={user_id}] [fields={','.join(changes)}]")
            except Exception as e:
                logger.error(f"Failed to update profile [user_id={user_id}]: {e}", exc_info=True)
                raise

"""
In-memory user store.

Users live for the lifetime of the process. Emails are matched
case-insensitively.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

import structlog
from pydantic import Field

from arabic_grammar_gateway.auth.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from arabic_grammar_gateway.auth.security import hash_password, verify_password
from arabic_grammar_gateway.models.base import CamelModel

logger = structlog.get_logger(__name__)


class User(CamelModel):
    """Public view of a registered user."""

    uid: str
    email: str
    display_name: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AuthenticatedUser(CamelModel):
    """Identity carried by a verified bearer token."""

    uid: str
    email: str


class UserStore:
    def __init__(self):
        self._users: dict[str, User] = {}
        self._password_hashes: dict[str, str] = {}

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    def register(self, email: str, password: str, display_name: Optional[str] = None) -> User:
        """
        Create a user.

        Raises:
            UserAlreadyExistsError: Email already registered
        """
        key = self._key(email)
        if key in self._users:
            raise UserAlreadyExistsError("Email already registered")

        user = User(uid=str(uuid.uuid4()), email=email.strip(), display_name=display_name)
        self._users[key] = user
        self._password_hashes[key] = hash_password(password)
        logger.info("User registered", uid=user.uid)
        return user

    def authenticate(self, email: str, password: str) -> User:
        """
        Check credentials.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password
        """
        key = self._key(email)
        hashed = self._password_hashes.get(key)
        if hashed is None or not verify_password(password, hashed):
            logger.info("Authentication failed")
            raise InvalidCredentialsError("Incorrect email or password")
        return self._users[key]

    def get_by_email(self, email: str) -> Optional[User]:
        return self._users.get(self._key(email))

    def __len__(self) -> int:
        return len(self._users)

"""
Authentication: password hashing, JWT bearer tokens and an in-memory user store.
"""

from arabic_grammar_gateway.auth.exceptions import (
    AuthError,
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    UserAlreadyExistsError,
)
from arabic_grammar_gateway.auth.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from arabic_grammar_gateway.auth.users import AuthenticatedUser, User, UserStore

__all__ = [
    "AuthError",
    "AuthenticatedUser",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "TokenExpiredError",
    "User",
    "UserAlreadyExistsError",
    "UserStore",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
]

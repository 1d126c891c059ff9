"""Authentication exceptions."""


class AuthError(Exception):
    """Base exception for authentication failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTokenError(AuthError):
    """Token is malformed, has a bad signature or lacks required claims."""


class TokenExpiredError(InvalidTokenError):
    """Token signature is valid but ``exp`` has passed."""


class InvalidCredentialsError(AuthError):
    """Unknown email or wrong password."""


class UserAlreadyExistsError(AuthError):
    """Registration with an email that is already taken."""

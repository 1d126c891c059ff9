"""
Password hashing (passlib) and JWT bearer tokens (python-jose).
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from arabic_grammar_gateway.auth.exceptions import InvalidTokenError, TokenExpiredError

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

REQUIRED_CLAIMS = ("sub", "email")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _resolve_expiry(expires_minutes: int) -> datetime:
    now = datetime.now(timezone.utc)
    try:
        return now + timedelta(minutes=expires_minutes)
    except OverflowError:
        return datetime.max.replace(tzinfo=timezone.utc)


def create_access_token(
    subject: str,
    email: str,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 7 * 24 * 60,
    extra_claims: Optional[dict[str, Any]] = None,
) -> str:
    """
    Issue a signed bearer token.

    Args:
        subject: User id, stored as ``sub``
        email: User email, stored as ``email``
        secret: Signing key
        algorithm: JWS algorithm
        expires_minutes: Lifetime; ``exp`` is set from the current UTC time
        extra_claims: Additional claims merged into the payload

    Returns:
        Encoded JWT
    """
    to_encode: dict[str, Any] = dict(extra_claims or {})
    to_encode.update(
        {
            "sub": subject,
            "email": email,
            "iat": datetime.now(timezone.utc),
            "exp": _resolve_expiry(expires_minutes),
        }
    )
    return jwt.encode(to_encode, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    """
    Verify a bearer token and return its claims.

    Raises:
        TokenExpiredError: ``exp`` has passed
        InvalidTokenError: Bad signature, malformed token or missing claims
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired") from e
    except JWTError as e:
        raise InvalidTokenError(f"Invalid token: {e}") from e

    missing = [claim for claim in REQUIRED_CLAIMS if not payload.get(claim)]
    if missing:
        raise InvalidTokenError(f"Token missing claims: {', '.join(missing)}")
    return payload

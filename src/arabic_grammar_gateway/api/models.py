"""
API-specific response models for auth and service endpoints.

Domain payloads (analysis, exercises, quiz, concepts) live in
``arabic_grammar_gateway.models``.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from arabic_grammar_gateway.auth.users import AuthenticatedUser, User
from arabic_grammar_gateway.models.base import CamelModel


class RegisterResponse(CamelModel):
    message: str
    user: User


class TokenResponse(CamelModel):
    """Response for POST /auth/login."""

    message: str
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    user: User


class TokenValidationResponse(CamelModel):
    valid: bool
    user: AuthenticatedUser


class HealthResponse(CamelModel):
    """Service health with per-dependency status."""

    status: str = Field(description="healthy | unhealthy", examples=["healthy", "unhealthy"])
    version: str
    services: dict[str, str]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ServiceInfo(CamelModel):
    message: str
    version: str
    auth_mode: str
    api: list[str]
    docs: str = "/docs"
    metrics: Optional[str] = None


class PublicConfig(CamelModel):
    """Configuration safe to expose to the frontend."""

    auth_mode: str
    api_available: bool
    model: str

"""Registration, login and token validation."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status

from arabic_grammar_gateway.api.dependencies import get_settings, get_user_store, require_token_user
from arabic_grammar_gateway.api.models import (
    RegisterResponse,
    TokenResponse,
    TokenValidationResponse,
)
from arabic_grammar_gateway.auth.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from arabic_grammar_gateway.auth.security import create_access_token
from arabic_grammar_gateway.auth.users import AuthenticatedUser, UserStore
from arabic_grammar_gateway.config import Settings
from arabic_grammar_gateway.models.input_models import LoginRequest, RegisterRequest

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered"}},
)
async def register(
    request: RegisterRequest,
    store: UserStore = Depends(get_user_store),
) -> RegisterResponse:
    try:
        user = store.register(request.email, request.password, request.display_name)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return RegisterResponse(message="تم تسجيل المستخدم بنجاح.", user=user)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={401: {"description": "Incorrect email or password"}},
)
async def login(
    request: LoginRequest,
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_settings),
) -> TokenResponse:
    """Exchange credentials for a bearer token."""
    try:
        user = store.authenticate(request.email, request.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="البريد الإلكتروني أو كلمة المرور غير صحيحة",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    token = create_access_token(
        subject=user.uid,
        email=user.email,
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        expires_minutes=settings.JWT_EXPIRES_MINUTES,
    )
    logger.info("User logged in", uid=user.uid)
    return TokenResponse(
        message="تم تسجيل الدخول بنجاح",
        token=token,
        expires_in=settings.JWT_EXPIRES_MINUTES * 60,
        user=user,
    )


@router.get(
    "/validate-token",
    response_model=TokenValidationResponse,
    responses={401: {"description": "Missing, invalid or expired token"}},
)
async def validate_token(
    user: AuthenticatedUser = Depends(require_token_user),
) -> TokenValidationResponse:
    return TokenValidationResponse(valid=True, user=user)

"""
FastAPI dependency injection.

Long-lived resources (settings, generation client, prompt builder, user
store) are created by the application factory and kept on ``app.state``;
dependencies read them from there. Pipelines and services are cheap and
built per request around the shared client.
"""

from typing import Optional

import structlog
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from arabic_grammar_gateway.auth.exceptions import InvalidTokenError, TokenExpiredError
from arabic_grammar_gateway.auth.security import decode_access_token
from arabic_grammar_gateway.auth.users import AuthenticatedUser, UserStore
from arabic_grammar_gateway.config import Settings
from arabic_grammar_gateway.llm.base_client import BaseLLMClient
from arabic_grammar_gateway.llm.prompt_builder import PromptBuilder
from arabic_grammar_gateway.services import (
    AnalysisService,
    ConceptService,
    ExerciseService,
    QuizService,
)
from arabic_grammar_gateway.validation.pipeline import GenerationPipeline

logger = structlog.get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_llm_client(request: Request) -> BaseLLMClient:
    """Shared generation client owned by the application lifespan."""
    return request.app.state.llm_client


def get_prompt_builder(request: Request) -> PromptBuilder:
    return request.app.state.prompt_builder


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def get_pipeline(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
) -> GenerationPipeline:
    """
    Create the generation pipeline around the shared client.

    Not cached: the pipeline is stateless apart from its collaborators.
    """
    return GenerationPipeline(llm_client, retry_config=settings.retry_config())


def get_analysis_service(
    pipeline: GenerationPipeline = Depends(get_pipeline),
    prompts: PromptBuilder = Depends(get_prompt_builder),
) -> AnalysisService:
    return AnalysisService(pipeline, prompts)


def get_exercise_service(
    pipeline: GenerationPipeline = Depends(get_pipeline),
    prompts: PromptBuilder = Depends(get_prompt_builder),
) -> ExerciseService:
    return ExerciseService(pipeline, prompts)


def get_quiz_service(
    pipeline: GenerationPipeline = Depends(get_pipeline),
    prompts: PromptBuilder = Depends(get_prompt_builder),
) -> QuizService:
    return QuizService(pipeline, prompts)


def get_concept_service(
    pipeline: GenerationPipeline = Depends(get_pipeline),
    prompts: PromptBuilder = Depends(get_prompt_builder),
) -> ConceptService:
    return ConceptService(pipeline, prompts)


def _decode(credentials: HTTPAuthorizationCredentials, settings: Settings) -> AuthenticatedUser:
    payload = decode_access_token(
        credentials.credentials, settings.JWT_SECRET, settings.JWT_ALGORITHM
    )
    return AuthenticatedUser(uid=payload["sub"], email=payload["email"])


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[AuthenticatedUser]:
    """
    Resolve the bearer token according to ``AUTH_MODE``.

    strict: missing token -> 401, invalid or expired token -> 403.
    optional: both cases proceed anonymously (returns None).
    """
    strict = settings.AUTH_MODE.lower() != "optional"

    if credentials is None:
        if strict:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized: No token provided.",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return None

    try:
        return _decode(credentials, settings)
    except TokenExpiredError:
        logger.info("Expired token presented", strict=strict)
        if strict:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: Token has expired.",
            )
        return None
    except InvalidTokenError as e:
        logger.info("Invalid token presented", strict=strict, reason=e.message)
        if strict:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: Invalid or unverifiable token.",
            )
        return None


def require_token_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> AuthenticatedUser:
    """Strict token check regardless of ``AUTH_MODE``; 401 on any failure."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return _decode(credentials, settings)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

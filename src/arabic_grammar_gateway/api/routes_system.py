"""Service info, health and public configuration."""

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from arabic_grammar_gateway.api.dependencies import get_llm_client, get_settings
from arabic_grammar_gateway.api.models import HealthResponse, PublicConfig, ServiceInfo
from arabic_grammar_gateway.config import Settings
from arabic_grammar_gateway.llm.base_client import BaseLLMClient

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["system"])

API_GROUPS = [
    "/api/analysis",
    "/api/exercises",
    "/api/quiz",
    "/api/grammar",
    "/auth",
]


@router.get("/", response_model=ServiceInfo)
async def root(settings: Settings = Depends(get_settings)) -> ServiceInfo:
    return ServiceInfo(
        message=f"{settings.APP_NAME} is running",
        version=settings.APP_VERSION,
        auth_mode=settings.AUTH_MODE,
        api=API_GROUPS,
        metrics="/metrics" if settings.PROMETHEUS_ENABLED else None,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={
        200: {"description": "Generation service reachable"},
        503: {"description": "Generation service unreachable"},
    },
)
async def health_check(
    llm_client: BaseLLMClient = Depends(get_llm_client),
    settings: Settings = Depends(get_settings),
):
    """
    Check the generation service.

    Returns 503 when the provider cannot be reached or rejects the key.
    """
    healthy = await llm_client.health_check()
    services = {"gemini": "ok" if healthy else "unreachable"}

    response = HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=settings.APP_VERSION,
        services=services,
    )
    logger.info("Health check", status=response.status, services=services)

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json", by_alias=True),
    )


@router.get("/api/config", response_model=PublicConfig)
async def public_config(settings: Settings = Depends(get_settings)) -> PublicConfig:
    return PublicConfig(
        auth_mode=settings.AUTH_MODE,
        api_available=bool(settings.GEMINI_API_KEY),
        model=settings.GEMINI_MODEL,
    )

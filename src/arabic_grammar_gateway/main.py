"""
FastAPI application entry point for the Arabic Grammar Gateway.
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from arabic_grammar_gateway.api.error_handlers import EXCEPTION_HANDLERS
from arabic_grammar_gateway.api.middleware import RequestTracingMiddleware
from arabic_grammar_gateway.api.routes_analysis import router as analysis_router
from arabic_grammar_gateway.api.routes_auth import router as auth_router
from arabic_grammar_gateway.api.routes_exercises import router as exercises_router
from arabic_grammar_gateway.api.routes_grammar import router as grammar_router
from arabic_grammar_gateway.api.routes_quiz import router as quiz_router
from arabic_grammar_gateway.api.routes_system import router as system_router
from arabic_grammar_gateway.auth.users import UserStore
from arabic_grammar_gateway.config import Settings, settings
from arabic_grammar_gateway.llm.base_client import BaseLLMClient
from arabic_grammar_gateway.llm.gemini_client import GeminiClient
from arabic_grammar_gateway.llm.prompt_builder import PromptBuilder
from arabic_grammar_gateway.logging_config import configure_logging

logger = structlog.get_logger(__name__)


def build_llm_client(app_settings: Settings) -> GeminiClient:
    return GeminiClient(
        api_key=app_settings.GEMINI_API_KEY,
        model=app_settings.GEMINI_MODEL,
        base_url=app_settings.GEMINI_BASE_URL,
        timeout=app_settings.GEMINI_TIMEOUT,
        temperature=app_settings.LLM_TEMPERATURE,
        max_output_tokens=app_settings.LLM_MAX_OUTPUT_TOKENS,
    )


def create_app(
    app_settings: Optional[Settings] = None,
    llm_client: Optional[BaseLLMClient] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        app_settings: Settings to use; the environment-loaded ones by default
        llm_client: Generation client to share across requests. When omitted
            a GeminiClient is created on startup and closed on shutdown.
    """
    app_settings = app_settings or settings
    configure_logging(
        app_settings.LOG_LEVEL,
        app_settings.ENVIRONMENT,
        log_format=app_settings.LOG_FORMAT,
        version=app_settings.APP_VERSION,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_client = llm_client is None
        if owns_client:
            app.state.llm_client = build_llm_client(app_settings)

        logger.info(
            "Application startup",
            version=app_settings.APP_VERSION,
            environment=app_settings.ENVIRONMENT,
            auth_mode=app_settings.AUTH_MODE,
            model=app.state.llm_client.model,
            api_key_configured=bool(app_settings.GEMINI_API_KEY),
        )
        if app_settings.AUTH_MODE.lower() == "optional":
            logger.warning("AUTH_MODE=optional: API routes accept anonymous requests")

        try:
            yield
        finally:
            if owns_client:
                await app.state.llm_client.close()
            logger.info("Application shutdown complete")

    app = FastAPI(
        title=app_settings.APP_NAME,
        description="Arabic grammar analysis, exercises and quizzes backed by validated AI output",
        version=app_settings.APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.prompt_builder = PromptBuilder(app_settings.PROMPT_TEMPLATES_DIR)
    app.state.user_store = UserStore()
    if llm_client is not None:
        app.state.llm_client = llm_client

    app.add_middleware(RequestTracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for exc_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_class, handler)

    app.include_router(system_router)
    app.include_router(auth_router)
    app.include_router(analysis_router)
    app.include_router(exercises_router)
    app.include_router(quiz_router)
    app.include_router(grammar_router)

    if app_settings.PROMETHEUS_ENABLED:
        Instrumentator().instrument(app).expose(app)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "arabic_grammar_gateway.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )

"""
Configuration settings for the Arabic Grammar Gateway.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from arabic_grammar_gateway.retry.policy import RetryConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Application ===
    APP_NAME: str = "Arabic Grammar Gateway"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"  # development | production
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = ""  # json | console; empty follows ENVIRONMENT

    # === Gemini Configuration ===
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.0-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TIMEOUT: float = 60.0  # seconds

    # === LLM Generation Parameters ===
    LLM_TEMPERATURE: float = 0.4
    LLM_MAX_OUTPUT_TOKENS: int = 8192

    # === Retry ===
    MAX_RETRIES: int = 3
    RETRY_INITIAL_DELAY: float = 1.0  # seconds
    RETRY_MAX_DELAY: float = 10.0  # seconds
    RETRY_BACKOFF_FACTOR: float = 2.0

    # === Authentication ===
    AUTH_MODE: str = "strict"  # strict | optional
    JWT_SECRET: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_MINUTES: int = 7 * 24 * 60  # 7 days

    # === HTTP ===
    CORS_ORIGINS: list[str] = ["*"]

    # === Prompts ===
    PROMPT_TEMPLATES_DIR: str | None = None  # None -> bundled templates

    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True

    def retry_config(self) -> RetryConfig:
        """Build the backoff configuration used for every generation call."""
        return RetryConfig(
            max_retries=self.MAX_RETRIES,
            initial_delay=self.RETRY_INITIAL_DELAY,
            max_delay=self.RETRY_MAX_DELAY,
            backoff_factor=self.RETRY_BACKOFF_FACTOR,
        )


# Global settings instance
settings = Settings()

"""
Shared configuration for the tutor services.
"""

import logging
import os
from typing import Optional
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Load environment variables from the project .env, regardless of CWD
try:
    from dotenv import load_dotenv, find_dotenv

    base_dir = Path(__file__).resolve().parents[1]
    dotenv_path = base_dir / ".env"
    example_path = base_dir / "env.example"

    loaded = False
    if dotenv_path.exists():
        load_dotenv(dotenv_path, override=True)
        logger.info("Loaded environment variables from %s", dotenv_path)
        loaded = True
    else:
        discovered = find_dotenv(usecwd=True)
        if discovered:
            load_dotenv(discovered, override=True)
            logger.info("Loaded environment variables from %s", discovered)
            loaded = True

    # Sample values never override real env values
    if not loaded and example_path.exists():
        load_dotenv(example_path, override=False)
        logger.info("Loaded environment variables from sample %s", example_path)
except ImportError:
    logger.warning("python-dotenv not installed, using system environment variables only")


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # API Keys
    anthropic_api_key: Optional[str] = Field(default=None, alias='ANTHROPIC_API_KEY')
    openai_api_key: Optional[str] = Field(default=None, alias='OPENAI_API_KEY')
    mathpix_app_id: Optional[str] = Field(default=None, alias='MATHPIX_APP_ID')
    mathpix_app_key: Optional[str] = Field(default=None, alias='MATHPIX_APP_KEY')

    # Models
    anthropic_model: str = Field(default="claude-sonnet-4-5-20250929", alias='ANTHROPIC_MODEL')
    openai_model: str = Field(default="gpt-4o-mini", alias='OPENAI_MODEL')
    vision_model: str = Field(default="claude-sonnet-4-20250514", alias='VISION_MODEL')

    # Service Configuration
    service_name: str = Field(default="precalc-tutor", alias='SERVICE_NAME')
    service_port: int = Field(default=8000, alias='SERVICE_PORT')
    debug: bool = Field(default=False, alias='DEBUG')
    environment: str = Field(default="development", alias='ENVIRONMENT')
    app_version: str = Field(default="1.0.0", alias='APP_VERSION')

    # Logging
    log_level: str = Field(default="INFO", alias='LOG_LEVEL')

    # Rate limiting (requests per window)
    ai_tutor_rate_limit: int = Field(default=10, gt=0, alias='AI_TUTOR_RATE_LIMIT')
    ocr_rate_limit: int = Field(default=5, gt=0, alias='OCR_RATE_LIMIT')
    sessions_rate_limit: int = Field(default=30, gt=0, alias='SESSIONS_RATE_LIMIT')
    rate_limit_window_seconds: int = Field(default=60, gt=0, alias='RATE_LIMIT_WINDOW_SECONDS')

    # Feature flags
    enable_analytics: bool = Field(default=False, alias='ENABLE_ANALYTICS')
    enable_ocr: bool = Field(default=True, alias='ENABLE_OCR')

    # Error tracking
    sentry_dsn: Optional[str] = Field(default=None, alias='SENTRY_DSN')
    sentry_environment: str = Field(default="development", alias='SENTRY_ENVIRONMENT')

    class Config:
        env_file = ".env"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    def __init__(self, **data):
        super().__init__(**data)
        if os.getenv('TUTOR_SERVICE_PORT'):
            self.service_port = int(os.getenv('TUTOR_SERVICE_PORT'))

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def has_mathpix(self) -> bool:
        return bool(self.mathpix_app_id and self.mathpix_app_key)


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the current settings instance."""
    return settings


def require_env(key: str) -> str:
    """Return an environment variable or fail the request with a 500."""
    from .errors import InternalServerError

    value = os.getenv(key)
    if not value:
        raise InternalServerError(f"Missing required environment variable: {key}")
    return value


def debug_settings():
    """Log the current settings without leaking secrets."""
    current = get_settings()
    logger.info("Current Settings:")
    logger.info("  Anthropic API Key: %s", "set" if current.anthropic_api_key else "not set")
    logger.info("  OpenAI API Key: %s", "set" if current.openai_api_key else "not set")
    logger.info("  Mathpix: %s", "configured" if current.has_mathpix else "not configured")
    logger.info("  Service Name: %s", current.service_name)
    logger.info("  Service Port: %s", current.service_port)
    logger.info("  Environment: %s", current.environment)
    logger.info("  Debug Mode: %s", current.debug)
    logger.info("  Log Level: %s", current.log_level)

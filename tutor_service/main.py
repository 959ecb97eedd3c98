"""
PreCalc Tutor API - Main FastAPI application.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from shared.analytics import init_analytics
from shared.config import get_settings
from shared.error_tracking import init_error_tracking
from shared.errors import install_error_handlers

from .routers import ROUTER_MODULES

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "1; mode=block",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    logger.info("PreCalc Tutor API starting up (environment: %s)", settings.environment)
    init_error_tracking()
    init_analytics()
    if not settings.anthropic_api_key:
        logger.warning("ANTHROPIC_API_KEY is not set; tutor and vision OCR requests will fail")

    yield

    logger.info("PreCalc Tutor API shutting down...")


app = FastAPI(
    title="PreCalc Tutor API",
    description="AI tutoring, math OCR, reference lookups and accessibility settings for AP Precalculus",
    version=settings.app_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


install_error_handlers(app, is_development=settings.debug)

for module in ROUTER_MODULES:
    app.include_router(module.get_router())


if __name__ == "__main__":
    uvicorn.run(
        "tutor_service.main:app",
        host="0.0.0.0",
        port=settings.service_port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )

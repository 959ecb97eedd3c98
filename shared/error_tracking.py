"""
Error tracking hooks. Reports go to the log; no vendor SDK is configured.
"""

import logging
from typing import Any, Dict, Optional

from .config import get_settings

logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}


def init_error_tracking() -> None:
    settings = get_settings()
    if settings.sentry_dsn:
        logger.info("[ErrorTracking] SENTRY_DSN is set but no vendor SDK is installed; logging only")
    else:
        logger.info("[ErrorTracking] Error tracking disabled (environment: %s)", settings.sentry_environment)


def capture_exception(error: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
    logger.error("[ErrorTracking] %s: %s context=%s", type(error).__name__, error, context or {}, exc_info=error)


def capture_message(message: str, level: str = "info") -> None:
    logger.log(_LEVELS.get(level, logging.INFO), "[ErrorTracking] %s", message)

"""API routers. Each module exposes `get_router()`."""

from . import health, latex, ocr, reference, sessions, settings, tutor

ROUTER_MODULES = (health, tutor, ocr, sessions, reference, latex, settings)

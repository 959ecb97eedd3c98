import platform
import threading
import time

import psutil
from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from shared.config import get_settings
from shared.errors import utc_timestamp

NO_STORE = {"Cache-Control": "no-store, must-revalidate"}


def _uptime_seconds() -> float:
    return time.time() - psutil.Process().create_time()


def get_router() -> APIRouter:
    router = APIRouter(prefix="/api", tags=["health"])

    @router.get("/health")
    async def health():
        started = time.perf_counter()
        settings = get_settings()

        checks = {
            "status": "healthy",
            "timestamp": utc_timestamp(),
            "uptime": _uptime_seconds(),
            "environment": settings.environment,
            "version": settings.app_version,
        }
        env_checks = {"anthropicApiKey": bool(settings.anthropic_api_key)}
        response_time = int((time.perf_counter() - started) * 1000)

        if not all(env_checks.values()):
            return JSONResponse(
                status_code=503,
                content={
                    "status": "degraded",
                    "message": "Some environment variables are missing",
                    "checks": checks,
                    "envChecks": env_checks,
                    "responseTime": response_time,
                },
            )

        return JSONResponse(
            content={
                "status": "healthy",
                "checks": checks,
                "envChecks": env_checks,
                "responseTime": response_time,
            },
            headers=NO_STORE,
        )

    @router.head("/health")
    async def health_head():
        return Response(status_code=200, headers=NO_STORE)

    @router.get("/metrics")
    async def metrics():
        process = psutil.Process()
        memory = process.memory_info()
        cpu = process.cpu_times()
        return JSONResponse(
            content={
                "app_uptime_seconds": _uptime_seconds(),
                "app_memory_usage_bytes": memory.rss,
                "app_memory_virtual_bytes": memory.vms,
                "app_cpu_user_seconds": cpu.user,
                "app_cpu_system_seconds": cpu.system,
                "python_version": platform.python_version(),
                "python_active_threads": threading.active_count(),
                "environment": get_settings().environment,
                "timestamp": int(time.time() * 1000),
            },
            headers=NO_STORE,
        )

    return router

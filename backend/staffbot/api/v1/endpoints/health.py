from __future__ import annotations

from fastapi import APIRouter

from staffbot.core.config import settings
from staffbot.services.conversation_service import conversation_service
from staffbot.services.employee_service import employee_service

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {}

    try:
        if employee_service.cosmos is not None:
            ok = await employee_service.check_connection()
            services["cosmos_db"] = "ok" if ok else "error"
        else:
            services["cosmos_db"] = "not_configured"
    except Exception:
        services["cosmos_db"] = "error"

    services["azure_openai"] = "ok" if conversation_service.initialized else "not_configured"

    all_ok = all(v in ("ok", "not_configured") for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": employee_service.initialized}

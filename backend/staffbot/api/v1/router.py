from fastapi import APIRouter

from staffbot.api.v1.endpoints import employees, health, messages

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health.router)
api_router.include_router(messages.router)
api_router.include_router(employees.router)

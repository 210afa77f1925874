from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from staffbot.api.v1.router import api_router
from staffbot.core.config import settings
from staffbot.core.logging_config import configure_logging
from staffbot.services.conversation_service import conversation_service
from staffbot.services.employee_service import employee_service
from staffbot.services.message_pipeline import message_pipeline
from staffbot.services.rate_limiter import rate_limiter
from staffbot.services.session_service import CosmosSessionBackend, session_service

logger = logging.getLogger(__name__)

configure_logging(settings)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    try:
        await employee_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize EmployeeService — continuing without directory")

    session_backend = CosmosSessionBackend()
    try:
        await session_backend.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize session storage — continuing in memory")
    session_service.configure(settings, session_backend if session_backend.initialized else None)

    try:
        await conversation_service.initialize(settings)
    except Exception:
        logger.exception("Failed to initialize ConversationService — continuing without fallback")

    rate_limiter.configure(settings)
    message_pipeline.configure(settings)

    tasks = [
        asyncio.create_task(session_service.run_cleanup_loop(settings.SESSION_CLEANUP_INTERVAL_MS)),
        asyncio.create_task(rate_limiter.run_cleanup_loop(settings.RATE_LIMIT_CLEANUP_INTERVAL_MS)),
    ]
    yield
    for task in tasks:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    await employee_service.close()
    await session_backend.close()
    await conversation_service.close()


app = FastAPI(
    title="Staff Directory Bot API",
    description="Employee directory lookups with a conversational fallback",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)


@app.get("/")
async def root():
    return {"message": "Staff Directory Bot API"}

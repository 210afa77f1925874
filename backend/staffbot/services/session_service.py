"""Per-session conversation history with pluggable persistence.

Backends (in-memory, Cosmos DB) may raise; :class:`SessionService` never
does — failed loads read as an empty history and failed writes are logged.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from azure.core.exceptions import ResourceNotFoundError
from azure.cosmos.aio import CosmosClient

from staffbot.core.config import Settings
from staffbot.core.keyed_store import KeyedStore
from staffbot.models.session import ChatMessage, ConversationSession, utcnow

logger = logging.getLogger(__name__)


def trim_history(history: list[ChatMessage], max_history_messages: int) -> list[ChatMessage]:
    """Keep the most recent ``2 * max_history_messages`` entries, oldest dropped first."""
    limit = max_history_messages * 2
    if len(history) > limit:
        return history[-limit:]
    return list(history)


class SessionBackend(Protocol):
    async def load(self, session_id: str) -> ConversationSession | None: ...

    async def store(self, session: ConversationSession) -> None: ...

    async def remove(self, session_id: str) -> None: ...

    async def remove_older_than(self, cutoff: datetime) -> int: ...


class InMemorySessionBackend:
    def __init__(self) -> None:
        self.sessions: KeyedStore[ConversationSession] = KeyedStore()

    async def load(self, session_id: str) -> ConversationSession | None:
        session = self.sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def store(self, session: ConversationSession) -> None:
        async with self.sessions.locked(session.session_id):
            self.sessions.set(session.session_id, session.model_copy(deep=True))

    async def remove(self, session_id: str) -> None:
        async with self.sessions.locked(session_id):
            self.sessions.delete(session_id)

    async def remove_older_than(self, cutoff: datetime) -> int:
        return await self.sessions.sweep(lambda _, session: session.updated_at < cutoff)


class CosmosSessionBackend:
    """Sessions container; one document per session id, upserted whole."""

    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.container: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.cosmos_configured:
            logger.warning("Cosmos DB credentials missing — CosmosSessionBackend not initialized")
            return

        self.client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
        db = self.client.get_database_client(settings.COSMOS_DB_DATABASE)
        self.container = db.get_container_client(settings.COSMOS_DB_SESSIONS_CONTAINER)
        self.initialized = True
        logger.info("CosmosSessionBackend initialized (container=%s)", settings.COSMOS_DB_SESSIONS_CONTAINER)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.container = None
            self.initialized = False

    async def load(self, session_id: str) -> ConversationSession | None:
        try:
            item = await self.container.read_item(item=session_id, partition_key=session_id)
        except ResourceNotFoundError:
            return None
        return ConversationSession(
            session_id=item["id"],
            history=item.get("history", []),
            updated_at=item.get("updatedAt") or utcnow(),
        )

    async def store(self, session: ConversationSession) -> None:
        await self.container.upsert_item(
            body={
                "id": session.session_id,
                "history": [m.model_dump() for m in session.history],
                "updatedAt": session.updated_at.isoformat(),
            }
        )

    async def remove(self, session_id: str) -> None:
        try:
            await self.container.delete_item(item=session_id, partition_key=session_id)
        except ResourceNotFoundError:
            pass

    async def remove_older_than(self, cutoff: datetime) -> int:
        removed = 0
        async for item in self.container.query_items(
            query="SELECT c.id FROM c WHERE c.updatedAt < @cutoff",
            parameters=[{"name": "@cutoff", "value": cutoff.isoformat()}],
            enable_cross_partition_query=True,
        ):
            await self.remove(item["id"])
            removed += 1
        return removed


class SessionService:
    def __init__(self, backend: SessionBackend | None = None) -> None:
        self.backend: SessionBackend = backend or InMemorySessionBackend()
        self.max_history_messages = 10
        self.max_age_ms = 7 * 24 * 60 * 60 * 1000

    def configure(self, settings: Settings, backend: SessionBackend | None = None) -> None:
        if backend is not None:
            self.backend = backend
        self.max_history_messages = settings.MAX_HISTORY_MESSAGES
        self.max_age_ms = settings.SESSION_MAX_AGE_MS

    async def get(self, session_id: str) -> list[ChatMessage]:
        try:
            session = await self.backend.load(session_id)
        except Exception:
            logger.exception("Error getting session %s", session_id)
            return []
        return session.history if session else []

    async def save(self, session_id: str, history: list[ChatMessage]) -> None:
        session = ConversationSession(session_id=session_id, history=history, updated_at=utcnow())
        try:
            await self.backend.store(session)
        except Exception:
            logger.exception("Error saving session %s", session_id)

    async def clear(self, session_id: str) -> None:
        try:
            await self.backend.remove(session_id)
        except Exception:
            logger.exception("Error deleting session %s", session_id)

    def trim(self, history: list[ChatMessage]) -> list[ChatMessage]:
        return trim_history(history, self.max_history_messages)

    async def cleanup_old_sessions(self, older_than_ms: int | None = None, now: datetime | None = None) -> int:
        age = older_than_ms if older_than_ms is not None else self.max_age_ms
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(milliseconds=age)
        try:
            removed = await self.backend.remove_older_than(cutoff)
        except Exception:
            logger.exception("Error cleaning up old sessions")
            return 0
        if removed:
            logger.info("Removed %d stale sessions", removed)
        return removed

    async def run_cleanup_loop(self, interval_ms: int) -> None:
        """Sweep once immediately, then every ``interval_ms`` until cancelled."""
        while True:
            await self.cleanup_old_sessions()
            await asyncio.sleep(interval_ms / 1000)


session_service = SessionService()

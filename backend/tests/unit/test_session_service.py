from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from azure.core.exceptions import ResourceNotFoundError

from staffbot.core.config import Settings
from staffbot.models.session import ChatMessage, ConversationSession
from staffbot.services.session_service import (
    CosmosSessionBackend,
    InMemorySessionBackend,
    SessionService,
    trim_history,
)


def _history(count: int) -> list[ChatMessage]:
    return [ChatMessage(role="user" if i % 2 == 0 else "assistant", content=f"m{i}") for i in range(count)]


class TestTrimHistory:
    def test_keeps_last_twenty(self):
        trimmed = trim_history(_history(25), 10)
        assert len(trimmed) == 20
        assert trimmed[0].content == "m5"
        assert trimmed[-1].content == "m24"

    def test_short_history_unchanged(self):
        history = _history(3)
        assert trim_history(history, 10) == history

    def test_returns_a_copy(self):
        history = _history(3)
        assert trim_history(history, 10) is not history


class TestSessionService:
    @pytest.mark.anyio
    async def test_unknown_session_is_empty(self):
        assert await SessionService().get("42") == []

    @pytest.mark.anyio
    async def test_save_and_get(self):
        service = SessionService()
        await service.save("42", _history(2))
        history = await service.get("42")
        assert [m.content for m in history] == ["m0", "m1"]

    @pytest.mark.anyio
    async def test_loaded_history_is_isolated(self):
        service = SessionService()
        await service.save("42", _history(2))
        history = await service.get("42")
        history.append(ChatMessage(role="user", content="extra"))
        assert len(await service.get("42")) == 2

    @pytest.mark.anyio
    async def test_clear(self):
        service = SessionService()
        await service.save("42", _history(2))
        await service.clear("42")
        assert await service.get("42") == []

    @pytest.mark.anyio
    async def test_clear_unknown_session_is_noop(self):
        await SessionService().clear("missing")

    @pytest.mark.anyio
    async def test_backend_failures_do_not_propagate(self):
        backend = AsyncMock()
        backend.load.side_effect = RuntimeError("down")
        backend.store.side_effect = RuntimeError("down")
        backend.remove.side_effect = RuntimeError("down")
        backend.remove_older_than.side_effect = RuntimeError("down")
        service = SessionService(backend)

        assert await service.get("1") == []
        await service.save("1", _history(1))
        await service.clear("1")
        assert await service.cleanup_old_sessions() == 0

    def test_configure_applies_settings(self):
        service = SessionService()
        backend = InMemorySessionBackend()
        service.configure(Settings(MAX_HISTORY_MESSAGES=3, SESSION_MAX_AGE_MS=1000), backend)
        assert service.backend is backend
        assert service.max_history_messages == 3
        assert service.max_age_ms == 1000
        assert len(service.trim(_history(10))) == 6


class TestCleanup:
    @pytest.mark.anyio
    async def test_removes_only_stale_sessions(self):
        backend = InMemorySessionBackend()
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        await backend.store(ConversationSession(session_id="old", updated_at=now - timedelta(days=8)))
        await backend.store(ConversationSession(session_id="fresh", updated_at=now - timedelta(days=1)))
        service = SessionService(backend)

        removed = await service.cleanup_old_sessions(older_than_ms=7 * 24 * 60 * 60 * 1000, now=now)

        assert removed == 1
        assert await backend.load("old") is None
        assert await backend.load("fresh") is not None

    @pytest.mark.anyio
    async def test_clearing_unknown_sessions_leaves_no_locks(self):
        backend = InMemorySessionBackend()
        service = SessionService(backend)
        for i in range(1000):
            await service.clear(f"nobody-{i}")

        assert await service.cleanup_old_sessions(older_than_ms=0) == 0
        assert len(backend.sessions._locks) == 0

    @pytest.mark.anyio
    async def test_nothing_to_remove(self):
        assert await SessionService().cleanup_old_sessions() == 0


class TestCosmosSessionBackend:
    def _backend(self) -> CosmosSessionBackend:
        backend = CosmosSessionBackend()
        backend.container = MagicMock()
        backend.container.read_item = AsyncMock()
        backend.container.upsert_item = AsyncMock()
        backend.container.delete_item = AsyncMock()
        backend.initialized = True
        return backend

    @pytest.mark.anyio
    async def test_load_missing_session(self):
        backend = self._backend()
        backend.container.read_item.side_effect = ResourceNotFoundError("missing")
        assert await backend.load("42") is None

    @pytest.mark.anyio
    async def test_load_document(self):
        backend = self._backend()
        backend.container.read_item.return_value = {
            "id": "42",
            "history": [{"role": "user", "content": "привет"}],
            "updatedAt": "2024-06-01T00:00:00+00:00",
        }
        session = await backend.load("42")
        assert session.session_id == "42"
        assert session.history == [ChatMessage(role="user", content="привет")]
        assert session.updated_at == datetime(2024, 6, 1, tzinfo=timezone.utc)

    @pytest.mark.anyio
    async def test_store_upserts_document(self):
        backend = self._backend()
        updated = datetime(2024, 6, 1, tzinfo=timezone.utc)
        await backend.store(ConversationSession(session_id="42", history=_history(1), updated_at=updated))

        body = backend.container.upsert_item.call_args.kwargs["body"]
        assert body == {
            "id": "42",
            "history": [{"role": "user", "content": "m0"}],
            "updatedAt": updated.isoformat(),
        }

    @pytest.mark.anyio
    async def test_remove_missing_session_is_noop(self):
        backend = self._backend()
        backend.container.delete_item.side_effect = ResourceNotFoundError("missing")
        await backend.remove("42")

    @pytest.mark.anyio
    async def test_initialize_without_credentials(self):
        backend = CosmosSessionBackend()
        await backend.initialize(Settings(COSMOS_DB_ENDPOINT="", COSMOS_DB_KEY=""))
        assert backend.initialized is False

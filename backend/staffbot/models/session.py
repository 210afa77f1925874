"""Conversation history kept per chat session."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "assistant", "system"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ChatMessage(BaseModel):
    role: Role
    content: str


class ConversationSession(BaseModel):
    session_id: str
    history: list[ChatMessage] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=utcnow)

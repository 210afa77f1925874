"""Transport-level models for incoming chat messages and bot replies."""

from __future__ import annotations

from pydantic import BaseModel, Field

from staffbot.core.errors import ErrorKind


class IncomingMessage(BaseModel):
    user_id: int | None = None
    chat_id: int | None = None
    text: str = Field(..., min_length=1, max_length=4096)

    @property
    def session_id(self) -> str:
        if self.user_id is not None:
            return str(self.user_id)
        if self.chat_id is not None:
            return str(self.chat_id)
        return "global"

    @property
    def rate_limit_key(self) -> str:
        identity = self.user_id if self.user_id is not None else self.chat_id
        return f"rate_limit:{identity if identity is not None else 'anonymous'}"


class BotReply(BaseModel):
    text: str
    handled: bool = False
    error: ErrorKind | None = None
    retry_after: int | None = None

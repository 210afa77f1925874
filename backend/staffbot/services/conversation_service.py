from __future__ import annotations

import asyncio
import logging

from openai import AsyncAzureOpenAI, OpenAIError

from staffbot.core.config import DEFAULT_SYSTEM_PROMPT, Settings
from staffbot.core.errors import BotError
from staffbot.models.session import ChatMessage

logger = logging.getLogger(__name__)

SERVICE_NAME = "OpenAI"


class ConversationService:
    """Conversational fallback for messages the directory did not answer."""

    def __init__(self) -> None:
        self.client: AsyncAzureOpenAI | None = None
        self.initialized = False
        self.model = ""
        self.system_prompt = DEFAULT_SYSTEM_PROMPT
        self.max_tokens = 800
        self.temperature = 0.2
        self.timeout = 30.0

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.OPENAI_ENDPOINT or not settings.OPENAI_API_KEY:
            logger.warning("OpenAI credentials missing — ConversationService not initialized")
            return

        self.client = AsyncAzureOpenAI(
            azure_endpoint=settings.OPENAI_ENDPOINT,
            api_key=settings.OPENAI_API_KEY,
            api_version=settings.OPENAI_API_VERSION,
        )
        self.model = settings.OPENAI_CHAT_MODEL
        self.system_prompt = settings.SYSTEM_PROMPT
        self.max_tokens = settings.OPENAI_MAX_TOKENS
        self.temperature = settings.OPENAI_TEMPERATURE
        self.timeout = settings.OPENAI_TIMEOUT_SECONDS
        self.initialized = True

    async def close(self) -> None:
        self.client = None
        self.initialized = False

    def build_messages(self, history: list[ChatMessage]) -> list[dict[str, str]]:
        messages = [{"role": "system", "content": self.system_prompt}]
        messages.extend({"role": m.role, "content": m.content} for m in history)
        return messages

    async def complete(self, history: list[ChatMessage]) -> str:
        """Return the assistant's reply to ``history``.

        Raises an external-API ``BotError`` on transport errors, on timeout,
        and when the model answers with blank text.
        """
        if not self.initialized or not self.client:
            raise RuntimeError("ConversationService not initialized")

        try:
            completion = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=self.build_messages(history),  # type: ignore[arg-type]
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error("OpenAI request timed out after %.1fs", self.timeout)
            raise BotError.external_api(SERVICE_NAME, "request timed out") from e
        except OpenAIError as e:
            logger.error("OpenAI request failed: %s", e)
            raise BotError.external_api(SERVICE_NAME, str(e)) from e

        content = ""
        if completion.choices and completion.choices[0].message.content:
            content = completion.choices[0].message.content.strip()
        if not content:
            logger.warning("Empty response from OpenAI (model=%s)", self.model)
            raise BotError.external_api(SERVICE_NAME, "empty response")
        return content

    async def check_connection(self) -> bool:
        return self.initialized


conversation_service = ConversationService()

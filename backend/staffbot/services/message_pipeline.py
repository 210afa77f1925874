"""Per-message processing: the single boundary where failures become replies.

Order for every message: rate limit → command dispatch or session load →
directory classification and resolution → conversational fallback.
"""

from __future__ import annotations

import asyncio
import logging

from staffbot.core.config import Settings
from staffbot.core.errors import BotError, ErrorKind, classify_error, user_message
from staffbot.models.directory import ResolverReply
from staffbot.models.employee import EmployeeData
from staffbot.models.message import BotReply, IncomingMessage
from staffbot.models.session import ChatMessage
from staffbot.services.conversation_service import ConversationService, conversation_service
from staffbot.services.directory_resolver import CLARIFICATION_TEXT, FALLBACK_HINT_TEXT, DirectoryResolver
from staffbot.services.employee_service import EmployeeService, employee_service, format_employee_list
from staffbot.services.entity_extractor import EMAIL_PATTERN
from staffbot.services.query_classifier import is_directory_query
from staffbot.services.rate_limiter import RateLimiter, rate_limiter
from staffbot.services.session_service import SessionService, session_service

logger = logging.getLogger(__name__)

START_TEXT = (
    "Привет! Я корпоративный ассистент. Спросите о сотруднике по имени, email или отделу "
    "или просто напишите сообщение."
)
HELP_TEXT = (
    "Примеры запросов:\n"
    "• Иван Ушаков\n"
    "• Какая должность у Зорин?\n"
    "• Кто главный бухгалтер?\n"
    "• navicon_zorin@bk.ru\n\n"
    "Команды: /employees — список сотрудников, /clear — очистить контекст."
)
CLEARED_TEXT = "Контекст очищен."
EMPTY_DIRECTORY_TEXT = "Список сотрудников пуст."
ADD_EMPLOYEE_USAGE = "Использование: /addemployee Имя Фамилия [email] [Должность]"


class MessagePipeline:
    def __init__(
        self,
        employees: EmployeeService = employee_service,
        sessions: SessionService = session_service,
        limiter: RateLimiter = rate_limiter,
        conversation: ConversationService = conversation_service,
        settings: Settings | None = None,
    ) -> None:
        self.employees = employees
        self.sessions = sessions
        self.limiter = limiter
        self.conversation = conversation
        self.command_prefix = "/"
        self.store_timeout = 10.0
        self.admin_user_ids: set[int] = set()
        if settings is not None:
            self.configure(settings)

    def configure(self, settings: Settings) -> None:
        self.command_prefix = settings.COMMAND_PREFIX
        self.store_timeout = settings.STORE_TIMEOUT_SECONDS
        self.admin_user_ids = settings.admin_user_ids

    async def handle(self, message: IncomingMessage) -> BotReply:
        try:
            return await self._process(message)
        except Exception as e:
            kind = classify_error(e)
            if kind is ErrorKind.UNKNOWN:
                logger.exception("Unhandled error for session=%s", message.session_id)
            else:
                logger.warning("Message failed for session=%s: %s (%s)", message.session_id, e, kind.value)
            return BotReply(
                text=user_message(e),
                error=kind,
                retry_after=e.retry_after if isinstance(e, BotError) else None,
            )

    async def _process(self, message: IncomingMessage) -> BotReply:
        await self.limiter.check(message.rate_limit_key)

        text = message.text.strip()
        if not text:
            return BotReply(text=CLARIFICATION_TEXT, handled=True)
        if text.startswith(self.command_prefix):
            return await self._handle_command(message, text)

        session_id = message.session_id
        history = await self.sessions.get(session_id)

        if is_directory_query(text, self.command_prefix):
            resolved = await self._resolve(text)
            if resolved.handled:
                return BotReply(text=resolved.text, handled=True)

        return await self._converse(session_id, history, text)

    async def _resolve(self, text: str) -> ResolverReply:
        resolver = DirectoryResolver(self.employees.store)
        try:
            return await asyncio.wait_for(resolver.resolve(text), timeout=self.store_timeout)
        except asyncio.TimeoutError as e:
            raise BotError.database("Record store timed out") from e

    async def _converse(self, session_id: str, history: list[ChatMessage], text: str) -> BotReply:
        if not self.conversation.initialized:
            return BotReply(text=FALLBACK_HINT_TEXT)

        history = self.sessions.trim([*history, ChatMessage(role="user", content=text)])
        answer = await self.conversation.complete(history)

        history = self.sessions.trim([*history, ChatMessage(role="assistant", content=answer)])
        await self.sessions.save(session_id, history)
        return BotReply(text=answer)

    async def _handle_command(self, message: IncomingMessage, text: str) -> BotReply:
        parts = text.split()
        # Telegram appends the bot name in groups: /clear@staff_bot
        command = parts[0][len(self.command_prefix):].split("@", 1)[0].lower()
        args = parts[1:]

        if command == "start":
            return BotReply(text=START_TEXT, handled=True)
        if command == "help":
            return BotReply(text=HELP_TEXT, handled=True)
        if command == "clear":
            await self.sessions.clear(message.session_id)
            return BotReply(text=CLEARED_TEXT, handled=True)
        if command == "employees":
            employees = await self.employees.list_employees()
            if not employees:
                return BotReply(text=EMPTY_DIRECTORY_TEXT, handled=True)
            return BotReply(text=format_employee_list(employees), handled=True)
        if command == "addemployee":
            return await self._add_employee(message, args)

        return BotReply(text=FALLBACK_HINT_TEXT, handled=True)

    async def _add_employee(self, message: IncomingMessage, args: list[str]) -> BotReply:
        if message.user_id is None or message.user_id not in self.admin_user_ids:
            raise BotError.authorization()

        if len(args) < 2:
            return BotReply(text=ADD_EMPLOYEE_USAGE, handled=True)

        first_name, last_name, rest = args[0], args[1], args[2:]
        email = None
        if rest and EMAIL_PATTERN.fullmatch(rest[0]):
            email, rest = rest[0], rest[1:]

        employee = await self.employees.create_employee(
            EmployeeData(
                first_name=first_name,
                last_name=last_name,
                email=email,
                position=" ".join(rest) or None,
            )
        )
        return BotReply(text=f'Сотрудник "{employee.full_name}" добавлен.', handled=True)


message_pipeline = MessagePipeline()

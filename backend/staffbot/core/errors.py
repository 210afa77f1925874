"""Typed failures and their user-facing rendering.

Inner components raise :class:`BotError` with an :class:`ErrorKind`; only the
outermost handlers (the message pipeline and the REST endpoints) turn them
into text or HTTP responses.
"""

from __future__ import annotations

from enum import Enum

from fastapi import status


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    UNKNOWN = "unknown"


class BotError(Exception):
    def __init__(
        self,
        kind: ErrorKind,
        message: str = "",
        *,
        retry_after: int | None = None,
        service: str | None = None,
        errors: list[str] | None = None,
    ) -> None:
        super().__init__(message or kind.value)
        self.kind = kind
        self.message = message
        self.retry_after = retry_after
        self.service = service
        self.errors = errors or []

    @classmethod
    def validation(cls, message: str, errors: list[str] | None = None) -> BotError:
        return cls(ErrorKind.VALIDATION, message, errors=errors)

    @classmethod
    def authorization(cls, message: str = "Недостаточно прав доступа") -> BotError:
        return cls(ErrorKind.AUTHORIZATION, message)

    @classmethod
    def rate_limit(cls, retry_after: int, message: str = "Превышен лимит запросов") -> BotError:
        return cls(ErrorKind.RATE_LIMIT, message, retry_after=retry_after)

    @classmethod
    def database(cls, message: str = "Database unavailable") -> BotError:
        return cls(ErrorKind.DATABASE, message)

    @classmethod
    def external_api(cls, service: str, message: str = "") -> BotError:
        return cls(ErrorKind.EXTERNAL_API, message or f"{service} request failed", service=service)


GENERIC_ERROR_TEXT = "❌ Произошла ошибка. Попробуйте позже."

_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHORIZATION: status.HTTP_403_FORBIDDEN,
    ErrorKind.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.EXTERNAL_API: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.UNKNOWN: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def classify_error(error: BaseException) -> ErrorKind:
    if isinstance(error, BotError):
        return error.kind
    return ErrorKind.UNKNOWN


def status_code(kind: ErrorKind) -> int:
    return _STATUS_CODES[kind]


def _render_validation(error: BotError) -> str:
    lines = [f"Ошибка валидации: {error.message}"]
    lines.extend(f"• {item}" for item in error.errors)
    return "\n".join(lines)


def _render_rate_limit(error: BotError) -> str:
    return f"⚠️ Слишком много запросов. Попробуйте через {error.retry_after} секунд."


def _render_external_api(error: BotError) -> str:
    return f"❌ Ошибка сервиса {error.service or 'unknown'}. Попробуйте позже."


_RENDERERS = {
    ErrorKind.VALIDATION: _render_validation,
    ErrorKind.AUTHORIZATION: lambda _: "❌ У вас нет прав для выполнения этой операции.",
    ErrorKind.RATE_LIMIT: _render_rate_limit,
    ErrorKind.DATABASE: lambda _: "❌ Ошибка базы данных. Попробуйте позже.",
    ErrorKind.EXTERNAL_API: _render_external_api,
}


def user_message(error: BaseException) -> str:
    """Render any failure as the single user-facing string for its kind."""
    if not isinstance(error, BotError):
        return GENERIC_ERROR_TEXT
    renderer = _RENDERERS.get(error.kind)
    if renderer is None:
        return GENERIC_ERROR_TEXT
    return renderer(error)

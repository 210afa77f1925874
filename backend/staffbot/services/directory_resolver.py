"""Directory lookups: an ordered chain of matching strategies.

Each strategy either declines (``NotApplicable``) or decides the request with
a :class:`ResolverReply`; the first decision wins. ``handled=False`` sends
the message on to the conversational fallback.

Lookups use ``find_first``, so when several records match the answer is
whichever one the record store returns first (insertion order for the
in-memory store, unspecified for Cosmos DB).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable

from staffbot.models.directory import (
    Found,
    Lookup,
    NamePair,
    NotApplicable,
    NotFound,
    ResolverReply,
)
from staffbot.models.employee import Employee
from staffbot.models.predicate import Predicate, all_of, any_of, contains, equals
from staffbot.services.entity_extractor import (
    extract_email_from_text,
    extract_name_from_text,
    extract_name_token,
)
from staffbot.services.record_store import RecordStore

logger = logging.getLogger(__name__)

NOT_FOUND_TEXT = "Сотрудник не найден."
CLARIFICATION_TEXT = "Уточните, пожалуйста, имя и фамилию сотрудника."
FALLBACK_HINT_TEXT = (
    "Не удалось найти ответ. Напишите имя и фамилию сотрудника, его email или название отдела."
)

POSITION_PHRASES: tuple[str, ...] = ("должность", "должности", "должностью", "кем работает")
DEPARTMENT_WORDS: tuple[str, ...] = ("отдел", "подразделение", "бухгалтерия")

_LEADING_FILLER_WORDS = frozenset(
    {
        "кто", "что", "где", "какой", "какая", "какие", "каком", "в", "во", "из",
        "на", "по", "у", "покажи", "найди", "подскажи", "подскажите",
        "сотрудник", "сотрудники", "сотрудников", "работает", "работают",
    }
)
_QUESTION_MARKS = re.compile(r"[?!]+")
_WHITESPACE = re.compile(r"\s+")

Strategy = Callable[[str, str], Awaitable[ResolverReply | NotApplicable]]


def format_employee_info(employee: Employee | None) -> str:
    if employee is None:
        return NOT_FOUND_TEXT

    lines = [f"👤 {employee.full_name}"]
    if employee.position:
        lines.append(f"💼 Должность: {employee.position}")
    if employee.department:
        lines.append(f"📂 Подразделение: {employee.department}")
    if employee.email:
        lines.append(f"✉ E-Mail: {employee.email}")
    if employee.phone:
        lines.append(f"📱 Телефон: {employee.phone}")
    if employee.birthday:
        lines.append(f"🎂 День рождения: {employee.birthday}")
    return "\n".join(lines)


def format_position(employee: Employee) -> str:
    if employee.position:
        return f"Должность: {employee.position}"
    return format_employee_info(employee)


def department_search_term(text: str) -> str:
    """Normalise ``text`` and drop leading prepositions and question words."""
    normalized = _QUESTION_MARKS.sub(" ", text.casefold())
    normalized = _WHITESPACE.sub(" ", normalized).strip(" .,")
    words = normalized.split(" ")
    while words and words[0] in _LEADING_FILLER_WORDS:
        words.pop(0)
    return " ".join(words).strip(" .,")


def _handled(text: str) -> ResolverReply:
    return ResolverReply(handled=True, text=text)


_NOT_APPLICABLE = NotApplicable()
_FALL_THROUGH = ResolverReply(handled=False, text="")


class DirectoryResolver:
    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self._strategies: list[Strategy] = [
            self._fixed_role,
            self._position_question,
            self._bare_name,
            self._email,
            self._department,
        ]

    async def resolve(self, text: str | None) -> ResolverReply:
        if not text or not text.strip():
            return _handled(CLARIFICATION_TEXT)

        low = text.casefold()
        for strategy in self._strategies:
            outcome = await strategy(text, low)
            if isinstance(outcome, ResolverReply):
                logger.debug("Directory query decided by %s (handled=%s)", strategy.__name__, outcome.handled)
                return outcome
        return _FALL_THROUGH

    async def _find(self, predicate: Predicate) -> Lookup:
        employee = await self.store.find_first(predicate)
        if employee is None:
            return NotFound()
        return Found(employee=employee)

    async def _find_by_name(self, pair: NamePair) -> Lookup:
        for first, last in ((pair.first_name, pair.last_name), (pair.last_name, pair.first_name)):
            result = await self._find(all_of(equals("first_name", first), equals("last_name", last)))
            if isinstance(result, Found):
                return result

        return await self._find(
            any_of(
                contains("first_name", pair.first_name),
                contains("last_name", pair.last_name),
                contains("first_name", pair.last_name),
                contains("last_name", pair.first_name),
            )
        )

    async def _fixed_role(self, text: str, low: str) -> ResolverReply | NotApplicable:
        if "главный бухгалтер" in low or "главбух" in low:
            predicate: Predicate = contains("position", "главный бухгалтер")
        elif "директор" in low:
            predicate = contains("position", "директор")
        elif "руководитель" in low and "тех" in low:
            predicate = all_of(contains("position", "руководитель"), contains("department", "тех"))
        else:
            return _NOT_APPLICABLE

        result = await self._find(predicate)
        if isinstance(result, Found):
            return _handled(format_employee_info(result.employee))
        return _handled(NOT_FOUND_TEXT)

    async def _position_question(self, text: str, low: str) -> ResolverReply | NotApplicable:
        if not any(phrase in low for phrase in POSITION_PHRASES):
            return _NOT_APPLICABLE

        pair = extract_name_from_text(text)
        if pair is not None:
            result = await self._find_by_name(pair)
        else:
            token = extract_name_token(text)
            if token is None:
                return _handled(CLARIFICATION_TEXT)
            result = await self._find(
                any_of(
                    contains("last_name", token),
                    contains("first_name", token),
                    contains("email", token),
                )
            )

        if isinstance(result, Found):
            return _handled(format_position(result.employee))
        return _handled(NOT_FOUND_TEXT)

    async def _bare_name(self, text: str, low: str) -> ResolverReply | NotApplicable:
        pair = extract_name_from_text(text)
        if pair is None:
            return _NOT_APPLICABLE

        result = await self._find_by_name(pair)
        if isinstance(result, Found):
            return _handled(format_employee_info(result.employee))
        if extract_email_from_text(text) is not None:
            return _NOT_APPLICABLE
        # Two capitalised words may just open an unrelated sentence
        return _FALL_THROUGH

    async def _email(self, text: str, low: str) -> ResolverReply | NotApplicable:
        email = extract_email_from_text(text)
        if email is None:
            return _NOT_APPLICABLE

        result = await self._find(equals("email", email))
        if isinstance(result, Found):
            return _handled(format_employee_info(result.employee))
        return _handled(NOT_FOUND_TEXT)

    async def _department(self, text: str, low: str) -> ResolverReply | NotApplicable:
        if not any(word in low for word in DEPARTMENT_WORDS):
            return _NOT_APPLICABLE

        term = department_search_term(text)
        if not term:
            return _NOT_APPLICABLE

        result = await self._find(contains("department", term))
        if isinstance(result, Found):
            return _handled(format_employee_info(result.employee))
        return _NOT_APPLICABLE

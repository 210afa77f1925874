"""Cheap admission gate deciding whether a message is a directory lookup.

``is_directory_query`` is pure and must run before any entity extraction or
record store access.
"""

from __future__ import annotations

import re

from staffbot.services.entity_extractor import EMAIL_PATTERN

DEFAULT_COMMAND_PREFIX = "/"
MAX_IMPLICIT_NAME_LENGTH = 100

DIRECTORY_KEYWORDS: tuple[str, ...] = (
    # roles
    "сотрудник", "сотрудница", "директор", "руководитель",
    "бухгалтер", "главбух", "главный бухгалтер",
    # structure
    "отдел", "подразделение", "бухгалтерия", "должность", "должност",
    # contacts
    "почта", "email", "e-mail", "мейл", "телефон", "контакт",
    # birthdays
    "день рождения", "день рождени",
)

# "др" is too short for substring matching ("андрей", "кадры")
_BIRTHDAY_ABBREVIATION = re.compile(r"\bдр\b")

_IMPLICIT_NAME_PATTERN = re.compile(r"^[А-ЯЁ][а-яё]+(?:\s+[А-ЯЁ][а-яё]+)+$")

_POSITION_QUESTION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"кто\s+(по\s+)?должности", re.IGNORECASE),
    re.compile(r"какая\s+должность", re.IGNORECASE),
    re.compile(r"чь[аяё]\s+должность", re.IGNORECASE),
    re.compile(r"должность\s+\w+", re.IGNORECASE),
)


def is_implicit_name_query(text: str, command_prefix: str = DEFAULT_COMMAND_PREFIX) -> bool:
    stripped = text.strip()
    if not stripped or stripped.startswith(command_prefix):
        return False
    if len(stripped) >= MAX_IMPLICIT_NAME_LENGTH:
        return False
    return bool(_IMPLICIT_NAME_PATTERN.match(stripped))


def is_directory_query(text: str | None, command_prefix: str = DEFAULT_COMMAND_PREFIX) -> bool:
    if not text or not isinstance(text, str):
        return False

    low = text.casefold().strip()

    if any(keyword in low for keyword in DIRECTORY_KEYWORDS):
        return True
    if _BIRTHDAY_ABBREVIATION.search(low):
        return True

    if EMAIL_PATTERN.search(text):
        return True

    if is_implicit_name_query(text, command_prefix):
        return True

    return any(pattern.search(text) for pattern in _POSITION_QUESTION_PATTERNS)

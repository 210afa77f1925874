"""Pull candidate names and email addresses out of free text."""

from __future__ import annotations

import re

from staffbot.models.directory import NamePair

EMAIL_PATTERN = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)
NAME_PAIR_PATTERN = re.compile(r"([А-ЯЁ][а-яё]+)\s+([А-ЯЁ][а-яё]+)")
CAPITALIZED_TOKEN_PATTERN = re.compile(r"[А-ЯЁ][а-яё]+")

# Capitalised words that open a question rather than name a person
_NON_NAME_TOKENS = frozenset(
    {
        "кто", "какая", "какой", "какие", "чья", "чьё", "чей", "где", "как",
        "скажи", "подскажи", "подскажите", "скажите", "покажи", "найди",
        "должность", "должности", "сотрудник", "сотрудница", "почта",
    }
)


def extract_name_from_text(text: str | None) -> NamePair | None:
    """Return the leftmost pair of adjacent capitalised Cyrillic words."""
    if not text:
        return None
    match = NAME_PAIR_PATTERN.search(text)
    if not match:
        return None
    return NamePair(first_name=match.group(1), last_name=match.group(2))


def extract_email_from_text(text: str | None) -> str | None:
    if not text:
        return None
    match = EMAIL_PATTERN.search(text)
    return match.group(0) if match else None


def extract_name_token(text: str | None) -> str | None:
    """Return the first capitalised Cyrillic word that is not a question word."""
    if not text:
        return None
    for match in CAPITALIZED_TOKEN_PATTERN.finditer(text):
        token = match.group(0)
        if token.casefold() not in _NON_NAME_TOKENS:
            return token
    return None

"""Validation rules for employee records submitted for creation."""

from __future__ import annotations

import re

from staffbot.models.employee import EmployeeData

_EMAIL_RE = re.compile(r"^[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}$", re.IGNORECASE)
_NAME_RE = re.compile(r"^[А-ЯЁа-яёA-Za-z\s'-]{2,50}$")
_PHONE_RE = re.compile(r"^[\d\s()+-]{7,20}$")

NAME_ERROR = "Имя обязательно и должно содержать 2-50 символов (только буквы, пробелы, дефисы)"
LAST_NAME_ERROR = "Фамилия обязательна и должна содержать 2-50 символов (только буквы, пробелы, дефисы)"
EMAIL_ERROR = "Некорректный формат email"
PHONE_ERROR = "Некорректный формат телефона"
BIRTHDAY_DAY_ERROR = "День рождения должен быть от 1 до 31"
BIRTHDAY_MONTH_ERROR = "Месяц рождения должен быть от 1 до 12"


def is_valid_email(email: str | None) -> bool:
    if not email:
        return False
    return bool(_EMAIL_RE.match(email.strip()))


def is_valid_name(name: str | None) -> bool:
    if not name:
        return False
    return bool(_NAME_RE.match(name.strip()))


def is_valid_phone(phone: str | None) -> bool:
    if phone is None:
        return False
    trimmed = phone.strip()
    if not trimmed:
        return True
    return bool(_PHONE_RE.match(trimmed))


def validate_employee_data(data: EmployeeData) -> list[str]:
    """Return every rule ``data`` breaks; an empty list means it is valid."""
    errors: list[str] = []

    if not is_valid_name(data.first_name):
        errors.append(NAME_ERROR)
    if not is_valid_name(data.last_name):
        errors.append(LAST_NAME_ERROR)

    if data.email and not is_valid_email(data.email):
        errors.append(EMAIL_ERROR)
    if data.phone and not is_valid_phone(data.phone):
        errors.append(PHONE_ERROR)

    if data.birthday_day is not None and not 1 <= data.birthday_day <= 31:
        errors.append(BIRTHDAY_DAY_ERROR)
    if data.birthday_month is not None and not 1 <= data.birthday_month <= 12:
        errors.append(BIRTHDAY_MONTH_ERROR)

    return errors


def derive_position(department: str | None, last_name: str | None = None) -> str | None:
    """Recover a role stored outside ``position``.

    ``"Навикон, Главный Бухгалтер"`` yields ``"Главный Бухгалтер"``; a last
    name with a role glued on (``"Баранов Менеджер"``) yields ``"Менеджер"``.
    """
    if department:
        parts = [p.strip() for p in department.split(",") if p.strip()]
        if len(parts) > 1:
            return ", ".join(parts[1:])

    if last_name:
        tokens = last_name.split()
        if len(tokens) > 1:
            maybe_position = " ".join(tokens[1:])
            if len(maybe_position) > 1:
                return maybe_position

    return None

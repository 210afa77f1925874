"""Employee records held by the record store."""

from __future__ import annotations

from pydantic import BaseModel, Field


class EmployeeData(BaseModel):
    """Attributes of an employee, as submitted for creation (not yet validated)."""

    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    position: str | None = None
    department: str | None = None
    birthday_day: int | None = None
    birthday_month: int | None = None


class Employee(EmployeeData):
    """A stored employee; ``id`` is assigned by the store and never reused."""

    id: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def birthday(self) -> str | None:
        if self.birthday_day is None or self.birthday_month is None:
            return None
        return f"{self.birthday_day}.{self.birthday_month}"


class EmployeeCreateRequest(EmployeeData):
    first_name: str = Field(..., max_length=200)
    last_name: str = Field(..., max_length=200)

"""Employee directory access: record store selection, listing and creation."""

from __future__ import annotations

import logging

from staffbot.core.config import Settings
from staffbot.core.errors import BotError
from staffbot.models.employee import Employee, EmployeeData
from staffbot.models.predicate import equals
from staffbot.services.employee_validator import is_valid_email, validate_employee_data
from staffbot.services.record_store import CosmosRecordStore, InMemoryRecordStore, RecordStore
from staffbot.services.seed_data import seed_employees

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(self, store: RecordStore | None = None) -> None:
        self.store: RecordStore = store or InMemoryRecordStore()
        self.cosmos: CosmosRecordStore | None = None
        self.initialized: bool = store is not None

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        cosmos = CosmosRecordStore()
        await cosmos.initialize(settings)
        if cosmos.initialized:
            self.cosmos = cosmos
            self.store = cosmos
        else:
            logger.warning("Using in-memory employee directory with bundled seed data")
            self.store = InMemoryRecordStore(seed_employees())
        self.initialized = True

    async def close(self) -> None:
        if self.cosmos:
            await self.cosmos.close()
            self.cosmos = None
        self.initialized = False

    async def list_employees(self) -> list[Employee]:
        return await self.store.list_all()

    async def get_employee(self, employee_id: str) -> Employee | None:
        return await self.store.get(employee_id)

    async def create_employee(self, data: EmployeeData) -> Employee:
        """Validate and persist ``data``; all rule violations are reported together."""
        errors = validate_employee_data(data)

        if is_valid_email(data.email):
            existing = await self.store.find_first(equals("email", data.email.strip()))
            if existing is not None:
                errors.append(f"Сотрудник с email {data.email.strip()} уже существует")

        if errors:
            raise BotError.validation("некорректные данные сотрудника", errors)

        cleaned = data.model_copy(
            update={
                "first_name": data.first_name.strip(),
                "last_name": data.last_name.strip(),
                "email": data.email.strip() if data.email else None,
                "phone": data.phone.strip() if data.phone else None,
            }
        )
        employee = await self.store.create(cleaned)
        logger.info("Employee created (id=%s)", employee.id)
        return employee

    async def check_connection(self) -> bool:
        if self.cosmos is None:
            return self.initialized
        return await self.cosmos.check_connection()


def format_employee_list(employees: list[Employee]) -> str:
    lines: list[str] = []
    for emp in employees:
        line = f"{emp.last_name} {emp.first_name}"
        if emp.position:
            line += f" ({emp.position})"
        if emp.birthday:
            line += f" 🎂 {emp.birthday}"
        lines.append(line)
    return "\n".join(lines)


employee_service = EmployeeService()

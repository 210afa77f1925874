"""Employee record stores: in-memory and Cosmos DB (``azure.cosmos.aio``)."""

from __future__ import annotations

import logging
import uuid
from itertools import count
from typing import Any, Protocol

from azure.core.exceptions import AzureError
from azure.cosmos.aio import CosmosClient

from staffbot.core.config import Settings
from staffbot.core.errors import BotError
from staffbot.models.employee import Employee, EmployeeData
from staffbot.models.predicate import AllOf, AnyOf, FieldCondition, Predicate, matches

logger = logging.getLogger(__name__)

# Python attribute names → Cosmos DB document keys
_FIELD_MAP: list[tuple[str, str]] = [
    ("first_name", "firstName"),
    ("last_name", "lastName"),
    ("email", "email"),
    ("phone", "phone"),
    ("position", "position"),
    ("department", "department"),
    ("birthday_day", "birthdayDay"),
    ("birthday_month", "birthdayMonth"),
]
_COSMOS_KEYS = dict(_FIELD_MAP)


class RecordStore(Protocol):
    async def find_first(self, predicate: Predicate) -> Employee | None: ...

    async def find_many(self, predicate: Predicate | None = None) -> list[Employee]: ...

    async def get(self, employee_id: str) -> Employee | None: ...

    async def create(self, data: EmployeeData) -> Employee: ...

    async def list_all(self) -> list[Employee]: ...


def _sort_key(employee: Employee) -> tuple[str, str]:
    return employee.last_name.casefold(), employee.first_name.casefold()


class InMemoryRecordStore:
    """Insertion-ordered store; ``find_first`` returns the earliest inserted match."""

    def __init__(self, employees: list[EmployeeData] | None = None) -> None:
        self._records: list[Employee] = []
        self._ids = count(1)
        for data in employees or []:
            self._insert(data)

    def _insert(self, data: EmployeeData) -> Employee:
        employee = Employee(id=str(next(self._ids)), **data.model_dump())
        self._records.append(employee)
        return employee

    async def find_first(self, predicate: Predicate) -> Employee | None:
        for employee in self._records:
            if matches(predicate, employee):
                return employee
        return None

    async def find_many(self, predicate: Predicate | None = None) -> list[Employee]:
        if predicate is None:
            return list(self._records)
        return [e for e in self._records if matches(predicate, e)]

    async def get(self, employee_id: str) -> Employee | None:
        for employee in self._records:
            if employee.id == employee_id:
                return employee
        return None

    async def create(self, data: EmployeeData) -> Employee:
        return self._insert(data)

    async def list_all(self) -> list[Employee]:
        return sorted(self._records, key=_sort_key)


def compile_predicate(predicate: Predicate, params: list[dict[str, Any]]) -> str:
    """Translate a predicate into a Cosmos SQL boolean expression.

    Values are appended to ``params`` as ``@p<n>`` parameters.
    """
    if isinstance(predicate, (AllOf, AnyOf)):
        if not predicate.conditions:
            return "true" if isinstance(predicate, AllOf) else "false"
        joiner = " AND " if isinstance(predicate, AllOf) else " OR "
        return "(" + joiner.join(compile_predicate(p, params) for p in predicate.conditions) + ")"

    if not isinstance(predicate, FieldCondition):
        raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")

    name = f"@p{len(params)}"
    params.append({"name": name, "value": predicate.value})
    field = f"c.{_COSMOS_KEYS[predicate.field]}"
    if predicate.mode == "equals":
        return f"STRINGEQUALS({field}, {name}, true)"
    return f"CONTAINS({field}, {name}, true)"


class CosmosRecordStore:
    """Read/create access to the employees container.

    Query order is whatever Cosmos returns; no ORDER BY is applied, so ties
    between several matching records resolve to an unspecified one.
    """

    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.container: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.cosmos_configured:
            logger.warning("Cosmos DB credentials missing — CosmosRecordStore not initialized")
            return

        self.client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
        db = self.client.get_database_client(settings.COSMOS_DB_DATABASE)
        self.container = db.get_container_client(settings.COSMOS_DB_EMPLOYEES_CONTAINER)
        self.initialized = True
        logger.info("CosmosRecordStore initialized (container=%s)", settings.COSMOS_DB_EMPLOYEES_CONTAINER)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.container = None
            self.initialized = False

    async def _query(self, query: str, params: list[dict[str, Any]]) -> list[Employee]:
        if not self.container:
            raise BotError.database("Record store not initialized")

        items: list[Employee] = []
        try:
            async for item in self.container.query_items(
                query=query,
                parameters=params,
                enable_cross_partition_query=True,
            ):
                items.append(self._transform_employee(item))
        except AzureError as e:
            logger.error("Cosmos query failed: %s", e)
            raise BotError.database("Record store query failed") from e
        return items

    async def find_first(self, predicate: Predicate) -> Employee | None:
        params: list[dict[str, Any]] = []
        where = compile_predicate(predicate, params)
        items = await self._query(f"SELECT TOP 1 * FROM c WHERE {where}", params)
        return items[0] if items else None

    async def find_many(self, predicate: Predicate | None = None) -> list[Employee]:
        if predicate is None:
            return await self._query("SELECT * FROM c", [])
        params: list[dict[str, Any]] = []
        where = compile_predicate(predicate, params)
        return await self._query(f"SELECT * FROM c WHERE {where}", params)

    async def get(self, employee_id: str) -> Employee | None:
        items = await self._query(
            "SELECT * FROM c WHERE c.id = @id",
            [{"name": "@id", "value": employee_id}],
        )
        return items[0] if items else None

    async def create(self, data: EmployeeData) -> Employee:
        if not self.container:
            raise BotError.database("Record store not initialized")

        employee = Employee(id=str(uuid.uuid4()), **data.model_dump())
        try:
            await self.container.create_item(body=self._to_document(employee))
        except AzureError as e:
            logger.error("Failed to create employee: %s", e)
            raise BotError.database("Failed to create employee") from e
        return employee

    async def list_all(self) -> list[Employee]:
        return sorted(await self.find_many(), key=_sort_key)

    async def check_connection(self) -> bool:
        if not self.container:
            return False
        try:
            async for _ in self.container.query_items(
                query="SELECT VALUE COUNT(1) FROM c",
                enable_cross_partition_query=True,
            ):
                return True
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False

    def _transform_employee(self, raw: dict[str, Any]) -> Employee:
        data: dict[str, Any] = {"id": str(raw.get("id") or "unknown")}
        for python_key, cosmos_key in _FIELD_MAP:
            data[python_key] = raw.get(cosmos_key)
        data["first_name"] = data["first_name"] or ""
        data["last_name"] = data["last_name"] or ""
        return Employee(**data)

    def _to_document(self, employee: Employee) -> dict[str, Any]:
        doc: dict[str, Any] = {"id": employee.id}
        for python_key, cosmos_key in _FIELD_MAP:
            doc[cosmos_key] = getattr(employee, python_key)
        return doc

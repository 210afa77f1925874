from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from staffbot.main import app
from staffbot.models.employee import EmployeeData
from staffbot.services.record_store import InMemoryRecordStore
from staffbot.services.rate_limiter import rate_limiter

TEST_ADMIN_ID = 4242


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 1_700_000_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _admin_settings():
    from staffbot.core.config import settings

    original_admins = settings.ADMIN_USER_IDS
    settings.ADMIN_USER_IDS = str(TEST_ADMIN_ID)
    yield
    settings.ADMIN_USER_IDS = original_admins


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


def make_employees() -> list[EmployeeData]:
    return [
        EmployeeData(
            first_name="Сергей",
            last_name="Беляев",
            position="Директор",
            department="Навикон, Директор",
            email="frozen-Tambov@mail.ru",
        ),
        EmployeeData(
            first_name="Анастасия",
            last_name="Андросова",
            position="Главный Бухгалтер",
            department="Навикон, Главный Бухгалтер",
            email="navicon.androsova@bk.ru",
            phone="+7 (900) 123-45-67",
            birthday_day=5,
            birthday_month=3,
        ),
        EmployeeData(
            first_name="Михаил",
            last_name="Зорин",
            position="Руководитель Тех. отдел",
            department="Навикон, Руководитель Тех. отдел",
            email="navicon_zorin@bk.ru",
        ),
        EmployeeData(
            first_name="Иван",
            last_name="Ушаков",
            department="Навикон, Тех. отдел",
            email="ushakov.navicon@bk.ru",
        ),
        EmployeeData(
            first_name="Вадим",
            last_name="Василенко",
            position="Менеджер",
            department="Навикон, Отдел продаж",
            email="vvvadim1978@gmail.com",
        ),
    ]


@pytest.fixture
def employees() -> list[EmployeeData]:
    return make_employees()


@pytest.fixture
def store(employees) -> InMemoryRecordStore:
    return InMemoryRecordStore(employees)

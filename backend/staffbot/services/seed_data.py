"""Bundled company directory used to seed Cosmos DB and the in-memory store.

Records follow the "Company, Role" department convention; ``position`` is
derived from it at load time.
"""

from __future__ import annotations

from staffbot.models.employee import EmployeeData
from staffbot.services.employee_validator import derive_position

SEED_EMPLOYEES: list[dict[str, str]] = [
    {"first_name": "Сергей", "last_name": "Беляев", "department": "Навикон, Директор", "email": "frozen-Tambov@mail.ru"},
    {"first_name": "Елена", "last_name": "Орлова", "department": "Навикон, Бухгалтер", "email": "orlova.navicon@bk.ru"},
    {"first_name": "Вадим", "last_name": "Василенко", "department": "Навикон, Отдел продаж", "email": "vvvadim1978@gmail.com"},
    {"first_name": "Людмила", "last_name": "Потапова", "department": "Навикон, Нач. Склада", "email": "navicon.potapova@bk.ru"},
    {"first_name": "Михаил", "last_name": "Зорин", "department": "Навикон, Руководитель Тех. отдел", "email": "navicon_zorin@bk.ru"},
    {"first_name": "Елена", "last_name": "Ермакова", "department": "Навикон, Бухгалтерия", "email": "navicon.ermakova@bk.ru"},
    {"first_name": "Анастасия", "last_name": "Андросова", "department": "Навикон, Главный Бухгалтер", "email": "navicon.androsova@bk.ru"},
    {"first_name": "Алексей", "last_name": "Чиркин", "department": "Навикон, Монтажники", "email": "navicon.chirkin@bk.ru"},
    {"first_name": "Сергей", "last_name": "Каширов", "department": "Навикон, Монтажники", "email": "navicon.kashirov@bk.ru"},
    {"first_name": "Сергей", "last_name": "Зуев", "department": "Навикон, Монтажники", "email": "navicon.zuev@bk.ru"},
    {"first_name": "Кирилл", "last_name": "Кузин", "department": "Навикон, Монтажники", "email": "navicon.kuzin@mail.ru"},
    {"first_name": "Сергей", "last_name": "Сысоев", "department": "Навикон, Монтажники", "email": "navicon.sysoev@bk.ru"},
    {"first_name": "Екатерина", "last_name": "Котельникова", "department": "Навикон, Бухгалтерия", "email": "navicon_kotelnokova@bk.ru"},
    {"first_name": "Антон", "last_name": "Брусникин", "department": "Навикон, Тех. отдел", "email": "antonnavikon@gmail.com"},
    {"first_name": "Николай", "last_name": "Прохоров", "department": "Навикон, Проджект менеджер", "email": "navicon-prohorov@bk.ru"},
    {"first_name": "Иван", "last_name": "Ушаков", "department": "Навикон, Тех. отдел", "email": "ushakov.navicon@bk.ru"},
    {"first_name": "Илья", "last_name": "Демидов", "department": "Навикон, помощник нач. склада", "email": "navicon.demidov@bk.ru"},
]


def seed_employees() -> list[EmployeeData]:
    employees: list[EmployeeData] = []
    for raw in SEED_EMPLOYEES:
        data = EmployeeData(**raw)
        if not data.position:
            data.position = derive_position(data.department, data.last_name)
        employees.append(data)
    return employees

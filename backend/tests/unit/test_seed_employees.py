"""Tests for the directory seeding script."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from scripts.seed_employees import build_document, parse_args, prepare_documents, seed, seed_id
from staffbot.models.employee import EmployeeData
from staffbot.services.seed_data import SEED_EMPLOYEES


def test_seed_id_is_stable_and_case_insensitive():
    a = EmployeeData(first_name="Иван", last_name="Петров", email="Ivan@bk.ru")
    b = EmployeeData(first_name="Иван", last_name="Петров", email="ivan@BK.ru")
    assert seed_id(a) == seed_id(b)


def test_seed_id_falls_back_to_name():
    a = EmployeeData(first_name="Иван", last_name="Петров")
    b = EmployeeData(first_name="Иван", last_name="Сидоров")
    assert seed_id(a) != seed_id(b)


def test_build_document_uses_cosmos_keys():
    doc = build_document(
        EmployeeData(first_name="Иван", last_name="Петров", email="", birthday_day=1, birthday_month=2)
    )
    assert doc["firstName"] == "Иван"
    assert doc["lastName"] == "Петров"
    assert doc["email"] is None
    assert doc["birthdayDay"] == 1
    assert doc["birthdayMonth"] == 2


def test_prepare_documents_skips_invalid_records():
    docs, skipped = prepare_documents(
        [
            EmployeeData(first_name="Иван", last_name="Петров"),
            EmployeeData(first_name="", last_name="Петров"),
        ]
    )
    assert len(docs) == 1
    assert skipped == 1


def test_parse_args_defaults():
    args = parse_args([])
    assert args.dry_run is False
    assert args.verbose is False


def test_parse_args_flags():
    args = parse_args(["--dry-run", "--verbose"])
    assert args.dry_run is True
    assert args.verbose is True


@pytest.mark.anyio
async def test_dry_run_does_not_connect():
    with patch("scripts.seed_employees.CosmosClient") as client_cls:
        await seed(parse_args(["--dry-run"]))
    client_cls.assert_not_called()


@pytest.mark.anyio
async def test_seed_upserts_every_document():
    container = MagicMock()
    container.upsert_item = AsyncMock()
    client = MagicMock()
    client.get_database_client.return_value.get_container_client.return_value = container
    client.close = AsyncMock()

    settings = MagicMock(cosmos_configured=True)
    with (
        patch("scripts.seed_employees.Settings", return_value=settings),
        patch("scripts.seed_employees.CosmosClient", return_value=client),
    ):
        await seed(parse_args([]))

    assert container.upsert_item.await_count == len(SEED_EMPLOYEES)
    client.close.assert_awaited_once()

#!/usr/bin/env python3
"""Seed the Cosmos DB employees container with the bundled directory.

Run from the backend/ directory:

    python3 scripts/seed_employees.py [--dry-run] [--verbose]

Records are upserted by id, so re-running the script is safe. Invalid
records are skipped with a warning rather than aborting the run.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import uuid
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from azure.cosmos.aio import CosmosClient  # noqa: E402

from staffbot.core.config import Settings  # noqa: E402
from staffbot.models.employee import EmployeeData  # noqa: E402
from staffbot.services.employee_validator import validate_employee_data  # noqa: E402
from staffbot.services.seed_data import seed_employees  # noqa: E402

logger = logging.getLogger(__name__)

# Stable ids keep repeated runs idempotent
_SEED_NAMESPACE = uuid.UUID("6f1c9d3e-4b8a-4c55-9e0d-2a7f5b1c8e40")


def seed_id(data: EmployeeData) -> str:
    key = (data.email or f"{data.first_name} {data.last_name}").casefold()
    return str(uuid.uuid5(_SEED_NAMESPACE, key))


def build_document(data: EmployeeData) -> dict[str, Any]:
    return {
        "id": seed_id(data),
        "firstName": data.first_name,
        "lastName": data.last_name,
        "email": data.email or None,
        "phone": data.phone or None,
        "position": data.position,
        "department": data.department,
        "birthdayDay": data.birthday_day,
        "birthdayMonth": data.birthday_month,
    }


def prepare_documents(employees: list[EmployeeData]) -> tuple[list[dict[str, Any]], int]:
    """Return (documents, skipped) for the records that pass validation."""
    documents: list[dict[str, Any]] = []
    skipped = 0
    for data in employees:
        errors = validate_employee_data(data)
        if errors:
            logger.warning("Skipping %s %s: %s", data.first_name, data.last_name, "; ".join(errors))
            skipped += 1
            continue
        documents.append(build_document(data))
    return documents, skipped


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Seed the employee directory into Cosmos DB",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate and print documents without writing to Cosmos DB",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


async def seed(args: argparse.Namespace) -> None:
    settings = Settings()
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    documents, skipped = prepare_documents(seed_employees())
    logger.info("Prepared %d employees (%d skipped)", len(documents), skipped)

    if args.dry_run:
        for doc in documents:
            logger.info("[DRY RUN] %s %s — %s", doc["firstName"], doc["lastName"], doc["position"])
        return

    if not settings.cosmos_configured:
        logger.error("COSMOS_DB_ENDPOINT / COSMOS_DB_KEY are not set. Exiting.")
        return

    logger.info("Connecting to Cosmos DB...")
    cosmos_client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
    succeeded = 0
    failed = 0
    try:
        db = cosmos_client.get_database_client(settings.COSMOS_DB_DATABASE)
        container = db.get_container_client(settings.COSMOS_DB_EMPLOYEES_CONTAINER)
        for doc in documents:
            try:
                await container.upsert_item(body=doc)
                succeeded += 1
            except Exception:
                logger.exception("Failed to upsert %s %s — continuing...", doc["firstName"], doc["lastName"])
                failed += 1
    finally:
        await cosmos_client.close()

    logger.info("Seeding complete: %d succeeded, %d failed, %d skipped", succeeded, failed, skipped)


def main() -> None:
    args = parse_args()
    asyncio.run(seed(args))


if __name__ == "__main__":
    main()

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from staffbot.core.dependencies import require_admin
from staffbot.core.errors import BotError, ErrorKind, status_code
from staffbot.models.employee import Employee, EmployeeCreateRequest
from staffbot.services.employee_service import employee_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[Employee])
async def list_employees():
    try:
        return await employee_service.list_employees()
    except BotError as err:
        logger.error("Failed to list employees: %s", err)
        raise HTTPException(
            status_code=status_code(err.kind),
            detail="Failed to retrieve employees",
        ) from err


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(employee_id: str):
    try:
        employee = await employee_service.get_employee(employee_id)
    except BotError as err:
        logger.error("Failed to get employee %s: %s", employee_id, err)
        raise HTTPException(
            status_code=status_code(err.kind),
            detail="Failed to retrieve employee",
        ) from err

    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee with id '{employee_id}' not found",
        )

    return employee


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(
    request: EmployeeCreateRequest,
    admin_id: int = Depends(require_admin),  # noqa: B008
):
    try:
        employee = await employee_service.create_employee(request)
    except BotError as err:
        if err.kind is ErrorKind.VALIDATION:
            raise HTTPException(
                status_code=status_code(err.kind),
                detail={"message": err.message, "errors": err.errors},
            ) from err
        logger.error("Failed to create employee: %s", err)
        raise HTTPException(
            status_code=status_code(err.kind),
            detail="Failed to create employee",
        ) from err

    logger.info("Employee %s created by admin=%s", employee.id, admin_id)
    return employee

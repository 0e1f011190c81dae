"""Employee management endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, status

from hour_bank.api.dependencies import CurrentUser, DbSession, State
from hour_bank.api.errors import domain_errors, store_unavailable
from hour_bank.api.schemas import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeUpdate,
    ErrorResponse,
    RoleChange,
)
from hour_bank.services.employee_service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    db: DbSession,
    state: State,
    user: CurrentUser,
    active_only: Annotated[bool, Query()] = False,
) -> list[EmployeeResponse]:
    """List employees ordered by name."""
    employees = await EmployeeService(db, state=state).list_employees(active_only=active_only)
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}},
)
async def add_employee(
    db: DbSession, state: State, user: CurrentUser, payload: EmployeeCreate
) -> EmployeeResponse:
    with domain_errors():
        service = EmployeeService(db, state=state)
        employee = await service.add_employee(user, **payload.model_dump())
    if employee is None:
        raise store_unavailable()
    return EmployeeResponse.model_validate(employee)


@router.put(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_employee(
    db: DbSession,
    state: State,
    user: CurrentUser,
    employee_id: Annotated[str, Path()],
    payload: EmployeeUpdate,
) -> EmployeeResponse:
    service = EmployeeService(db, state=state)
    with domain_errors():
        ok = await service.update_employee(
            user, employee_id, payload.model_dump(exclude_unset=True)
        )
        if not ok:
            raise store_unavailable()
        employee = await service.get_employee(employee_id)
    return EmployeeResponse.model_validate(employee)


@router.patch(
    "/{employee_id}/role",
    response_model=EmployeeResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def change_role(
    db: DbSession,
    state: State,
    user: CurrentUser,
    employee_id: Annotated[str, Path()],
    payload: RoleChange,
) -> EmployeeResponse:
    """Assign a role. Callers cannot change their own role."""
    service = EmployeeService(db, state=state)
    with domain_errors():
        if not await service.change_role(user, employee_id, payload.role):
            raise store_unavailable()
        employee = await service.get_employee(employee_id)
    return EmployeeResponse.model_validate(employee)


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_employee(
    db: DbSession,
    state: State,
    user: CurrentUser,
    employee_id: Annotated[str, Path()],
) -> None:
    """Remove an employee profile. Their time records are kept."""
    with domain_errors():
        if not await EmployeeService(db, state=state).delete_employee(user, employee_id):
            raise store_unavailable()

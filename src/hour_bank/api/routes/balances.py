"""Balance dashboards and reports."""

from enum import Enum
from typing import Annotated

from fastapi import APIRouter, Query

from hour_bank.api.dependencies import CurrentUser, State
from hour_bank.api.errors import domain_errors
from hour_bank.api.schemas import (
    ConsolidatedRowResponse,
    DashboardResponse,
    ErrorResponse,
    GroupBalanceResponse,
)
from hour_bank.ledger.balance import (
    by_company,
    by_employee,
    by_team,
    consolidated_balances,
    dashboard_stats,
    group_balances,
    overall,
)
from hour_bank.services.access import AccessPolicy

router = APIRouter(prefix="/balances", tags=["balances"])


class GroupBy(str, Enum):
    EMPLOYEE = "employee"
    TEAM = "team"
    COMPANY = "company"
    OVERALL = "overall"


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    state: State,
    user: CurrentUser,
    company: Annotated[str | None, Query()] = None,
    team: Annotated[str | None, Query()] = None,
    employee_id: Annotated[str | None, Query()] = None,
) -> DashboardResponse:
    """Headline balance figures; employees only ever see their own."""
    scope = AccessPolicy.dashboard_scope(user)
    if scope is not None:
        company, team, employee_id = None, None, scope
    await state.ensure_loaded()

    stats = dashboard_stats(state.employees, state.records, company, team, employee_id)
    return DashboardResponse.model_validate(stats)


@router.get(
    "/groups",
    response_model=list[GroupBalanceResponse],
    responses={403: {"model": ErrorResponse}},
)
async def grouped_balances(
    state: State,
    user: CurrentUser,
    by: Annotated[GroupBy, Query()] = GroupBy.EMPLOYEE,
) -> list[GroupBalanceResponse]:
    """Balance per employee, team, company or overall."""
    with domain_errors():
        AccessPolicy.ensure_can_view_reports(user)
    await state.ensure_loaded()

    employees = state.employees_by_id()
    # Inactive employees drop out; records of unknown ids are still reported
    records = [
        r for r in state.records
        if r.employee_id not in employees or employees[r.employee_id].active
    ]
    key = {
        GroupBy.EMPLOYEE: by_employee,
        GroupBy.TEAM: by_team(employees),
        GroupBy.COMPANY: by_company(employees),
        GroupBy.OVERALL: overall,
    }[by]

    groups = group_balances(records, key)
    return [
        GroupBalanceResponse(
            group=name,
            credit_minutes=summary.credit_minutes,
            debit_minutes=summary.debit_minutes,
            net_minutes=summary.net_minutes,
            neutral_count=summary.neutral_count,
            balance=summary.balance,
        )
        for name, summary in sorted(groups.items())
    ]


@router.get(
    "/consolidated",
    response_model=list[ConsolidatedRowResponse],
    responses={403: {"model": ErrorResponse}},
)
async def consolidated(state: State, user: CurrentUser) -> list[ConsolidatedRowResponse]:
    """One row per active employee, sorted by company then name."""
    with domain_errors():
        AccessPolicy.ensure_can_view_reports(user)
    await state.ensure_loaded()

    rows = consolidated_balances(state.employees, state.records)
    return [ConsolidatedRowResponse.model_validate(row) for row in rows]

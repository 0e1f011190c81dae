"""Balance engine: fold time records into signed minute totals.

All functions here are pure. They never mutate the records passed in and
their output does not depend on record order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from hour_bank.ledger.types import RecordType, Timed

UNKNOWN_GROUP = "Desconhecido"
OVERALL_GROUP = "Geral"

GroupKey = Callable[[Any], str]


@dataclass(frozen=True)
class BalanceSummary:
    """Aggregate of one group of records."""

    credit_minutes: int = 0
    debit_minutes: int = 0
    neutral_count: int = 0

    @property
    def net_minutes(self) -> int:
        return self.credit_minutes - self.debit_minutes

    @property
    def balance(self) -> str:
        return format_balance(self.net_minutes)

    def add(self, record: Timed) -> BalanceSummary:
        minutes = record.hours * 60 + record.minutes
        record_type = RecordType(record.type)
        if record_type is RecordType.CREDIT:
            return BalanceSummary(self.credit_minutes + minutes, self.debit_minutes, self.neutral_count)
        if record_type is RecordType.DEBIT:
            return BalanceSummary(self.credit_minutes, self.debit_minutes + minutes, self.neutral_count)
        return BalanceSummary(self.credit_minutes, self.debit_minutes, self.neutral_count + 1)


def format_balance(net_minutes: int) -> str:
    """Render a signed minute total as ``[-]H:MM``."""
    sign = "" if net_minutes >= 0 else "-"
    magnitude = abs(net_minutes)
    return f"{sign}{magnitude // 60}:{magnitude % 60:02d}"


def format_duration(total_minutes: int) -> str:
    """Render a signed minute total in report style, ``[-]Hh MMm``."""
    sign = "-" if total_minutes < 0 else ""
    magnitude = abs(total_minutes)
    return f"{sign}{magnitude // 60}h {magnitude % 60:02d}m"


def summarize(records: Iterable[Timed]) -> BalanceSummary:
    """Fold records into a single summary."""
    summary = BalanceSummary()
    for record in records:
        summary = summary.add(record)
    return summary


def group_balances(records: Iterable[Timed], key: GroupKey) -> dict[str, BalanceSummary]:
    """Fold records into one summary per group key."""
    groups: dict[str, BalanceSummary] = {}
    for record in records:
        group = key(record)
        groups[group] = groups.get(group, BalanceSummary()).add(record)
    return groups


# ============================================================================
# Grouping keys
# ============================================================================


def by_employee(record: Any) -> str:
    return record.employee_id


def overall(record: Any) -> str:
    return OVERALL_GROUP


def by_team(employees: Mapping[str, Any]) -> GroupKey:
    """Group by the owning employee's team."""

    def key(record: Any) -> str:
        employee = employees.get(record.employee_id)
        return employee.team if employee is not None else UNKNOWN_GROUP

    return key


def by_company(employees: Mapping[str, Any]) -> GroupKey:
    """Group by the owning employee's company."""

    def key(record: Any) -> str:
        employee = employees.get(record.employee_id)
        return employee.company if employee is not None else UNKNOWN_GROUP

    return key


# ============================================================================
# Dashboard and report views
# ============================================================================


@dataclass(frozen=True)
class DashboardStats:
    """Headline numbers for a dashboard filter."""

    balance: str
    positive: str
    negative: str
    net_minutes: int
    neutral_count: int
    employee_count: int

    @property
    def is_positive(self) -> bool:
        return self.net_minutes >= 0


@dataclass(frozen=True)
class ConsolidatedRow:
    """Per-employee line of the consolidated balance report."""

    employee_id: str
    name: str
    company: str
    team: str
    role: str
    positive: str
    negative: str
    balance: str
    raw_balance: int


def filter_employees(
    employees: Iterable[Any],
    company: str | None = None,
    team: str | None = None,
) -> list[Any]:
    """Employees matching the optional company/team filter."""
    result = list(employees)
    if company:
        result = [e for e in result if e.company == company]
    if team:
        result = [e for e in result if e.team == team]
    return result


def dashboard_stats(
    employees: Iterable[Any],
    records: Iterable[Any],
    company: str | None = None,
    team: str | None = None,
    employee_id: str | None = None,
) -> DashboardStats:
    """Compute dashboard figures for the records of the filtered employees.

    Records belonging to employees outside the filter (inactive employees
    and unknown employee ids included) are left out before folding, so the
    balance and the headcount describe the same people.
    """
    available = [e for e in filter_employees(employees, company, team) if e.active]
    valid_ids = {e.id for e in available}
    scoped = [r for r in records if r.employee_id in valid_ids]
    if employee_id:
        scoped = [r for r in scoped if r.employee_id == employee_id]

    summary = summarize(scoped)
    employee_count = 1 if employee_id else len(available)

    return DashboardStats(
        balance=summary.balance,
        positive=f"{summary.credit_minutes // 60}h {summary.credit_minutes % 60}m",
        negative=f"{summary.debit_minutes // 60}h {summary.debit_minutes % 60}m",
        net_minutes=summary.net_minutes,
        neutral_count=summary.neutral_count,
        employee_count=employee_count,
    )


def consolidated_balances(
    employees: Iterable[Any], records: Iterable[Any]
) -> list[ConsolidatedRow]:
    """One balance row per active employee, sorted by company then name."""
    per_employee = group_balances(records, by_employee)
    rows = []
    for employee in employees:
        if not employee.active:
            continue
        summary = per_employee.get(employee.id, BalanceSummary())
        rows.append(
            ConsolidatedRow(
                employee_id=employee.id,
                name=employee.name,
                company=employee.company or "N/A",
                team=employee.team,
                role=str(getattr(employee.role, "value", employee.role)),
                positive=format_duration(summary.credit_minutes),
                negative=format_duration(summary.debit_minutes),
                balance=format_duration(summary.net_minutes),
                raw_balance=summary.net_minutes,
            )
        )
    rows.sort(key=lambda row: (row.company, row.name))
    return rows

"""Pydantic schemas for API request/response models."""

import datetime as dt
from dataclasses import asdict
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from hour_bank.ledger.types import AdjustmentRecord, RecordType, Role, record_variant


# ============================================================================
# Auth schemas
# ============================================================================


class LoginRequest(BaseModel):
    """Credentials for ``/auth/login``."""

    email: str
    password: str


class RegisterRequest(BaseModel):
    """New login identity."""

    email: str
    password: str = Field(min_length=6)
    display_name: str | None = None


class CredentialResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uid: str
    email: str
    display_name: str | None = None


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    username: str
    email: str
    role: Role
    team: str
    company: str
    active: bool
    created_at: dt.datetime


class EmployeeCreate(BaseModel):
    """Schema for registering an employee."""

    name: str = Field(min_length=1)
    username: str = Field(min_length=1)
    email: str = ""
    role: Role = Role.EMPLOYEE
    team: str = ""
    company: str = ""
    active: bool = True


class EmployeeUpdate(BaseModel):
    """Profile changes; omitted fields are left untouched."""

    name: str | None = None
    username: str | None = None
    email: str | None = None
    team: str | None = None
    company: str | None = None
    active: bool | None = None


class RoleChange(BaseModel):
    role: Role


# ============================================================================
# Record schemas
# ============================================================================


class RecordResponse(BaseModel):
    """Schema for time record response.

    ``kind`` tells regular, batch and adjustment records apart.
    """

    kind: Literal["regular", "batch", "adjustment"]
    id: str
    employee_id: str
    employee_name: str
    date: dt.date
    hours: int
    minutes: int
    start_time: str | None = None
    end_time: str | None = None
    type: RecordType
    occurrence_type: str
    reason: str
    created_at: dt.datetime
    created_by: str
    batch_id: str | None = None
    status: str | None = None
    is_adjustment: bool = False

    @classmethod
    def from_record(cls, row: Any) -> "RecordResponse":
        variant = record_variant(row)
        return cls(**asdict(variant), is_adjustment=isinstance(variant, AdjustmentRecord))


class RecordListResponse(BaseModel):
    items: list[RecordResponse]
    total: int


class EntryCreate(BaseModel):
    """Single self-service or manual entry.

    Either ``start_time``/``end_time`` or ``hours``/``minutes`` carry the
    duration; times win when both are present.
    """

    employee_id: str
    date: dt.date
    occurrence_type: str
    reason: str = ""
    start_time: str | None = None
    end_time: str | None = None
    hours: int = 0
    minutes: int = 0


class RecordUpdate(BaseModel):
    """Editable record fields; omitted fields keep their current value."""

    date: dt.date | None = None
    occurrence_type: str | None = None
    reason: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    hours: int | None = None
    minutes: int | None = None

    @field_validator("date", "occurrence_type", "reason", "hours", "minutes")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("may be omitted but not set to null")
        return value

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class OccurrenceOptionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    type: str
    regularization: bool


# ============================================================================
# Batch schemas
# ============================================================================


class BatchCreate(BaseModel):
    """One occurrence applied to several employees."""

    employee_ids: list[str]
    date: dt.date
    occurrence_type: str
    reason: str = ""
    hours: int = 0
    minutes: int = 0


class WriteResultResponse(BaseModel):
    """Targeted-versus-affected outcome of a write."""

    batch_id: str | None = None
    targeted: int
    affected: int
    summary: str


# ============================================================================
# Balance schemas
# ============================================================================


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    balance: str
    positive: str
    negative: str
    net_minutes: int
    neutral_count: int
    employee_count: int
    is_positive: bool


class GroupBalanceResponse(BaseModel):
    group: str
    credit_minutes: int
    debit_minutes: int
    net_minutes: int
    neutral_count: int
    balance: str


class ConsolidatedRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    name: str
    company: str
    team: str
    role: str
    positive: str
    negative: str
    balance: str
    raw_balance: int


# ============================================================================
# Picklist schemas
# ============================================================================


class SettingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    kind: str
    name: str


class SettingWrite(BaseModel):
    name: str = Field(min_length=1)


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: Any
    code: str | None = None

"""Employee profile and login credential models."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from hour_bank.models.base import Base, TimestampMixin


def _new_id() -> str:
    return str(uuid4())


class Employee(Base, TimestampMixin):
    """Employee profile.

    Employees are referenced by id from time records; removing an employee
    leaves their historical records in place.
    """

    __tablename__ = "employee"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String, nullable=False)
    username: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, default="")
    role: Mapped[str] = mapped_column(String, nullable=False, default="EMPLOYEE")
    team: Mapped[str] = mapped_column(String, nullable=False, default="")
    company: Mapped[str] = mapped_column(String, nullable=False, default="")
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "role IN ('ADMIN', 'LEADER', 'EMPLOYEE')",
            name="employee_role_check",
        ),
    )


class Credential(Base, TimestampMixin):
    """Login identity kept apart from the employee profile."""

    __tablename__ = "credential"

    uid: Mapped[str] = mapped_column(String(64), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    display_name: Mapped[str | None] = mapped_column(String, nullable=True)

"""SQLAlchemy ORM models for the hour bank."""

from hour_bank.models.base import Base, TimestampMixin
from hour_bank.models.employee import Credential, Employee
from hour_bank.models.settings import AppSetting
from hour_bank.models.time_record import PER_RECORD_FIELDS, SHARED_FIELDS, TimeRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "Credential",
    "Employee",
    "AppSetting",
    "TimeRecord",
    "PER_RECORD_FIELDS",
    "SHARED_FIELDS",
]

"""Hour bank services."""

from hour_bank.services.access import AccessPolicy, PermissionDeniedError
from hour_bank.services.app_state import AppState
from hour_bank.services.auth_service import (
    AuthError,
    AuthResult,
    AuthService,
    LoginThrottle,
    ReservedIdentityError,
)
from hour_bank.services.batch_service import BatchResult, BatchService
from hour_bank.services.employee_service import EmployeeService
from hour_bank.services.record_service import RecordNotFoundError, RecordService, WriteResult
from hour_bank.services.record_store import RecordStore, WriteKind, WriteOp
from hour_bank.services.settings_service import SettingKind, SettingsService

__all__ = [
    "AccessPolicy",
    "PermissionDeniedError",
    "AppState",
    "AuthError",
    "AuthResult",
    "AuthService",
    "LoginThrottle",
    "ReservedIdentityError",
    "BatchResult",
    "BatchService",
    "EmployeeService",
    "RecordNotFoundError",
    "RecordService",
    "WriteResult",
    "RecordStore",
    "WriteKind",
    "WriteOp",
    "SettingKind",
    "SettingsService",
]

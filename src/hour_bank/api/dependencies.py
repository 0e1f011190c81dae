"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hour_bank.database import get_session
from hour_bank.models import Employee
from hour_bank.services.app_state import AppState
from hour_bank.services.record_store import RecordStore


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with get_session() as session:
        yield session


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_current_user(
    db: DbSession,
    x_employee_id: Annotated[str | None, Header()] = None,
) -> Employee:
    """Resolve the calling employee from the X-Employee-ID header."""
    if not x_employee_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Employee-ID header is required",
        )
    employee = await db.get(Employee, x_employee_id)
    if employee is None or not employee.active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown or inactive employee",
        )
    return employee


async def get_app_state(db: DbSession) -> AppState:
    """Request-scoped state, shared by the services and read views of one request.

    It is loaded on first read and re-fetched after every confirmed write.
    """
    return AppState(RecordStore(db))


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[Employee, Depends(get_current_user)]
State = Annotated[AppState, Depends(get_app_state)]

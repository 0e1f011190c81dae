"""Pytest fixtures for hour bank tests."""

from __future__ import annotations

from datetime import date
from typing import AsyncGenerator
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from hour_bank.ledger.types import Role
from hour_bank.models import Base, Employee, TimeRecord
from hour_bank.services.record_store import RecordStore

ENTRY_DATE = date(2024, 3, 11)


@pytest.fixture
async def engine(tmp_path):
    """Create a throwaway SQLite database per test."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'hour_bank.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session: AsyncSession) -> RecordStore:
    return RecordStore(session, chunk_size=500)


async def _add_employee(
    session: AsyncSession,
    name: str,
    role: Role = Role.EMPLOYEE,
    team: str = "Produção",
    company: str = "Arca Plast",
    active: bool = True,
) -> Employee:
    """Persist an employee profile."""
    username = name.lower().replace(" ", ".")
    employee = Employee(
        id=str(uuid4()),
        name=name,
        username=username,
        email=f"{username}@arcaplast.com.br",
        role=role.value,
        team=team,
        company=company,
        active=active,
    )
    session.add(employee)
    await session.commit()
    return employee


async def _add_record(
    session: AsyncSession,
    employee: Employee,
    author: Employee,
    type: str = "CREDIT",
    hours: int = 1,
    minutes: int = 0,
    occurrence_type: str = "BH Positivo",
    batch_id: str | None = None,
    record_date: date = ENTRY_DATE,
) -> TimeRecord:
    """Persist a record directly, bypassing entry validation."""
    record = TimeRecord(
        id=str(uuid4()),
        employee_id=employee.id,
        employee_name=employee.name,
        date=record_date,
        hours=hours,
        minutes=minutes,
        type=type,
        occurrence_type=occurrence_type,
        reason="Test",
        created_by=author.id,
        batch_id=batch_id,
    )
    session.add(record)
    await session.commit()
    return record


@pytest.fixture
async def admin(session: AsyncSession) -> Employee:
    return await _add_employee(session, "Ana Admin", Role.ADMIN, team="RH")


@pytest.fixture
async def leader(session: AsyncSession) -> Employee:
    return await _add_employee(session, "Lucas Lider", Role.LEADER)


@pytest.fixture
async def employee(session: AsyncSession) -> Employee:
    return await _add_employee(session, "Bruno Silva")


@pytest.fixture
async def other_employee(session: AsyncSession) -> Employee:
    return await _add_employee(session, "Carla Souza", team="Logística", company="Arca Log")


@pytest.fixture
def make_employee(session: AsyncSession):
    """Factory for extra employee profiles."""

    async def factory(name: str, role: Role = Role.EMPLOYEE, **kwargs) -> Employee:
        return await _add_employee(session, name, role, **kwargs)

    return factory


@pytest.fixture
def make_record(session: AsyncSession):
    """Factory for records stored without going through entry validation."""

    async def factory(employee: Employee, author: Employee, **kwargs) -> TimeRecord:
        return await _add_record(session, employee, author, **kwargs)

    return factory

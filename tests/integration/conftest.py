"""API test fixtures: the app wired to the per-test database."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from hour_bank.api.app import create_app
from hour_bank.api.dependencies import get_db_session
from hour_bank.models import Employee


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests use the test database."""
    app = create_app()

    async def override_db_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        yield client


def as_user(employee: Employee) -> dict[str, str]:
    return {"X-Employee-ID": employee.id}


@pytest.fixture
def headers():
    """Build the identity header for an employee."""
    return as_user

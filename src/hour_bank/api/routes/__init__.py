"""API routes."""

from hour_bank.api.routes.auth import router as auth_router
from hour_bank.api.routes.balances import router as balances_router
from hour_bank.api.routes.batches import router as batches_router
from hour_bank.api.routes.employees import router as employees_router
from hour_bank.api.routes.health import router as health_router
from hour_bank.api.routes.records import router as records_router
from hour_bank.api.routes.settings import router as settings_router

__all__ = [
    "auth_router",
    "balances_router",
    "batches_router",
    "employees_router",
    "health_router",
    "records_router",
    "settings_router",
]

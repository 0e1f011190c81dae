"""Create the super-admin login and seed the picklists.

Usage:
    python -m hour_bank.bootstrap --password SECRET [--name NAME]

The super-admin e-mail (SUPER_ADMIN_EMAIL) cannot be registered through
the open ``/auth/register`` endpoint; this script is how an operator
creates it. Its first login is provisioned as ADMIN.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from sqlalchemy.ext.asyncio import AsyncSession

from hour_bank.config import get_settings
from hour_bank.database import create_schema, dispose_db, get_session, init_db
from hour_bank.models import Employee
from hour_bank.services.auth_service import AuthService
from hour_bank.services.settings_service import SettingsService

logger = logging.getLogger(__name__)


async def bootstrap(
    session: AsyncSession, password: str, name: str | None = None
) -> Employee | None:
    """Register the super-admin identity and provision its ADMIN profile.

    Returns None if the identity already exists or could not be saved.
    """
    auth = AuthService(session)
    credential = await auth.register_identity(
        auth.settings.super_admin_email, password, name, allow_reserved=True
    )
    if credential is None:
        return None
    profile = await auth.get_or_create_profile(credential)
    await SettingsService(session).seed_defaults()
    return profile


async def _run(args: argparse.Namespace) -> int:
    settings = get_settings()
    init_db()
    try:
        if settings.auto_create_schema:
            await create_schema()
        async with get_session() as session:
            profile = await bootstrap(session, args.password, args.name)
    finally:
        await dispose_db()

    if profile is None:
        print(f"Error: {settings.super_admin_email} is already registered or could not be saved")
        return 1
    print(f"Created {profile.role} profile {profile.id} for {profile.email}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Create the super-admin login and seed the picklists"
    )
    parser.add_argument("--password", required=True, help="Password for the super-admin login")
    parser.add_argument("--name", default=None, help="Display name of the super-admin")
    args = parser.parse_args()

    if len(args.password) < 6:
        parser.error("password must be at least 6 characters")

    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())

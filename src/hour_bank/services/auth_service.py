"""Authentication and profile provisioning."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from uuid import uuid4

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hour_bank.config import get_settings
from hour_bank.ledger.types import Role
from hour_bank.models import Credential, Employee
from hour_bank.services.record_store import RecordStore

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

DEFAULT_TEAM = "Geral"
DEFAULT_COMPANY = "Arca Plast"
DEFAULT_NAME = "Colaborador"


class AuthError(str, Enum):
    """Reasons an authentication attempt fails."""

    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    TOO_MANY_ATTEMPTS = "TOO_MANY_ATTEMPTS"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


AUTH_ERROR_MESSAGES = {
    AuthError.INVALID_CREDENTIALS: "Invalid e-mail or password.",
    AuthError.TOO_MANY_ATTEMPTS: "Too many attempts. Try again later.",
    AuthError.STORE_UNAVAILABLE: "Connection error. Check your network and try again.",
}


@dataclass(frozen=True)
class AuthResult:
    """Outcome of ``authenticate``."""

    success: bool
    profile: Employee | None = None
    error: AuthError | None = None

    @property
    def message(self) -> str | None:
        return AUTH_ERROR_MESSAGES[self.error] if self.error else None


class ReservedIdentityError(Exception):
    """Raised when an open registration targets the super-admin e-mail."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"E-mail '{email}' is reserved and cannot be self-registered")


class LoginThrottle:
    """Counts failed logins per e-mail inside a sliding lockout window.

    Once ``max_attempts`` failures fall inside the window the e-mail is
    blocked until the oldest of them ages out. Expired entries are evicted
    on every check.
    """

    def __init__(
        self,
        max_attempts: int,
        window_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock
        self._failures: dict[str, list[float]] = {}
        self._lock = threading.Lock()

    def blocked(self, email: str) -> bool:
        with self._lock:
            self._evict()
            return len(self._failures.get(email, ())) >= self.max_attempts

    def record_failure(self, email: str) -> None:
        with self._lock:
            self._evict()
            self._failures.setdefault(email, []).append(self._clock())

    def reset(self, email: str) -> None:
        with self._lock:
            self._failures.pop(email, None)

    def __len__(self) -> int:
        with self._lock:
            self._evict()
            return len(self._failures)

    def _evict(self) -> None:
        cutoff = self._clock() - self.window_seconds
        for email in list(self._failures):
            recent = [t for t in self._failures[email] if t > cutoff]
            if recent:
                self._failures[email] = recent
            else:
                del self._failures[email]


_throttle: LoginThrottle | None = None


def get_throttle() -> LoginThrottle:
    """Process-wide login throttle."""
    global _throttle
    if _throttle is None:
        settings = get_settings()
        _throttle = LoginThrottle(settings.max_login_attempts, settings.login_lockout_seconds)
    return _throttle


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


class AuthService:
    """Verifies credentials and resolves the caller's employee profile."""

    def __init__(
        self,
        session: AsyncSession,
        store: RecordStore | None = None,
        throttle: LoginThrottle | None = None,
    ):
        self.session = session
        self.store = store or RecordStore(session)
        self.throttle = throttle or get_throttle()
        self.settings = get_settings()

    async def register_identity(
        self,
        email: str,
        password: str,
        display_name: str | None = None,
        allow_reserved: bool = False,
    ) -> Credential | None:
        """Create a login identity. Returns None if the e-mail is taken or the write fails.

        The super-admin e-mail is promoted to ADMIN on first login, so it
        can only be registered by an operator (``allow_reserved=True``,
        see ``hour_bank.bootstrap``). Open registration raises
        ``ReservedIdentityError`` for it.
        """
        email = email.strip().lower()
        if email == self.settings.super_admin_email and not allow_reserved:
            logger.warning("Refused open registration of reserved e-mail %s", email)
            raise ReservedIdentityError(email)
        if await self._find_credential(email) is not None:
            return None
        credential = Credential(
            uid=str(uuid4()),
            email=email,
            password_hash=hash_password(password),
            display_name=display_name,
        )
        if not await self.store.set(credential):
            return None
        return await self._find_credential(email)

    async def authenticate(self, email: str, password: str) -> AuthResult:
        """Check credentials and return the (possibly new) profile."""
        email = email.strip().lower()
        if self.throttle.blocked(email):
            logger.warning("Login throttled for %s", email)
            return AuthResult(success=False, error=AuthError.TOO_MANY_ATTEMPTS)

        try:
            credential = await self._find_credential(email)
            if credential is None or not verify_password(password, credential.password_hash):
                self.throttle.record_failure(email)
                return AuthResult(success=False, error=AuthError.INVALID_CREDENTIALS)
            profile = await self.get_or_create_profile(credential)
        except SQLAlchemyError:
            logger.exception("Login failed for %s", email)
            await self.session.rollback()
            return AuthResult(success=False, error=AuthError.STORE_UNAVAILABLE)

        self.throttle.reset(email)
        return AuthResult(success=True, profile=profile)

    async def get_or_create_profile(
        self, credential: Credential, name: str | None = None
    ) -> Employee:
        """Load the profile for an identity, provisioning it on first sign-in.

        The configured super-admin e-mail is provisioned as ADMIN; everyone
        else starts as EMPLOYEE.
        """
        existing = await self.store.get(Employee, credential.uid)
        if existing is not None:
            return existing

        email = (credential.email or "").lower()
        is_super_admin = email == self.settings.super_admin_email
        profile = Employee(
            id=credential.uid,
            name=name or credential.display_name or DEFAULT_NAME,
            email=email,
            username=email.split("@")[0],
            role=(Role.ADMIN if is_super_admin else Role.EMPLOYEE).value,
            team=DEFAULT_TEAM,
            company=DEFAULT_COMPANY,
            active=True,
        )
        self.session.add(profile)
        await self.session.commit()
        logger.info("Provisioned %s profile for %s", profile.role, email)
        return profile

    async def _find_credential(self, email: str) -> Credential | None:
        result = await self.session.execute(select(Credential).where(Credential.email == email))
        return result.scalar_one_or_none()

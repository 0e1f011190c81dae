"""Login and identity registration."""

from fastapi import APIRouter, HTTPException, status

from hour_bank.api.dependencies import CurrentUser, DbSession
from hour_bank.api.schemas import (
    CredentialResponse,
    EmployeeResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
)
from hour_bank.services.auth_service import AuthError, AuthService, ReservedIdentityError

router = APIRouter(tags=["auth"])

_FAILURE_STATUS = {
    AuthError.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    AuthError.TOO_MANY_ATTEMPTS: status.HTTP_429_TOO_MANY_REQUESTS,
    AuthError.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


@router.post(
    "/auth/login",
    response_model=EmployeeResponse,
    responses={401: {"model": ErrorResponse}, 429: {"model": ErrorResponse}},
)
async def login(db: DbSession, payload: LoginRequest) -> EmployeeResponse:
    """Authenticate and return the caller's profile, provisioning it on first login."""
    result = await AuthService(db).authenticate(payload.email, payload.password)
    if not result.success:
        raise HTTPException(status_code=_FAILURE_STATUS[result.error], detail=result.message)
    return EmployeeResponse.model_validate(result.profile)


@router.post(
    "/auth/register",
    response_model=CredentialResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def register(db: DbSession, payload: RegisterRequest) -> CredentialResponse:
    """Create a login identity. The profile is created on first login."""
    try:
        credential = await AuthService(db).register_identity(
            payload.email, payload.password, payload.display_name
        )
    except ReservedIdentityError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    if credential is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="E-mail is already registered",
        )
    return CredentialResponse.model_validate(credential)


@router.get("/api/v1/me", response_model=EmployeeResponse)
async def me(user: CurrentUser) -> EmployeeResponse:
    """Profile of the calling employee."""
    return EmployeeResponse.model_validate(user)

"""Company and team picklist endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from hour_bank.api.dependencies import CurrentUser, DbSession, State
from hour_bank.api.errors import domain_errors, store_unavailable
from hour_bank.api.schemas import ErrorResponse, SettingResponse, SettingWrite
from hour_bank.services.settings_service import SettingKind, SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/{kind}", response_model=list[SettingResponse])
async def list_settings(
    db: DbSession, state: State, user: CurrentUser, kind: Annotated[SettingKind, Path()]
) -> list[SettingResponse]:
    settings = await SettingsService(db, state=state).list_settings(kind)
    return [SettingResponse.model_validate(s) for s in settings]


@router.post(
    "/{kind}",
    response_model=SettingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}},
)
async def add_setting(
    db: DbSession,
    state: State,
    user: CurrentUser,
    kind: Annotated[SettingKind, Path()],
    payload: SettingWrite,
) -> SettingResponse:
    with domain_errors():
        setting = await SettingsService(db, state=state).add_setting(user, kind, payload.name)
    if setting is None:
        raise store_unavailable()
    return SettingResponse.model_validate(setting)


@router.put(
    "/{kind}/{setting_id}",
    response_model=SettingResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def rename_setting(
    db: DbSession,
    state: State,
    user: CurrentUser,
    kind: Annotated[SettingKind, Path()],
    setting_id: Annotated[str, Path()],
    payload: SettingWrite,
) -> SettingResponse:
    service = SettingsService(db, state=state)
    with domain_errors():
        if not await service.rename_setting(user, kind, setting_id, payload.name):
            raise store_unavailable()
    return SettingResponse(id=setting_id, kind=kind.value, name=payload.name.strip())


@router.delete(
    "/{kind}/{setting_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_setting(
    db: DbSession,
    state: State,
    user: CurrentUser,
    kind: Annotated[SettingKind, Path()],
    setting_id: Annotated[str, Path()],
) -> None:
    with domain_errors():
        if not await SettingsService(db, state=state).delete_setting(user, kind, setting_id):
            raise store_unavailable()

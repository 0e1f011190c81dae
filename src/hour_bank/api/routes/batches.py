"""Bulk entry endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Response, status

from hour_bank.api.dependencies import CurrentUser, DbSession, State
from hour_bank.api.errors import domain_errors
from hour_bank.api.routes.records import write_response
from hour_bank.api.schemas import (
    BatchCreate,
    ErrorResponse,
    RecordResponse,
    RecordUpdate,
    WriteResultResponse,
)
from hour_bank.services.record_service import RecordService, WriteResult

router = APIRouter(prefix="/batches", tags=["batches"])

_PARTIAL = {207: {"model": WriteResultResponse}}


@router.post(
    "",
    response_model=WriteResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_PARTIAL, 403: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_batch(
    db: DbSession, state: State, user: CurrentUser, payload: BatchCreate, response: Response
) -> WriteResultResponse:
    """Apply one occurrence to every selected employee."""
    with domain_errors():
        result = await RecordService(db, state=state).create_bulk(user, **payload.model_dump())
    return write_response(WriteResult.from_batch(result), response)


@router.get(
    "/{batch_id}",
    response_model=list[RecordResponse],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_batch(
    db: DbSession, user: CurrentUser, batch_id: Annotated[str, Path()]
) -> list[RecordResponse]:
    """Every record of a batch, ordered by employee name."""
    with domain_errors():
        records = await RecordService(db).get_batch(user, batch_id)
    return [RecordResponse.from_record(r) for r in records]


@router.patch(
    "/{batch_id}",
    response_model=WriteResultResponse,
    responses={**_PARTIAL, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_batch(
    db: DbSession,
    state: State,
    user: CurrentUser,
    batch_id: Annotated[str, Path()],
    payload: RecordUpdate,
    response: Response,
) -> WriteResultResponse:
    with domain_errors():
        service = RecordService(db, state=state)
        result = await service.update_batch(user, batch_id, payload.changes())
    return write_response(result, response)


@router.delete(
    "/{batch_id}",
    response_model=WriteResultResponse,
    responses={**_PARTIAL, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_batch(
    db: DbSession,
    state: State,
    user: CurrentUser,
    batch_id: Annotated[str, Path()],
    response: Response,
) -> WriteResultResponse:
    with domain_errors():
        result = await RecordService(db, state=state).delete_batch(user, batch_id)
    return write_response(result, response)

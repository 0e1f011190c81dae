"""Time record endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status

from hour_bank.api.dependencies import CurrentUser, DbSession, State
from hour_bank.api.errors import domain_errors, store_unavailable
from hour_bank.api.schemas import (
    EntryCreate,
    ErrorResponse,
    OccurrenceOptionResponse,
    RecordListResponse,
    RecordResponse,
    RecordUpdate,
    WriteResultResponse,
)
from hour_bank.ledger.classification import options_for
from hour_bank.ledger.types import EntryDraft, EntryFlow
from hour_bank.models import Employee
from hour_bank.services.access import AccessPolicy
from hour_bank.services.record_service import RecordService, WriteResult

router = APIRouter(prefix="/records", tags=["records"])


def write_response(result: WriteResult, response: Response) -> WriteResultResponse:
    """Shape a write outcome; a batch that fell short answers 207."""
    if not result.success:
        if result.batch_id is None:
            raise store_unavailable()
        response.status_code = status.HTTP_207_MULTI_STATUS
    return WriteResultResponse(
        batch_id=result.batch_id,
        targeted=result.targeted,
        affected=result.affected,
        summary=result.summary,
    )


async def _create(
    db: DbSession, state: State, user: Employee, flow: EntryFlow, payload: EntryCreate
) -> RecordResponse:
    draft = EntryDraft(**payload.model_dump())
    with domain_errors():
        record = await RecordService(db, state=state).create_entry(user, flow, draft)
    if record is None:
        raise store_unavailable()
    return RecordResponse.from_record(record)


@router.get("", response_model=RecordListResponse)
async def list_records(db: DbSession, state: State, user: CurrentUser) -> RecordListResponse:
    """Records the caller may browse, newest first."""
    records = await RecordService(db, state=state).list_visible(user)
    return RecordListResponse(
        items=[RecordResponse.from_record(r) for r in records],
        total=len(records),
    )


@router.get("/occurrence-types", response_model=list[OccurrenceOptionResponse])
async def list_occurrence_types(
    user: CurrentUser,
    flow: Annotated[EntryFlow, Query()] = EntryFlow.SELF_SERVICE,
) -> list[OccurrenceOptionResponse]:
    """Labels offered by an entry flow, in display order."""
    return [
        OccurrenceOptionResponse(
            label=o.label, type=o.type.value, regularization=o.regularization
        )
        for o in options_for(flow)
    ]


@router.get(
    "/{record_id}",
    response_model=RecordResponse,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_record(
    db: DbSession, user: CurrentUser, record_id: Annotated[str, Path()]
) -> RecordResponse:
    with domain_errors():
        record = await RecordService(db).get_record(record_id)
        AccessPolicy.ensure_can_view(user, record)
    return RecordResponse.from_record(record)


@router.post(
    "/self-service",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_self_service_entry(
    db: DbSession, state: State, user: CurrentUser, payload: EntryCreate
) -> RecordResponse:
    """Register an occurrence through the self-service form."""
    return await _create(db, state, user, EntryFlow.SELF_SERVICE, payload)


@router.post(
    "/manual",
    response_model=RecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_manual_entry(
    db: DbSession, state: State, user: CurrentUser, payload: EntryCreate
) -> RecordResponse:
    """HR manual entry."""
    return await _create(db, state, user, EntryFlow.MANUAL, payload)


@router.patch(
    "/{record_id}",
    response_model=WriteResultResponse,
    responses={
        207: {"model": WriteResultResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_record(
    db: DbSession,
    state: State,
    user: CurrentUser,
    record_id: Annotated[str, Path()],
    payload: RecordUpdate,
    response: Response,
) -> WriteResultResponse:
    """Edit a record. Edits to a batch member apply to the whole batch."""
    with domain_errors():
        service = RecordService(db, state=state)
        result = await service.update_record(user, record_id, payload.changes())
    return write_response(result, response)


@router.delete(
    "/{record_id}",
    response_model=WriteResultResponse,
    responses={
        207: {"model": WriteResultResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def delete_record(
    db: DbSession,
    state: State,
    user: CurrentUser,
    record_id: Annotated[str, Path()],
    response: Response,
) -> WriteResultResponse:
    """Delete a record. Deleting a batch member removes the whole batch."""
    with domain_errors():
        result = await RecordService(db, state=state).delete_record(user, record_id)
    return write_response(result, response)

"""Translate domain errors raised by services into HTTP errors."""

from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from hour_bank.ledger.classification import UnknownOccurrenceError
from hour_bank.ledger.entries import EntryValidationError
from hour_bank.services.access import PermissionDeniedError
from hour_bank.services.record_service import RecordNotFoundError


@contextmanager
def domain_errors() -> Iterator[None]:
    """Map service exceptions to the matching HTTP status."""
    try:
        yield
    except PermissionDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except RecordNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except EntryValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.errors
        )
    except UnknownOccurrenceError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=[str(e)]
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def store_unavailable() -> HTTPException:
    """Error for a single-record write the store did not confirm."""
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="The change could not be saved. Check your connection and try again.",
    )

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

error_logger = logging.getLogger("medtrack.errors")


class TrackerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_content(self) -> dict:
        return {"detail": self.message}


class ValidationError(TrackerError):
    status_code = 400


class NotFoundError(TrackerError):
    status_code = 404


class NotFoundOrConflictError(TrackerError):
    """Archive/reactivate matched no row: missing, or already in the target state."""

    status_code = 404


class ForbiddenError(TrackerError):
    status_code = 403

    def __init__(self, message: str, date: str):
        super().__init__(message)
        self.date = date

    def to_content(self) -> dict:
        return {"detail": self.message, "date": self.date}


class StorageError(TrackerError):
    status_code = 500


@contextmanager
def unit_of_work(db: Session, failure: str, commit: bool = True):
    """
    Run the block as one transaction and commit it (reads pass commit=False).

    Any error rolls the whole block back; database errors surface as
    StorageError(failure), domain errors are re-raised unchanged.
    """
    try:
        yield
        if commit:
            db.commit()
    except TrackerError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        error_logger.error("%s: %s", failure, exc)
        raise StorageError(failure) from exc

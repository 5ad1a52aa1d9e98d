"""
Service-level errors and data store failure mapping.

Services raise these; the HTTP layer turns them into responses.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    code = "service_error"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code}


class DuplicateEmailError(ServiceError):
    code = "duplicate_email"
    status_code = 409
    default_message = "Email is already registered"


class NotFoundError(ServiceError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class ForbiddenError(ServiceError):
    # Ownership mismatches are reported as NotFoundError instead.
    code = "forbidden"
    status_code = 403
    default_message = "Forbidden"


class InvalidCredentialsError(ServiceError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Current password is incorrect"


class StoreError(ServiceError):
    code = "store_error"
    status_code = 500
    default_message = "Data store error"


@contextmanager
def store_errors(db: Session, on_integrity: type[ServiceError] = StoreError):
    """Roll back and translate SQLAlchemy failures raised inside the block."""
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Constraint violation: %s", exc.orig)
        raise on_integrity() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Data store call failed")
        raise StoreError() from exc

import logging
from enum import Enum

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_PAYLOAD = "INVALID_PAYLOAD"


class LedgerError(BaseModel):
    kind: ErrorKind
    message: str


class PointsLedgerError(Exception):
    kind: ErrorKind = ErrorKind.INVALID_PAYLOAD

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_error(self) -> LedgerError:
        return LedgerError(kind=self.kind, message=self.message)


class NotFoundError(PointsLedgerError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(PointsLedgerError):
    kind = ErrorKind.CONFLICT


class UnauthorizedError(PointsLedgerError):
    kind = ErrorKind.UNAUTHORIZED


class InvalidPayloadError(PointsLedgerError):
    kind = ErrorKind.INVALID_PAYLOAD


ERRORS_BY_KIND = {
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.CONFLICT: ConflictError,
    ErrorKind.UNAUTHORIZED: UnauthorizedError,
    ErrorKind.INVALID_PAYLOAD: InvalidPayloadError,
}

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


def handle_error(error: Exception) -> LedgerError:
    """Convert anything raised inside an operation into a LedgerError.

    Known ledger errors keep their kind and message. Everything else is
    logged with its traceback and reported as INVALID_PAYLOAD.
    """
    if isinstance(error, PointsLedgerError):
        return error.to_error()
    logger.exception(f"Unexpected error in ledger operation: {error!r}", exc_info=error)
    return LedgerError(kind=ErrorKind.INVALID_PAYLOAD, message=UNKNOWN_ERROR_MESSAGE)

"""Heatmap Viewer — Error Taxonomy & Backend Failure Classification.

Every failure coming out of a storage backend is mapped exactly once, at the
gateway boundary, onto one of the errors below. The classification works on a
backend-neutral (code, message) pair so it can be tested without a database.
"""

import asyncio
from typing import NamedTuple, Optional

from sqlalchemy import exc as sa_exc


class HeatmapError(Exception):
    """Base class for errors surfaced to API callers."""

    def __init__(self, message: str, code: str = ""):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(HeatmapError):
    """Requested (filename, sheet) has no stored content."""


class ValidationError(HeatmapError):
    """Unsupported file type or missing payload on upload."""


class TransientBackendError(HeatmapError):
    """Backend failure that is worth retrying (timeout, lost connection, internal error)."""


class FatalBackendError(HeatmapError):
    """Any other backend failure."""


# SQLSTATE codes treated as transient
RETRYABLE_CODES = frozenset(
    {
        "XX000",  # internal_error
        "57014",  # query_canceled (statement_timeout)
        "57P01",  # admin_shutdown
        "08000",  # connection_exception
        "08003",  # connection_does_not_exist
        "08006",  # connection_failure
    }
)

RETRYABLE_MESSAGE_MARKERS = (
    "timeout",
    "timed out",
    "terminated",
    "closed the connection",
    "connection refused",
)


class BackendFailure(NamedTuple):
    """Backend-neutral view of an exception."""

    code: str
    message: str


def _sqlstate(error: object) -> Optional[str]:
    """Pull a SQLSTATE out of a DBAPI exception (psycopg2 / psycopg 3)."""
    for attr in ("pgcode", "sqlstate"):
        value = getattr(error, attr, None)
        if value:
            return str(value)
    return None


def describe_error(error: BaseException) -> BackendFailure:
    """Reduce any backend exception to a (code, message) pair."""
    if isinstance(error, sa_exc.DBAPIError) and error.orig is not None:
        code = _sqlstate(error.orig) or ""
        return BackendFailure(code, str(error.orig))
    code = _sqlstate(error)
    if code is None and isinstance(getattr(error, "code", None), str):
        # SQLAlchemy's own "code" is a docs link id, not a backend code
        if not isinstance(error, sa_exc.SQLAlchemyError):
            code = error.code  # type: ignore[attr-defined]
    message = str(error) or type(error).__name__
    return BackendFailure(code or "", message)


def is_retryable(failure: BackendFailure) -> bool:
    """Decide whether a described failure is transient."""
    if failure.code.upper() in RETRYABLE_CODES:
        return True
    message = failure.message.lower()
    return any(marker in message for marker in RETRYABLE_MESSAGE_MARKERS)


def classify_error(error: BaseException) -> HeatmapError:
    """Map an exception onto the error taxonomy.

    Errors that are already part of the taxonomy pass through unchanged.
    """
    if isinstance(error, HeatmapError):
        return error

    failure = describe_error(error)
    # SQLAlchemy flags driver errors that dropped the connection
    disconnected = isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated
    transient = (
        disconnected
        or is_retryable(failure)
        or isinstance(
            error, (asyncio.TimeoutError, TimeoutError, ConnectionError, sa_exc.TimeoutError)
        )
    )
    if transient:
        return TransientBackendError(failure.message, failure.code)
    return FatalBackendError(failure.message, failure.code)

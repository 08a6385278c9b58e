"""
Custom exceptions for the persistence layer.
"""

from sqlalchemy.exc import DBAPIError, IntegrityError, InterfaceError, OperationalError, SQLAlchemyError

from school_api.enums import StoreErrorKind

__all__ = ["StoreError", "classify_store_error"]


class StoreError(Exception):
    """Raised for any failed statement against the record store."""

    def __init__(self, kind: StoreErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind

    def __str__(self) -> str:
        return f"[{self.kind.value}] {super().__str__()}"


def classify_store_error(exc: SQLAlchemyError) -> StoreErrorKind:
    if isinstance(exc, IntegrityError):
        return StoreErrorKind.CONSTRAINT_VIOLATION
    if isinstance(exc, (OperationalError, InterfaceError)):
        return StoreErrorKind.CONNECTIVITY
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return StoreErrorKind.CONNECTIVITY
    return StoreErrorKind.QUERY

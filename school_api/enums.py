"""Shared enums for the school records API.

This module defines the record types and status values used across the codebase.
Using enums instead of string literals provides type safety and prevents typos.
"""

from enum import StrEnum

__all__ = ["RecordType", "RequestStatus", "StoreErrorKind", "RecordOperation"]


class RecordType(StrEnum):
    """Record types exposed by the API, one table each."""

    STUDENT = "student"
    TEACHER = "teacher"

    @property
    def label(self) -> str:
        """Capitalised name used in response messages, e.g. 'Student'."""
        return self.value.capitalize()

    @property
    def plural(self) -> str:
        return f"{self.value}s"


class RecordOperation(StrEnum):
    LIST = "list"
    CREATE = "create"
    DELETE = "delete"


class RequestStatus(StrEnum):
    """Request status values for metrics and logging."""

    SUCCESS = "success"
    ERROR = "error"


class StoreErrorKind(StrEnum):
    """Closed set of store failure kinds."""

    CONSTRAINT_VIOLATION = "constraint_violation"
    CONNECTIVITY = "connectivity"
    QUERY = "query"

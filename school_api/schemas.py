"""Pydantic schemas for request/response validation in the school records API.

Schema Hierarchy
=================
::
    StudentCreate (Input)          TeacherCreate (Input)
    ├─ name: str | None            ├─ name: str | None
    ├─ rollNo: str | None          ├─ subject: str | None
    └─ class: str | None           └─ class: str | None

    StudentRecord (Output)         TeacherRecord (Output)
    ├─ id: int                     ├─ id: int
    ├─ name: str | None            ├─ name: str | None
    ├─ roll_number: str | None     ├─ subject: str | None
    └─ class: str | None           └─ class: str | None

    MessageResponse   {"message": str}
    ErrorResponse     {"error": str}
    HealthResponse    {"status": str}

Key Behaviours
===============
- ``class`` is a keyword, so the Python attribute is ``class_`` with a wire alias.
- Create payloads convert to column dicts with ``to_columns()``.
- Missing create fields are stored as NULL rather than rejected.
- Output models are serialized by alias, matching the table column names.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "StudentCreate",
    "TeacherCreate",
    "StudentRecord",
    "TeacherRecord",
    "MessageResponse",
    "ErrorResponse",
    "HealthResponse",
]


class StudentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    roll_number: str | None = Field(None, alias="rollNo")
    class_: str | None = Field(None, alias="class")

    def to_columns(self) -> dict[str, Any]:
        return {"name": self.name, "roll_number": self.roll_number, "class": self.class_}


class TeacherCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    subject: str | None = None
    class_: str | None = Field(None, alias="class")

    def to_columns(self) -> dict[str, Any]:
        return {"name": self.name, "subject": self.subject, "class": self.class_}


class StudentRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str | None = None
    roll_number: str | None = None
    class_: str | None = Field(None, alias="class")


class TeacherRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str | None = None
    subject: str | None = None
    class_: str | None = Field(None, alias="class")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str

"""SQLAlchemy ORM models for the school records API.

The tables are normally created outside this service; the models describe the
existing schema so the store can issue typed statements against it.

Data Model Layout
=================
::
    student table                 teacher table
    ├─ id (INTEGER PRIMARY KEY)   ├─ id (INTEGER PRIMARY KEY)
    ├─ name (VARCHAR)             ├─ name (VARCHAR)
    ├─ roll_number (VARCHAR)      ├─ subject (VARCHAR)
    └─ class (VARCHAR)            └─ class (VARCHAR)

Key Behaviours
===============
- ``id`` is assigned by the service (max + 1), never by the database.
- ``id`` stays dense: deleting a row renumbers the survivors from 1.
- ``class`` is a Python keyword, so the attribute is ``class_``.

Classes:
    Student:  A student row.
    Teacher:  A teacher row.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from school_api.database import Base
from school_api.enums import RecordType

__all__ = ["Student", "Teacher", "RecordModel", "model_for"]


class Student(Base):
    __tablename__ = "student"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    name: Mapped[str | None] = mapped_column(String(100))
    roll_number: Mapped[str | None] = mapped_column(String(50))
    class_: Mapped[str | None] = mapped_column("class", String(50))

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name='{self.name}', roll_number='{self.roll_number}')>"


class Teacher(Base):
    __tablename__ = "teacher"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)
    name: Mapped[str | None] = mapped_column(String(100))
    subject: Mapped[str | None] = mapped_column(String(100))
    class_: Mapped[str | None] = mapped_column("class", String(50))

    def __repr__(self) -> str:
        return f"<Teacher(id={self.id}, name='{self.name}', subject='{self.subject}')>"


RecordModel = type[Student] | type[Teacher]

_MODELS: dict[RecordType, RecordModel] = {
    RecordType.STUDENT: Student,
    RecordType.TEACHER: Teacher,
}


def model_for(record_type: RecordType) -> RecordModel:
    return _MODELS[record_type]

"""FastAPI route definitions for the school records REST API.

API Endpoint Overview
=====================
::
    GET    /api/health
        └─ HealthResponse (200)

    GET    /api/student            GET    /api/teacher
        └─ list[StudentRecord]         └─ list[TeacherRecord]

    POST   /api/addstudent         POST   /api/addteacher
        ├─ StudentCreate               ├─ TeacherCreate
        └─ MessageResponse / 500       └─ MessageResponse / 500

    DELETE /api/student/{id}       DELETE /api/teacher/{id}
        └─ MessageResponse / 500       └─ MessageResponse / 500

    GET    /metrics   (exposed by the instrumentator in main.py)

Key Behaviours
===============
- Store failures are caught here and answered with a fixed
  ``{"error": ...}`` body; the cause is only visible in the logs.
- With DISTINCT_ERROR_STATUS the status code follows the error kind
  (409 constraint violation, 503 connectivity); otherwise it is always 500.
- Deleting a missing id answers with the normal success message.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from school_api.config import Settings
from school_api.dependencies import RequestContext, get_record_service, get_request_context
from school_api.enums import RecordType, StoreErrorKind
from school_api.exceptions import StoreError
from school_api.record_service import RecordService
from school_api.schemas import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    StudentCreate,
    StudentRecord,
    TeacherCreate,
    TeacherRecord,
)

__all__ = ["router"]

router = APIRouter()

_ERROR_RESPONSES = {500: {"model": ErrorResponse}}

_KIND_STATUS = {
    StoreErrorKind.CONSTRAINT_VIOLATION: 409,
    StoreErrorKind.CONNECTIVITY: 503,
    StoreErrorKind.QUERY: 500,
}


def _error_response(exc: StoreError, message: str, settings: Settings) -> JSONResponse:
    status_code = _KIND_STATUS[exc.kind] if settings.DISTINCT_ERROR_STATUS else 500
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


async def _list(record_type: RecordType, ctx: RequestContext, service: RecordService):
    try:
        return await service.list_records(record_type)
    except StoreError as exc:
        return _error_response(exc, f"Failed to fetch {record_type.plural}", ctx.settings)


async def _create(record_type: RecordType, columns: dict, ctx: RequestContext, service: RecordService):
    try:
        await service.create(record_type, columns)
    except StoreError as exc:
        return _error_response(exc, f"Failed to add {record_type.value}", ctx.settings)
    ctx.logger.info(f"{record_type.label} added in {ctx.get_duration():.1f}ms")
    return MessageResponse(message=f"{record_type.label} added successfully")


async def _delete(record_type: RecordType, record_id: int, ctx: RequestContext, service: RecordService):
    try:
        await service.delete(record_type, record_id)
    except StoreError as exc:
        return _error_response(exc, f"Failed to delete {record_type.value}", ctx.settings)
    ctx.logger.info(f"{record_type.label} delete finished in {ctx.get_duration():.1f}ms")
    return MessageResponse(message=f"{record_type.label} deleted successfully")


@router.get("/api/health", response_model=HealthResponse, tags=["health"])
async def health_check() -> HealthResponse:
    return HealthResponse(status="Backend is running")


@router.get("/api/student", response_model=list[StudentRecord], responses=_ERROR_RESPONSES, tags=["students"])
async def list_students(
    ctx: RequestContext = Depends(get_request_context),
    service: RecordService = Depends(get_record_service),
):
    return await _list(RecordType.STUDENT, ctx, service)


@router.get("/api/teacher", response_model=list[TeacherRecord], responses=_ERROR_RESPONSES, tags=["teachers"])
async def list_teachers(
    ctx: RequestContext = Depends(get_request_context),
    service: RecordService = Depends(get_record_service),
):
    return await _list(RecordType.TEACHER, ctx, service)


@router.post("/api/addstudent", response_model=MessageResponse, responses=_ERROR_RESPONSES, tags=["students"])
async def add_student(
    payload: StudentCreate,
    ctx: RequestContext = Depends(get_request_context),
    service: RecordService = Depends(get_record_service),
):
    ctx.logger.info(f"Add student requested: {payload.name}")
    return await _create(RecordType.STUDENT, payload.to_columns(), ctx, service)


@router.post("/api/addteacher", response_model=MessageResponse, responses=_ERROR_RESPONSES, tags=["teachers"])
async def add_teacher(
    payload: TeacherCreate,
    ctx: RequestContext = Depends(get_request_context),
    service: RecordService = Depends(get_record_service),
):
    ctx.logger.info(f"Add teacher requested: {payload.name}")
    return await _create(RecordType.TEACHER, payload.to_columns(), ctx, service)


@router.delete("/api/student/{record_id}", response_model=MessageResponse, responses=_ERROR_RESPONSES, tags=["students"])
async def delete_student(
    record_id: int,
    ctx: RequestContext = Depends(get_request_context),
    service: RecordService = Depends(get_record_service),
):
    ctx.logger.info(f"Delete student requested: {record_id}")
    return await _delete(RecordType.STUDENT, record_id, ctx, service)


@router.delete("/api/teacher/{record_id}", response_model=MessageResponse, responses=_ERROR_RESPONSES, tags=["teachers"])
async def delete_teacher(
    record_id: int,
    ctx: RequestContext = Depends(get_request_context),
    service: RecordService = Depends(get_record_service),
):
    ctx.logger.info(f"Delete teacher requested: {record_id}")
    return await _delete(RecordType.TEACHER, record_id, ctx, service)

"""FastAPI application entry point for the school records API.

This module configures and initializes the FastAPI application with middleware,
lifecycle management, metrics exposition and route registration.

Application Lifecycle Diagram
===========================
::
    ┌─────────────┐
    │  uvicorn    │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ Database()  │
    │ service mgr │
    │ loop errors │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼  SIGINT / SIGTERM
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ dispose()   │
    └─────────────┘

How to Use
===========
**Step 1: Run**::
    school-api
    # or
    uvicorn school_api.main:app --host 0.0.0.0 --port 3500

**Step 2: Make API calls**::
    curl http://localhost:3500/api/health

    curl -X POST http://localhost:3500/api/addstudent \
         -H "Content-Type: application/json" \
         -d '{"name": "Alice", "rollNo": "R1", "class": "5A"}'

    curl -X DELETE http://localhost:3500/api/student/1

    curl http://localhost:3500/metrics

Key Behaviours
===============
- The connection pool is created on startup and drained on shutdown.
- Tables are expected to exist; DB_CREATE_TABLES creates missing ones.
- Unhandled asynchronous failures are logged and do not stop the process.
- CORS is open to the configured origins (all by default).
"""

__all__ = ["app", "create_app", "run"]

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from school_api.config import Settings, get_settings
from school_api.database import Database
from school_api.dependencies import _service_manager
from school_api.routes import router


def _log_unhandled_failure(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    exc = context.get("exception")
    _service_manager.logger.error(
        f"Unhandled asynchronous failure: {context.get('message')}",
        exc_info=exc,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings: Settings = app.state.settings
    # Startup
    _service_manager.initialize(settings)
    asyncio.get_running_loop().set_exception_handler(_log_unhandled_failure)

    database = Database(
        settings.database_url,
        pool_size=settings.DB_POOL_SIZE,
        echo=(settings.APP_ENV == "development"),
    )
    if settings.DB_CREATE_TABLES:
        await database.create_tables()
    app.state.database = database
    _service_manager.logger.info(f"{settings.APP_NAME} started (pool size {settings.DB_POOL_SIZE})")
    yield
    # Shutdown
    await database.dispose()
    _service_manager.logger.info("Database pool closed")
    _service_manager.cleanup()


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    application = FastAPI(
        title=settings.APP_NAME,
        version="1.0.0",
        description="Student and teacher records API",
        lifespan=lifespan,
    )
    application.state.settings = settings

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=False,
        should_respect_env_var=False,
    ).instrument(application).expose(application)

    application.include_router(router)
    return application


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("school_api.main:app", host=settings.HOST, port=settings.PORT)

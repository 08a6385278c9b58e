"""Dependency injection with a singleton service manager.

This module provides a centralized way to inject the database session and the
shared, process-wide resources (settings, logger, per-table mutation locks)
into API endpoints, using a singleton for the shared parts to minimize
per-request overhead.
"""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from school_api.config import Settings, get_settings
from school_api.database import get_db
from school_api.enums import RecordType
from school_api.record_service import RecordService

LOGGER_NAME = "school_api"


# ============================================================================
# PER-TABLE LOCKS
# ============================================================================


class TableLocks:
    """One ``asyncio.Lock`` per record type, created on first use."""

    def __init__(self) -> None:
        self._locks: dict[RecordType, asyncio.Lock] = {}

    def for_type(self, record_type: RecordType) -> asyncio.Lock:
        lock = self._locks.get(record_type)
        if lock is None:
            lock = self._locks[record_type] = asyncio.Lock()
        return lock


# ============================================================================
# SINGLETON SERVICE MANAGER
# ============================================================================


class ServiceManager:
    """Singleton service manager for shared resources.

    Holds what does not need to be created per request: settings, the
    service logger and the per-table locks that serialize mutations.
    """

    _instance: Optional["ServiceManager"] = None
    _initialized: bool = False

    def __new__(cls) -> "ServiceManager":
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def initialize(self, settings: Settings | None = None) -> None:
        """Initialize shared resources once at startup."""
        if not self._initialized:
            self.settings = settings or get_settings()
            self.logger = self._setup_logger()
            self.table_locks = TableLocks()
            self._initialized = True

    def _setup_logger(self) -> logging.Logger:
        """Setup logger once."""
        logger = logging.getLogger(LOGGER_NAME)
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
        logger.setLevel(self.settings.LOG_LEVEL)
        return logger

    def cleanup(self) -> None:
        """Forget shared resources at shutdown."""
        if hasattr(self, "table_locks"):
            del self.table_locks
        self._initialized = False


# Global singleton instance
_service_manager = ServiceManager()


# ============================================================================
# LIGHTWEIGHT REQUEST CONTEXT
# ============================================================================


@dataclass
class RequestContext:
    """Per-request context with tracking information.

    Attributes:
        database: Async database session (only per-request resource)
        service_manager: Singleton service manager with shared resources
        request_id: Unique identifier for this request
        user_agent: Client user agent string
        client_ip: Client IP address
        start_time: Request start timestamp
    """

    database: AsyncSession
    service_manager: ServiceManager
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None
    start_time: float = field(default_factory=lambda: time.time())

    @property
    def logger(self) -> logging.LoggerAdapter:
        """Get shared logger with request context."""
        return logging.LoggerAdapter(
            self.service_manager.logger,
            {"request_id": self.request_id, "client_ip": self.client_ip, "user_agent": self.user_agent},
        )

    @property
    def settings(self) -> Settings:
        return self.service_manager.settings

    @property
    def table_locks(self) -> TableLocks:
        return self.service_manager.table_locks

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


async def get_service_manager() -> ServiceManager:
    if not _service_manager._initialized:
        _service_manager.initialize()
    return _service_manager


async def get_request_context(
    request: Request,
    db: AsyncSession = Depends(get_db),
    manager: ServiceManager = Depends(get_service_manager),
) -> RequestContext:
    client_ip = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

    return RequestContext(
        database=db,
        service_manager=manager,
        request_id=request_id,
        user_agent=user_agent,
        client_ip=client_ip,
    )


def get_record_service(ctx: RequestContext = Depends(get_request_context)) -> RecordService:
    """Create the record service bound to this request's context."""
    return RecordService.from_context(ctx)

"""FastAPI dependency injection: record service, metrics, request context."""

import logging
from functools import partial

from fastapi import Request

from herdbook.application.handlers import default_handlers
from herdbook.application.record_service import RecordMutationService
from herdbook.config.settings import get_settings
from herdbook.core.clock import SystemClock
from herdbook.governance.audit_recorder import AuditRecorder
from herdbook.observability.metrics import MetricsCollector, get_metrics_collector
from herdbook.security.actor_context import OriginMeta, RequestContext
from herdbook.security.passwords import PasswordHasher
from herdbook.security.rbac import RBACService

_record_service: RecordMutationService | None = None


def get_metrics() -> MetricsCollector:
    return get_metrics_collector()


def get_record_service() -> RecordMutationService:
    """Return singleton RecordMutationService bound to the database session factory."""
    global _record_service
    if _record_service is None:
        from herdbook.infrastructure.database.session import AsyncSessionLocal
        from herdbook.infrastructure.database.unit_of_work import SqlAlchemyUnitOfWork

        settings = get_settings()
        clock = SystemClock()
        _record_service = RecordMutationService(
            unit_of_work_factory=partial(SqlAlchemyUnitOfWork, AsyncSessionLocal),
            handlers=default_handlers(clock, PasswordHasher(settings.password_hash_iterations)),
            rbac=RBACService(),
            audit_recorder=AuditRecorder(clock),
            logger=logging.getLogger("herdbook.application.record_service"),
            metrics=get_metrics_collector() if settings.enable_metrics else None,
        )
    return _record_service


def get_request_context(request: Request) -> RequestContext:
    """Build the explicit per-request context from request.state (set by middleware)."""
    return RequestContext(
        actor=getattr(request.state, "actor", None),
        origin=getattr(request.state, "origin", None) or OriginMeta(),
        correlation_id=getattr(request.state, "correlation_id", None),
    )

"""Record mutation service: the transaction boundary for every add, edit and delete."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from herdbook.application.exceptions import (
    PersistenceError,
    RecordNotFoundError,
    StaleRecordError,
)
from herdbook.application.handlers.base import RecordHandler
from herdbook.application.repositories import UnitOfWork
from herdbook.domain.exceptions import DomainValidationError
from herdbook.domain.models.records import (
    OPERATION_AUDIT_ACTIONS,
    AuditAction,
    ChangeRequest,
    Operation,
    RecordKind,
)
from herdbook.governance.audit_recorder import AuditRecorder
from herdbook.observability.metrics import (
    MUTATION_LATENCY,
    MUTATIONS_COMMITTED,
    MUTATIONS_REJECTED,
    MUTATIONS_ROLLED_BACK,
    MetricsCollector,
)
from herdbook.security.actor_context import RequestContext
from herdbook.security.exceptions import AuthorizationError
from herdbook.security.rbac import RBACService

GENERIC_FAILURE_MESSAGE = "Operation failed"

_PAST_TENSE = {
    Operation.CREATE: "added",
    Operation.UPDATE: "updated",
    Operation.DELETE: "deleted",
}


@dataclass(frozen=True)
class MutationResult:
    """Outcome of a committed mutation, safe to show to the actor."""

    kind: RecordKind
    action: AuditAction
    record_id: int
    message: str
    version: Optional[int] = None


class RecordMutationService:
    """
    Orchestration only. No HTTP, no SQL.
    Order per mutation: authorize, validate, derive, write, propagate, audit, commit.
    Authorization, not-found, stale-version and validation failures happen before any write.
    Any failure after the first write rolls back everything, including the audit entry.
    """

    def __init__(
        self,
        unit_of_work_factory: Callable[[], UnitOfWork],
        handlers: Mapping[RecordKind, RecordHandler],
        rbac: RBACService,
        audit_recorder: AuditRecorder,
        logger: logging.Logger,
        metrics: Optional[MetricsCollector] = None,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._handlers = dict(handlers)
        self._rbac = rbac
        self._audit = audit_recorder
        self._logger = logger
        self._metrics = metrics

    async def create(
        self, ctx: RequestContext, kind: RecordKind, fields: Mapping[str, Any]
    ) -> MutationResult:
        return await self.execute(ctx, ChangeRequest(kind=kind, operation=Operation.CREATE, fields=dict(fields)))

    async def update(
        self,
        ctx: RequestContext,
        kind: RecordKind,
        record_id: int,
        fields: Mapping[str, Any],
        expected_version: Optional[int] = None,
    ) -> MutationResult:
        return await self.execute(
            ctx,
            ChangeRequest(
                kind=kind,
                operation=Operation.UPDATE,
                fields=dict(fields),
                record_id=record_id,
                expected_version=expected_version,
            ),
        )

    async def delete(self, ctx: RequestContext, kind: RecordKind, record_id: int) -> MutationResult:
        return await self.execute(ctx, ChangeRequest(kind=kind, operation=Operation.DELETE, record_id=record_id))

    async def execute(self, ctx: RequestContext, request: ChangeRequest) -> MutationResult:
        handler = self._handlers[request.kind]
        log_extra: Dict[str, Any] = {
            "record_kind": request.kind.value,
            "operation": request.operation.value,
            "record_id": request.record_id,
            "actor_id": ctx.actor_id,
            "correlation_id": ctx.correlation_id,
        }
        started = time.perf_counter()

        # Step 1: authorize before touching storage
        try:
            self._rbac.check_permission(ctx.role, request.kind, request.operation)
        except AuthorizationError as e:
            self._reject(request, log_extra, "unauthorized", e.message)
            raise

        try:
            async with self._uow_factory() as uow:
                # Step 2: resolve the target row and check its version
                current = None
                if request.operation is not Operation.CREATE:
                    current = await self._load(uow, handler, request)

                # Step 3: validate and derive; no writes yet
                values: Dict[str, Any] = {}
                if request.operation is not Operation.DELETE:
                    values, errors = await handler.validate(uow, request.fields, current=current)
                    if errors:
                        raise DomainValidationError(errors)
                    values = handler.derive(values, current=current)

                # Steps 4-6: write, propagate, audit; then commit
                try:
                    result = await self._apply(uow, ctx, handler, request, current, values)
                    await uow.commit()
                except Exception:
                    await uow.rollback()
                    raise
        except (RecordNotFoundError, StaleRecordError, DomainValidationError) as e:
            self._reject(request, log_extra, type(e).__name__, e.message)
            raise
        except Exception as e:
            self._logger.error(
                "mutation_rolled_back",
                extra={**log_extra, "error": str(e), "error_type": type(e).__name__},
            )
            if self._metrics is not None:
                self._metrics.increment(MUTATIONS_ROLLED_BACK, kind=request.kind.value)
            raise PersistenceError(GENERIC_FAILURE_MESSAGE) from e

        self._logger.info("mutation_committed", extra={**log_extra, "record_id": result.record_id})
        if self._metrics is not None:
            self._metrics.increment(MUTATIONS_COMMITTED, kind=request.kind.value)
            self._metrics.observe_latency(
                MUTATION_LATENCY, (time.perf_counter() - started) * 1000, kind=request.kind.value
            )
        return result

    async def _load(self, uow: UnitOfWork, handler: RecordHandler, request: ChangeRequest) -> Any:
        if request.record_id is None:
            raise RecordNotFoundError(f"{handler.label} id is required")
        current = await handler.load(uow, request.record_id)
        if current is None:
            raise RecordNotFoundError(f"{handler.label} not found")
        if request.expected_version is not None and current.version != request.expected_version:
            raise StaleRecordError(
                f"{handler.label} was changed by someone else "
                f"(expected version {request.expected_version}, found {current.version})"
            )
        return current

    async def _apply(
        self,
        uow: UnitOfWork,
        ctx: RequestContext,
        handler: RecordHandler,
        request: ChangeRequest,
        current: Any,
        values: Dict[str, Any],
    ) -> MutationResult:
        operation = request.operation
        if operation is Operation.CREATE:
            record = await handler.write_create(uow, values)
        elif operation is Operation.UPDATE:
            record = await handler.write_update(uow, current, values)
        else:
            await handler.write_delete(uow, current)
            record = current
        self._logger.info("record_written", extra={"record_kind": handler.kind.value, "record_id": record.id})

        await handler.propagate(uow, operation, record, current)

        action = OPERATION_AUDIT_ACTIONS[operation]
        await self._audit.record(
            uow.audit,
            ctx,
            action=action,
            record_kind=handler.kind,
            record_id=record.id,
            before=handler.snapshot(current) if current is not None else None,
            after=handler.snapshot(record) if operation is not Operation.DELETE else None,
        )
        return MutationResult(
            kind=handler.kind,
            action=action,
            record_id=record.id,
            message=f"{handler.label} {_PAST_TENSE[operation]} successfully",
            version=None if operation is Operation.DELETE else record.version,
        )

    def _reject(self, request: ChangeRequest, log_extra: Dict[str, Any], reason: str, detail: str) -> None:
        self._logger.warning("mutation_rejected", extra={**log_extra, "reason": reason, "detail": detail})
        if self._metrics is not None:
            self._metrics.increment(MUTATIONS_REJECTED, kind=request.kind.value)

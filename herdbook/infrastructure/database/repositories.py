# herdbook/infrastructure/database/repositories.py

from dataclasses import fields
from datetime import date
from typing import Any, Collection, Generic, Mapping, Optional, Type, TypeVar

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from herdbook.domain.models.records import (
    BreedingRecord,
    BreedingStatus,
    Cattle,
    FeedInventoryItem,
    FeedTransaction,
    HealthRecord,
    HealthStatus,
    Worker,
    WorkerStatus,
)
from herdbook.governance.audit_models import AuditEntry
from herdbook.infrastructure.database.models import (
    AuditLogRow,
    BreedingRecordRow,
    CattleRow,
    FeedInventoryRow,
    FeedTransactionRow,
    HealthRecordRow,
    UserRow,
    VersionedModel,
    WorkerRow,
)

M = TypeVar("M", bound=VersionedModel)
D = TypeVar("D")


def _to_domain(row: Any, domain_type: Type[D]) -> D:
    return domain_type(**{f.name: getattr(row, f.name) for f in fields(domain_type)})


class SqlAlchemyRecordRepository(Generic[M, D]):
    """
    Reads and writes one versioned table. Never commits; the unit of work owns the transaction.
    Soft-deleted rows are filtered out of every query.
    """

    def __init__(self, session: AsyncSession, model: Type[M], domain_type: Type[D]) -> None:
        self._session = session
        self.model = model
        self.domain_type = domain_type

    def _live(self):
        return select(self.model).where(self.model.is_deleted == False)  # noqa: E712

    async def _row(self, record_id: int, *, for_update: bool = False) -> Optional[M]:
        stmt = self._live().where(self.model.id == record_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _require_row(self, record_id: int) -> M:
        row = await self._row(record_id)
        if row is None:
            raise LookupError(f"{self.model.__tablename__} row {record_id} not found")
        return row

    def _domain(self, row: M) -> D:
        return _to_domain(row, self.domain_type)

    async def get(self, record_id: int, *, for_update: bool = False) -> Optional[D]:
        row = await self._row(record_id, for_update=for_update)
        return self._domain(row) if row is not None else None

    async def add(self, values: Mapping[str, Any]) -> D:
        row = self.model(**values)
        self._session.add(row)
        await self._session.flush()
        await self._session.refresh(row)
        return self._domain(row)

    async def _apply(self, row: M, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            setattr(row, name, value)
        # Always dirty, so the flush issues the versioned UPDATE even when no column changed
        row.updated_at = func.now()
        await self._session.flush()
        await self._session.refresh(row)

    async def update(self, record_id: int, values: Mapping[str, Any]) -> D:
        row = await self._require_row(record_id)
        await self._apply(row, values)
        return self._domain(row)

    async def soft_delete(self, record_id: int) -> None:
        row = await self._require_row(record_id)
        row.is_deleted = True
        await self._session.flush()

    async def exists(self, *, exclude_id: Optional[int] = None, **criteria: Any) -> bool:
        stmt = select(self.model.id).where(self.model.is_deleted == False)  # noqa: E712
        for name, value in criteria.items():
            stmt = stmt.where(getattr(self.model, name) == value)
        if exclude_id is not None:
            stmt = stmt.where(self.model.id != exclude_id)
        result = await self._session.execute(stmt.limit(1))
        return result.first() is not None


class SqlAlchemyCattleRepository(SqlAlchemyRecordRepository[CattleRow, Cattle]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, CattleRow, Cattle)

    async def _set(self, cattle_id: int, **values: Any) -> None:
        # Denormalised columns are not part of the cattle edit, so they do not bump its version
        stmt = (
            update(CattleRow)
            .where(CattleRow.id == cattle_id)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        await self._session.execute(stmt)

    async def set_health_status(
        self,
        cattle_id: int,
        *,
        health_status: HealthStatus,
        last_checkup: Optional[date],
        next_checkup: Optional[date],
    ) -> None:
        await self._set(
            cattle_id,
            health_status=health_status,
            last_checkup=last_checkup,
            next_checkup=next_checkup,
        )

    async def set_breeding_status(
        self,
        cattle_id: int,
        *,
        breeding_status: BreedingStatus,
        last_breeding_date: Optional[date],
        expected_delivery_date: Optional[date],
    ) -> None:
        await self._set(
            cattle_id,
            breeding_status=breeding_status,
            last_breeding_date=last_breeding_date,
            expected_delivery_date=expected_delivery_date,
        )


class SqlAlchemyHealthRecordRepository(SqlAlchemyRecordRepository[HealthRecordRow, HealthRecord]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, HealthRecordRow, HealthRecord)

    async def latest_for_cattle(self, cattle_id: int) -> Optional[HealthRecord]:
        stmt = (
            self._live()
            .where(HealthRecordRow.cattle_id == cattle_id)
            .order_by(HealthRecordRow.date_of_checkup.desc(), HealthRecordRow.id.desc())
            .limit(1)
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._domain(row) if row is not None else None


class SqlAlchemyBreedingRecordRepository(SqlAlchemyRecordRepository[BreedingRecordRow, BreedingRecord]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, BreedingRecordRow, BreedingRecord)

    async def latest_for_cattle(self, cattle_id: int) -> Optional[BreedingRecord]:
        stmt = (
            self._live()
            .where(BreedingRecordRow.cattle_id == cattle_id)
            .order_by(BreedingRecordRow.breeding_date.desc(), BreedingRecordRow.id.desc())
            .limit(1)
        )
        row = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._domain(row) if row is not None else None


class SqlAlchemyFeedRepository(SqlAlchemyRecordRepository[FeedInventoryRow, FeedInventoryItem]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, FeedInventoryRow, FeedInventoryItem)


class SqlAlchemyFeedTransactionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, transaction: FeedTransaction) -> int:
        row = FeedTransactionRow(
            feed_id=transaction.feed_id,
            transaction_type=transaction.transaction_type,
            quantity=transaction.quantity,
            unit_cost=transaction.unit_cost,
            total_cost=transaction.total_cost,
            notes=transaction.notes,
        )
        self._session.add(row)
        await self._session.flush()
        return row.id


class SqlAlchemyWorkerRepository(SqlAlchemyRecordRepository[WorkerRow, Worker]):
    """Worker rows joined with their login account."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, WorkerRow, Worker)

    async def _with_account(self, row: WorkerRow) -> Worker:
        account = await self._session.get(UserRow, row.user_id)
        return Worker(
            id=row.id,
            user_id=row.user_id,
            full_name=account.full_name,
            email=account.email,
            phone_number=account.phone_number,
            role=account.role,
            status=account.status,
            id_number=row.id_number,
            date_hired=row.date_hired,
            salary=row.salary,
            assigned_duties=row.assigned_duties,
            version=row.version,
        )

    async def get(self, record_id: int, *, for_update: bool = False) -> Optional[Worker]:
        row = await self._row(record_id, for_update=for_update)
        return await self._with_account(row) if row is not None else None

    async def add(self, values: Mapping[str, Any]) -> Worker:
        row = WorkerRow(**values)
        self._session.add(row)
        await self._session.flush()
        await self._session.refresh(row)
        return await self._with_account(row)

    async def update(self, record_id: int, values: Mapping[str, Any]) -> Worker:
        row = await self._require_row(record_id)
        await self._apply(row, values)
        return await self._with_account(row)


class SqlAlchemyUserAccountRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, values: Mapping[str, Any]) -> int:
        row = UserRow(**values)
        self._session.add(row)
        await self._session.flush()
        return row.id

    async def update(self, user_id: int, values: Mapping[str, Any]) -> None:
        row = await self._session.get(UserRow, user_id)
        if row is None:
            raise LookupError(f"users row {user_id} not found")
        for name, value in values.items():
            setattr(row, name, value)
        await self._session.flush()

    async def email_taken(self, email: str, *, exclude_user_id: Optional[int] = None) -> bool:
        stmt = select(UserRow.id).where(UserRow.email == email)
        if exclude_user_id is not None:
            stmt = stmt.where(UserRow.id != exclude_user_id)
        result = await self._session.execute(stmt.limit(1))
        return result.first() is not None

    async def is_active(self, user_id: int, *, roles: Collection[str]) -> bool:
        stmt = select(UserRow.id).where(
            UserRow.id == user_id,
            UserRow.is_deleted == False,  # noqa: E712
            UserRow.status == WorkerStatus.ACTIVE,
            UserRow.role.in_(roles),
        )
        result = await self._session.execute(stmt.limit(1))
        return result.first() is not None


class SqlAlchemyAuditRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def append(self, entry: AuditEntry) -> int:
        row = AuditLogRow(
            actor_id=entry.actor_id,
            action=entry.action,
            record_kind=entry.record_kind,
            record_id=entry.record_id,
            old_values=entry.before,
            new_values=entry.after,
            ip_address=entry.ip_address,
            user_agent=entry.user_agent,
            correlation_id=entry.correlation_id,
            created_at=entry.timestamp_utc,
        )
        self._session.add(row)
        await self._session.flush()
        return row.id

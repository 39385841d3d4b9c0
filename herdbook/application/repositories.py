"""Repository and unit-of-work protocols. Application layer depends on these; infrastructure implements them."""

from datetime import date
from typing import Any, Collection, Mapping, Optional, Protocol, TypeVar

from herdbook.domain.models.records import (
    BreedingRecord,
    BreedingStatus,
    Cattle,
    FeedInventoryItem,
    FeedTransaction,
    HealthRecord,
    HealthStatus,
    Worker,
)
from herdbook.governance.audit_repository import AuditRepository

R = TypeVar("R")


class RecordRepository(Protocol[R]):
    """Reads and writes one record kind. Soft-deleted rows are invisible to every method."""

    async def get(self, record_id: int, *, for_update: bool = False) -> Optional[R]:
        """Return the live record, optionally row-locked for the rest of the unit of work."""
        ...

    async def add(self, values: Mapping[str, Any]) -> R:
        """Insert and return the stored record with its new id."""
        ...

    async def update(self, record_id: int, values: Mapping[str, Any]) -> R:
        """Overwrite the given columns and return the stored record. Every call bumps the version."""
        ...

    async def soft_delete(self, record_id: int) -> None:
        ...

    async def exists(self, *, exclude_id: Optional[int] = None, **criteria: Any) -> bool:
        """True if a live record other than exclude_id matches all criteria."""
        ...


class CattleRepository(RecordRepository[Cattle], Protocol):
    async def set_health_status(
        self,
        cattle_id: int,
        *,
        health_status: HealthStatus,
        last_checkup: Optional[date],
        next_checkup: Optional[date],
    ) -> None:
        ...

    async def set_breeding_status(
        self,
        cattle_id: int,
        *,
        breeding_status: BreedingStatus,
        last_breeding_date: Optional[date],
        expected_delivery_date: Optional[date],
    ) -> None:
        ...


class HealthRecordRepository(RecordRepository[HealthRecord], Protocol):
    async def latest_for_cattle(self, cattle_id: int) -> Optional[HealthRecord]:
        """Most recent live record by checkup date, then id."""
        ...


class BreedingRecordRepository(RecordRepository[BreedingRecord], Protocol):
    async def latest_for_cattle(self, cattle_id: int) -> Optional[BreedingRecord]:
        """Most recent live record by breeding date, then id."""
        ...


class FeedTransactionRepository(Protocol):
    async def append(self, transaction: FeedTransaction) -> int:
        ...


class UserAccountRepository(Protocol):
    """Login accounts backing worker records."""

    async def add(self, values: Mapping[str, Any]) -> int:
        ...

    async def update(self, user_id: int, values: Mapping[str, Any]) -> None:
        ...

    async def email_taken(self, email: str, *, exclude_user_id: Optional[int] = None) -> bool:
        ...

    async def is_active(self, user_id: int, *, roles: Collection[str]) -> bool:
        """True if the account is live, active and holds one of roles."""
        ...


class UnitOfWork(Protocol):
    """
    One atomic unit of work over all repositories. Leaving the context without
    commit() rolls back everything written through it.
    """

    cattle: CattleRepository
    health_records: HealthRecordRepository
    breeding_records: BreedingRecordRepository
    feed: RecordRepository[FeedInventoryItem]
    feed_transactions: FeedTransactionRepository
    workers: RecordRepository[Worker]
    user_accounts: UserAccountRepository
    audit: AuditRepository

    async def __aenter__(self) -> "UnitOfWork":
        ...

    async def __aexit__(self, exc_type, exc, tb) -> None:
        ...

    async def commit(self) -> None:
        ...

    async def rollback(self) -> None:
        ...

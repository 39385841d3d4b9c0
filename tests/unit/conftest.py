"""Shared fixtures: in-memory unit of work with failure injection, fixed clock, actor contexts."""

import copy
from dataclasses import replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from herdbook.application.handlers import default_handlers
from herdbook.application.record_service import RecordMutationService
from herdbook.domain.models.records import (
    BreedingRecord,
    Cattle,
    FeedInventoryItem,
    Gender,
    HealthRecord,
    Worker,
    WorkerStatus,
)
from herdbook.governance.audit_recorder import AuditRecorder
from herdbook.observability.metrics import MetricsCollector
from herdbook.security.actor_context import Actor, OriginMeta, RequestContext
from herdbook.security.passwords import PasswordHasher
from herdbook.security.rbac import RBACService, Role

TODAY = date(2024, 6, 1)
NOW = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)


class FixedClock:
    def now(self) -> datetime:
        return NOW

    def today(self) -> date:
        return TODAY


class InjectedFailure(RuntimeError):
    """Raised by the fake repositories for operations listed in store.fail_on."""


def _empty_state() -> Dict[str, Any]:
    return {
        "cattle": {},
        "health_records": {},
        "breeding_records": {},
        "feed": {},
        "workers": {},
        "deleted": {
            "cattle": set(),
            "health_records": set(),
            "breeding_records": set(),
            "feed": set(),
            "workers": set(),
        },
        "users": {},
        "feed_transactions": [],
        "audit": [],
        "next_id": 1,
    }


class InMemoryStore:
    """
    Committed state shared by every unit of work. Each unit of work works on
    a private copy that replaces this state only on commit.
    """

    def __init__(self) -> None:
        self.state = _empty_state()
        self.fail_on: set = set()
        self.commits = 0
        self.rollbacks = 0
        self.locked_reads: List[str] = []

    def snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self.state)

    def _next_id(self) -> int:
        next_id = self.state["next_id"]
        self.state["next_id"] += 1
        return next_id

    def insert(self, table: str, record: Any) -> Any:
        """Seed a committed record directly, bypassing the service."""
        self.state[table][record.id] = record
        self.state["next_id"] = max(self.state["next_id"], record.id + 1)
        return record

    def add_cattle(self, record_id: int = 1, **overrides: Any) -> Cattle:
        values = dict(
            id=record_id,
            tag_number=f"KE-{record_id:03d}",
            breed="Friesian",
            date_of_birth=date(2021, 3, 14),
            gender=Gender.FEMALE,
        )
        values.update(overrides)
        return self.insert("cattle", Cattle(**values))

    def add_staff(self, user_id: int, role: str, /, **account: Any) -> None:
        """Seed a login account that records can reference, e.g. an attending vet."""
        user = dict(
            username=f"{role}{user_id}",
            password_hash="pbkdf2_sha256$1$x$y",
            full_name=f"Staff member {user_id}",
            email=f"{role}{user_id}@farm.co.ke",
            phone_number="+254700000000",
            role=role,
            status=WorkerStatus.ACTIVE,
        )
        user.update(account)
        self.state["users"][user_id] = user

    def add_worker(self, record_id: int = 1, user_id: int = 100, **account: Any) -> None:
        user = dict(
            username="jane",
            password_hash="pbkdf2_sha256$1$x$y",
            full_name="Jane Wanjiru",
            email="jane@farm.co.ke",
            phone_number="+254712345678",
            role="worker",
            status=WorkerStatus.ACTIVE,
        )
        user.update(account)
        self.state["users"][user_id] = user
        self.state["workers"][record_id] = dict(
            id=record_id,
            user_id=user_id,
            id_number="12345678",
            date_hired=date(2023, 1, 9),
            salary=Decimal("25000"),
            assigned_duties="Milking",
            version=1,
        )
        self.state["next_id"] = max(self.state["next_id"], record_id + 1, user_id + 1)

    def live(self, table: str) -> Dict[int, Any]:
        deleted = self.state["deleted"][table]
        return {k: v for k, v in self.state[table].items() if k not in deleted}

    @property
    def audit(self) -> List[Any]:
        return self.state["audit"]

    @property
    def feed_transactions(self) -> List[Any]:
        return self.state["feed_transactions"]


class _FakeRepository:
    table = ""

    def __init__(self, uow: "FakeUnitOfWork") -> None:
        self._uow = uow

    def _check(self, operation: str) -> None:
        name = f"{self.table}.{operation}"
        if name in self._uow.store.fail_on:
            raise InjectedFailure(f"injected failure in {name}")

    @property
    def _rows(self) -> Dict[int, Any]:
        return self._uow.state[self.table]

    def _is_live(self, record_id: int) -> bool:
        return record_id in self._rows and record_id not in self._uow.state["deleted"][self.table]


class FakeRecordRepository(_FakeRepository):
    domain_type: Any = None

    def __init__(self, uow: "FakeUnitOfWork", table: str, domain_type: Any) -> None:
        super().__init__(uow)
        self.table = table
        self.domain_type = domain_type

    async def get(self, record_id: int, *, for_update: bool = False) -> Optional[Any]:
        self._check("get")
        if for_update:
            self._uow.store.locked_reads.append(f"{self.table}:{record_id}")
        return self._rows[record_id] if self._is_live(record_id) else None

    async def add(self, values: Dict[str, Any]) -> Any:
        self._check("add")
        record_id = self._uow.next_id()
        record = self.domain_type(id=record_id, **values)
        self._rows[record_id] = record
        return record

    async def update(self, record_id: int, values: Dict[str, Any]) -> Any:
        self._check("update")
        current = self._rows[record_id]
        record = replace(current, version=current.version + 1, **values)
        self._rows[record_id] = record
        return record

    async def soft_delete(self, record_id: int) -> None:
        self._check("soft_delete")
        self._uow.state["deleted"][self.table].add(record_id)

    async def exists(self, *, exclude_id: Optional[int] = None, **criteria: Any) -> bool:
        for record_id, record in self._rows.items():
            if record_id == exclude_id or not self._is_live(record_id):
                continue
            if all(getattr(record, name) == value for name, value in criteria.items()):
                return True
        return False


class FakeCattleRepository(FakeRecordRepository):
    def __init__(self, uow: "FakeUnitOfWork") -> None:
        super().__init__(uow, "cattle", Cattle)

    async def set_health_status(self, cattle_id, *, health_status, last_checkup, next_checkup) -> None:
        self._check("set_health_status")
        self._rows[cattle_id] = replace(
            self._rows[cattle_id],
            health_status=health_status,
            last_checkup=last_checkup,
            next_checkup=next_checkup,
        )

    async def set_breeding_status(
        self, cattle_id, *, breeding_status, last_breeding_date, expected_delivery_date
    ) -> None:
        self._check("set_breeding_status")
        self._rows[cattle_id] = replace(
            self._rows[cattle_id],
            breeding_status=breeding_status,
            last_breeding_date=last_breeding_date,
            expected_delivery_date=expected_delivery_date,
        )


class FakeDependentRecordRepository(FakeRecordRepository):
    def __init__(self, uow: "FakeUnitOfWork", table: str, domain_type: Any, date_field: str) -> None:
        super().__init__(uow, table, domain_type)
        self._date_field = date_field

    async def latest_for_cattle(self, cattle_id: int) -> Optional[Any]:
        candidates = [
            record
            for record_id, record in self._rows.items()
            if self._is_live(record_id) and record.cattle_id == cattle_id
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda r: (getattr(r, self._date_field), r.id))


class FakeWorkerRepository(_FakeRepository):
    table = "workers"

    def _join(self, row: Dict[str, Any]) -> Worker:
        user = self._uow.state["users"][row["user_id"]]
        return Worker(
            id=row["id"],
            user_id=row["user_id"],
            full_name=user["full_name"],
            email=user["email"],
            phone_number=user["phone_number"],
            role=user["role"],
            status=user["status"],
            id_number=row["id_number"],
            date_hired=row["date_hired"],
            salary=row["salary"],
            assigned_duties=row["assigned_duties"],
            version=row["version"],
        )

    async def get(self, record_id: int, *, for_update: bool = False) -> Optional[Worker]:
        self._check("get")
        if for_update:
            self._uow.store.locked_reads.append(f"workers:{record_id}")
        return self._join(self._rows[record_id]) if self._is_live(record_id) else None

    async def add(self, values: Dict[str, Any]) -> Worker:
        self._check("add")
        record_id = self._uow.next_id()
        self._rows[record_id] = dict(values, id=record_id, version=1)
        return self._join(self._rows[record_id])

    async def update(self, record_id: int, values: Dict[str, Any]) -> Worker:
        self._check("update")
        row = self._rows[record_id]
        row.update(values)
        row["version"] += 1
        return self._join(row)

    async def soft_delete(self, record_id: int) -> None:
        self._check("soft_delete")
        self._uow.state["deleted"]["workers"].add(record_id)

    async def exists(self, *, exclude_id: Optional[int] = None, **criteria: Any) -> bool:
        return any(
            record_id != exclude_id
            and self._is_live(record_id)
            and all(row[name] == value for name, value in criteria.items())
            for record_id, row in self._rows.items()
        )


class FakeUserAccountRepository(_FakeRepository):
    table = "users"

    async def add(self, values: Dict[str, Any]) -> int:
        self._check("add")
        # Accounts have their own sequence, like the users table
        user_id = max(self._uow.state["users"], default=0) + 1
        self._uow.state["users"][user_id] = dict(values)
        return user_id

    async def update(self, user_id: int, values: Dict[str, Any]) -> None:
        self._check("update")
        self._uow.state["users"][user_id].update(values)

    async def email_taken(self, email: str, *, exclude_user_id: Optional[int] = None) -> bool:
        return any(
            user_id != exclude_user_id and user["email"] == email
            for user_id, user in self._uow.state["users"].items()
        )

    async def is_active(self, user_id: int, *, roles) -> bool:
        self._check("is_active")
        user = self._uow.state["users"].get(user_id)
        return user is not None and user["status"] is WorkerStatus.ACTIVE and user["role"] in roles


class FakeFeedTransactionRepository(_FakeRepository):
    table = "feed_transactions"

    async def append(self, transaction) -> int:
        self._check("append")
        self._uow.state["feed_transactions"].append(transaction)
        return len(self._uow.state["feed_transactions"])


class FakeAuditRepository(_FakeRepository):
    table = "audit"

    async def append(self, entry) -> int:
        self._check("append")
        self._uow.state["audit"].append(entry)
        return len(self._uow.state["audit"])


class FakeUnitOfWork:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.state: Dict[str, Any] = {}

    def next_id(self) -> int:
        next_id = self.state["next_id"]
        self.state["next_id"] += 1
        return next_id

    async def __aenter__(self) -> "FakeUnitOfWork":
        self.state = self.store.snapshot()
        self._committed = False
        self.cattle = FakeCattleRepository(self)
        self.health_records = FakeDependentRecordRepository(
            self, "health_records", HealthRecord, "date_of_checkup"
        )
        self.breeding_records = FakeDependentRecordRepository(
            self, "breeding_records", BreedingRecord, "breeding_date"
        )
        self.feed = FakeRecordRepository(self, "feed", FeedInventoryItem)
        self.feed_transactions = FakeFeedTransactionRepository(self)
        self.workers = FakeWorkerRepository(self)
        self.user_accounts = FakeUserAccountRepository(self)
        self.audit = FakeAuditRepository(self)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if not self._committed:
            self.state = {}

    async def commit(self) -> None:
        if "uow.commit" in self.store.fail_on:
            raise InjectedFailure("injected failure in commit")
        self.store.state = self.state
        self.store.commits += 1
        self._committed = True

    async def rollback(self) -> None:
        self.store.rollbacks += 1
        self.state = {}


def context_for(role: Optional[Role], actor_id: int = 7) -> RequestContext:
    actor = None if role is None else Actor(actor_id=actor_id, display_name=f"{role.value} user", role=role)
    return RequestContext(
        actor=actor,
        origin=OriginMeta(ip_address="10.0.0.5", user_agent="pytest"),
        correlation_id="corr-1",
    )


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store():
    store = InMemoryStore()
    # Same id as the vet actor, referenced by health and breeding payloads
    store.add_staff(3, "vet")
    return store


@pytest.fixture
def metrics():
    return MetricsCollector()


@pytest.fixture
def logger():
    return MagicMock()


@pytest.fixture
def password_hasher():
    # Low work factor keeps the suite fast; production uses the settings value
    return PasswordHasher(iterations=1000)


@pytest.fixture
def record_service(store, clock, metrics, logger, password_hasher):
    return RecordMutationService(
        unit_of_work_factory=lambda: FakeUnitOfWork(store),
        handlers=default_handlers(clock, password_hasher),
        rbac=RBACService(),
        audit_recorder=AuditRecorder(clock),
        logger=logger,
        metrics=metrics,
    )


@pytest.fixture
def admin_ctx():
    return context_for(Role.ADMIN, actor_id=1)


@pytest.fixture
def manager_ctx():
    return context_for(Role.MANAGER, actor_id=2)


@pytest.fixture
def vet_ctx():
    return context_for(Role.VET, actor_id=3)


@pytest.fixture
def worker_ctx():
    return context_for(Role.WORKER, actor_id=4)


@pytest.fixture
def anonymous_ctx():
    return context_for(None)

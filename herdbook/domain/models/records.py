"""Domain records for the farm register. Pure business semantics: no ORM or infrastructure."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union


class RecordKind(str, Enum):
    """Kinds of records mutated through the record service."""

    CATTLE = "cattle"
    HEALTH_RECORD = "health_record"
    BREEDING_RECORD = "breeding_record"
    FEED = "feed"
    WORKER = "worker"


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


OPERATION_AUDIT_ACTIONS: Dict[Operation, AuditAction] = {
    Operation.CREATE: AuditAction.CREATE,
    Operation.UPDATE: AuditAction.UPDATE,
    Operation.DELETE: AuditAction.DELETE,
}


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class CattleStatus(str, Enum):
    ACTIVE = "active"
    DEAD = "dead"
    SOLD = "sold"
    TRANSFERRED = "transferred"


class HealthStatus(str, Enum):
    """Denormalised health status on cattle. Written only by health record mutations."""

    HEALTHY = "healthy"
    SICK = "sick"
    UNDER_TREATMENT = "under_treatment"
    QUARANTINE = "quarantine"


class BreedingStatus(str, Enum):
    """Denormalised breeding status on cattle. Written only by breeding record mutations."""

    OPEN = "open"
    BRED = "bred"
    PREGNANT = "pregnant"


class HealthRecordStatus(str, Enum):
    ONGOING = "ongoing"
    COMPLETED = "completed"
    FOLLOW_UP = "follow_up"


class BreedingType(str, Enum):
    NATURAL = "natural"
    ARTIFICIAL = "artificial"
    EMBRYO_TRANSFER = "embryo_transfer"


class BreedingRecordStatus(str, Enum):
    PENDING = "pending"
    SUCCESSFUL = "successful"
    FAILED = "failed"
    PREGNANT = "pregnant"
    CALVED = "calved"


class PregnancyStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    NEGATIVE = "negative"


class FeedType(str, Enum):
    HAY = "hay"
    SILAGE = "silage"
    CONCENTRATE = "concentrate"
    MINERAL = "mineral"
    SUPPLEMENT = "supplement"


class UnitOfMeasure(str, Enum):
    KG = "kg"
    BALE = "bale"
    BAG = "bag"
    TON = "ton"


class StockStatus(str, Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    EXPIRED = "expired"


class FeedTransactionType(str, Enum):
    INITIAL_STOCK = "initial_stock"
    ADJUSTMENT_ADD = "adjustment_add"
    ADJUSTMENT_SUBTRACT = "adjustment_subtract"


class WorkerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Cattle:
    id: int
    tag_number: str
    breed: str
    date_of_birth: date
    gender: Gender
    status: CattleStatus = CattleStatus.ACTIVE
    cattle_name: Optional[str] = None
    current_weight: Optional[Decimal] = None
    assigned_worker: Optional[int] = None
    notes: Optional[str] = None
    health_status: HealthStatus = HealthStatus.HEALTHY
    last_checkup: Optional[date] = None
    next_checkup: Optional[date] = None
    breeding_status: BreedingStatus = BreedingStatus.OPEN
    last_breeding_date: Optional[date] = None
    expected_delivery_date: Optional[date] = None
    version: int = 1


@dataclass(frozen=True)
class HealthRecord:
    id: int
    cattle_id: int
    date_of_checkup: date
    health_issue: str
    treatment_given: str
    treatment_cost: Decimal
    attended_by: int
    status: HealthRecordStatus
    symptoms: Optional[str] = None
    diagnosis: Optional[str] = None
    medications: Optional[str] = None
    next_checkup_date: Optional[date] = None
    notes: Optional[str] = None
    version: int = 1


@dataclass(frozen=True)
class BreedingRecord:
    id: int
    cattle_id: int
    breeding_date: date
    breeding_type: BreedingType
    sire_details: str
    breeding_cost: Decimal
    status: BreedingRecordStatus
    expected_date: date
    semen_batch: Optional[str] = None
    technician_id: Optional[int] = None
    notes: Optional[str] = None
    pregnancy_status: Optional[PregnancyStatus] = None
    pregnancy_check_date: Optional[date] = None
    calving_date: Optional[date] = None
    calf_tag_number: Optional[str] = None
    version: int = 1


@dataclass(frozen=True)
class FeedInventoryItem:
    id: int
    feed_name: str
    feed_type: FeedType
    unit_of_measure: UnitOfMeasure
    unit_cost: Decimal
    current_quantity: Decimal
    reorder_level: Decimal
    expiry_date: date
    status: StockStatus
    description: Optional[str] = None
    supplier: Optional[str] = None
    storage_location: Optional[str] = None
    notes: Optional[str] = None
    version: int = 1


@dataclass(frozen=True)
class FeedTransaction:
    """Append-only stock ledger line."""

    feed_id: int
    transaction_type: FeedTransactionType
    quantity: Decimal
    unit_cost: Decimal
    total_cost: Decimal
    notes: Optional[str] = None


@dataclass(frozen=True)
class Worker:
    """Worker employment record joined with its login account."""

    id: int
    user_id: int
    full_name: str
    email: str
    phone_number: str
    role: str
    status: WorkerStatus
    id_number: str
    date_hired: date
    salary: Optional[Decimal] = None
    assigned_duties: Optional[str] = None
    version: int = 1


DomainRecord = Union[Cattle, HealthRecord, BreedingRecord, FeedInventoryItem, Worker]


@dataclass(frozen=True)
class ChangeRequest:
    """Ephemeral input to the record service: what to change, on which kind, with which field values."""

    kind: RecordKind
    operation: Operation
    fields: Dict[str, Any] = field(default_factory=dict)
    record_id: Optional[int] = None
    expected_version: Optional[int] = None

"""Domain models. Pure business entities."""

from herdbook.domain.models.records import (
    AuditAction,
    BreedingRecord,
    BreedingRecordStatus,
    BreedingStatus,
    BreedingType,
    Cattle,
    CattleStatus,
    ChangeRequest,
    DomainRecord,
    FeedInventoryItem,
    FeedTransaction,
    FeedTransactionType,
    FeedType,
    Gender,
    HealthRecord,
    HealthRecordStatus,
    HealthStatus,
    Operation,
    PregnancyStatus,
    RecordKind,
    StockStatus,
    UnitOfMeasure,
    Worker,
    WorkerStatus,
)

__all__ = [
    "AuditAction",
    "BreedingRecord",
    "BreedingRecordStatus",
    "BreedingStatus",
    "BreedingType",
    "Cattle",
    "CattleStatus",
    "ChangeRequest",
    "DomainRecord",
    "FeedInventoryItem",
    "FeedTransaction",
    "FeedTransactionType",
    "FeedType",
    "Gender",
    "HealthRecord",
    "HealthRecordStatus",
    "HealthStatus",
    "Operation",
    "PregnancyStatus",
    "RecordKind",
    "StockStatus",
    "UnitOfMeasure",
    "Worker",
    "WorkerStatus",
]

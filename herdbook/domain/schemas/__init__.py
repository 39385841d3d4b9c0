from herdbook.domain.schemas.records import (
    BreedingRecordFields,
    CattleFields,
    FeedFields,
    HealthRecordFields,
    MutationResponse,
    RecordFields,
    WorkerFields,
)

__all__ = [
    "RecordFields",
    "CattleFields",
    "HealthRecordFields",
    "BreedingRecordFields",
    "FeedFields",
    "WorkerFields",
    "MutationResponse",
]

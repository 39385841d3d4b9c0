# Application layer: the record mutation service and its per-kind handlers.

from herdbook.application.exceptions import (
    ApplicationError,
    PersistenceError,
    RecordNotFoundError,
    StaleRecordError,
)
from herdbook.application.handlers import default_handlers
from herdbook.application.record_service import MutationResult, RecordMutationService
from herdbook.application.repositories import UnitOfWork

__all__ = [
    "ApplicationError",
    "PersistenceError",
    "RecordNotFoundError",
    "StaleRecordError",
    "MutationResult",
    "RecordMutationService",
    "UnitOfWork",
    "default_handlers",
]

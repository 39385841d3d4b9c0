"""Per-kind record handlers for the record mutation service."""

from typing import Dict

from herdbook.application.handlers.base import RecordHandler
from herdbook.application.handlers.breeding import BreedingRecordHandler
from herdbook.application.handlers.cattle import CattleHandler
from herdbook.application.handlers.feed import FeedHandler
from herdbook.application.handlers.health import HealthRecordHandler
from herdbook.application.handlers.workers import WorkerHandler
from herdbook.core.clock import Clock
from herdbook.domain.models.records import RecordKind
from herdbook.security.passwords import PasswordHasher


def default_handlers(clock: Clock, password_hasher: PasswordHasher) -> Dict[RecordKind, RecordHandler]:
    handlers = (
        CattleHandler(clock),
        HealthRecordHandler(),
        BreedingRecordHandler(),
        FeedHandler(clock),
        WorkerHandler(password_hasher),
    )
    return {handler.kind: handler for handler in handlers}


__all__ = [
    "RecordHandler",
    "CattleHandler",
    "HealthRecordHandler",
    "BreedingRecordHandler",
    "FeedHandler",
    "WorkerHandler",
    "default_handlers",
]

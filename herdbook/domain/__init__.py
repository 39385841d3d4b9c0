"""Domain layer: records, derivations, schemas, validators, exceptions. Pure business logic only."""

from herdbook.domain.derivations import (
    breeding_status_for,
    expected_delivery_date,
    health_status_for,
    stock_status,
)
from herdbook.domain.exceptions import DomainError, DomainValidationError
from herdbook.domain.models import ChangeRequest, Operation, RecordKind
from herdbook.domain.schemas import MutationResponse

__all__ = [
    "ChangeRequest",
    "DomainError",
    "DomainValidationError",
    "MutationResponse",
    "Operation",
    "RecordKind",
    "breeding_status_for",
    "expected_delivery_date",
    "health_status_for",
    "stock_status",
]

"""Feed inventory handler. Derives stock status and writes the stock ledger."""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from herdbook.application.handlers.base import RecordHandler
from herdbook.application.repositories import RecordRepository, UnitOfWork
from herdbook.core.clock import Clock
from herdbook.domain.derivations import initial_stock_entry, stock_adjustment_entry, stock_status
from herdbook.domain.models.records import FeedInventoryItem, Operation, RecordKind
from herdbook.domain.validators.record_validator import validate_feed_fields


class FeedHandler(RecordHandler[FeedInventoryItem]):
    kind = RecordKind.FEED
    label = "Feed"
    audit_fields = ("feed_name", "feed_type", "current_quantity", "unit_cost", "status")

    def __init__(self, clock: Clock) -> None:
        self._clock = clock

    def repository(self, uow: UnitOfWork) -> RecordRepository[FeedInventoryItem]:
        return uow.feed

    async def validate(
        self,
        uow: UnitOfWork,
        fields: Mapping[str, Any],
        *,
        current: Optional[FeedInventoryItem],
    ) -> Tuple[Dict[str, Any], List[str]]:
        return validate_feed_fields(fields)

    def derive(self, values: Dict[str, Any], *, current: Optional[FeedInventoryItem]) -> Dict[str, Any]:
        values["status"] = stock_status(
            values["current_quantity"],
            values["reorder_level"],
            values["expiry_date"],
            self._clock.today(),
        )
        return values

    async def propagate(
        self,
        uow: UnitOfWork,
        operation: Operation,
        record: FeedInventoryItem,
        previous: Optional[FeedInventoryItem],
    ) -> None:
        if operation is Operation.CREATE:
            entry = initial_stock_entry(record.id, record.current_quantity, record.unit_cost)
        elif operation is Operation.UPDATE and previous is not None:
            entry = stock_adjustment_entry(
                record.id, previous.current_quantity, record.current_quantity, record.unit_cost
            )
        else:
            entry = None
        if entry is not None:
            await uow.feed_transactions.append(entry)

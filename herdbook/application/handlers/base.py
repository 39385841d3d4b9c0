"""Per-kind record handler contract used by the record mutation service."""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar

from herdbook.application.repositories import RecordRepository, UnitOfWork
from herdbook.domain.models.records import Operation, RecordKind

R = TypeVar("R")


class RecordHandler(ABC, Generic[R]):
    """
    Kind-specific steps of a mutation: validation rules, derived fields, the primary
    write, propagation to denormalised parent fields, and the audit snapshot.
    The service owns ordering, transactions and error handling.
    """

    kind: ClassVar[RecordKind]
    label: ClassVar[str]
    audit_fields: ClassVar[Tuple[str, ...]]

    @abstractmethod
    def repository(self, uow: UnitOfWork) -> RecordRepository[R]:
        ...

    @abstractmethod
    async def validate(
        self,
        uow: UnitOfWork,
        fields: Mapping[str, Any],
        *,
        current: Optional[R],
    ) -> Tuple[Dict[str, Any], List[str]]:
        """Parsed values and the complete list of violations, including rules that need the database."""
        ...

    @staticmethod
    def references_changed(values: Mapping[str, Any], current: Optional[R], name: str) -> bool:
        """
        True if the reference in values[name] is set and new to this record. Existing
        references are not re-checked, so an old record stays editable after the
        animal is sold or the vet leaves.
        """
        value = values.get(name)
        return value is not None and (current is None or getattr(current, name) != value)

    def derive(self, values: Dict[str, Any], *, current: Optional[R]) -> Dict[str, Any]:
        """Add computed fields. Called only with values that passed validation."""
        return values

    async def load(self, uow: UnitOfWork, record_id: int) -> Optional[R]:
        return await self.repository(uow).get(record_id, for_update=True)

    async def write_create(self, uow: UnitOfWork, values: Dict[str, Any]) -> R:
        return await self.repository(uow).add(values)

    async def write_update(self, uow: UnitOfWork, current: R, values: Dict[str, Any]) -> R:
        return await self.repository(uow).update(current.id, values)

    async def write_delete(self, uow: UnitOfWork, current: R) -> None:
        await self.repository(uow).soft_delete(current.id)

    async def propagate(
        self,
        uow: UnitOfWork,
        operation: Operation,
        record: R,
        previous: Optional[R],
    ) -> None:
        """Keep dependent state in step with the primary write. Nothing by default."""

    def snapshot(self, record: R) -> Dict[str, Any]:
        """Only the fields worth reviewing in the audit trail."""
        return {name: getattr(record, name) for name in self.audit_fields}

"""Cattle register handler. Health and breeding status are never written here."""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from herdbook.application.handlers.base import RecordHandler
from herdbook.application.repositories import CattleRepository, UnitOfWork
from herdbook.core.clock import Clock
from herdbook.domain.models.records import Cattle, RecordKind
from herdbook.domain.validators.record_validator import CATTLE_CARER_ROLES, validate_cattle_fields


class CattleHandler(RecordHandler[Cattle]):
    kind = RecordKind.CATTLE
    label = "Cattle"
    audit_fields = ("tag_number", "cattle_name", "breed", "date_of_birth", "gender", "status")

    def __init__(self, clock: Clock) -> None:
        self._clock = clock

    def repository(self, uow: UnitOfWork) -> CattleRepository:
        return uow.cattle

    async def validate(
        self,
        uow: UnitOfWork,
        fields: Mapping[str, Any],
        *,
        current: Optional[Cattle],
    ) -> Tuple[Dict[str, Any], List[str]]:
        values, errors = validate_cattle_fields(
            fields, today=self._clock.today(), creating=current is None
        )
        tag_number = values["tag_number"]
        if tag_number is not None and await uow.cattle.exists(
            tag_number=tag_number,
            exclude_id=current.id if current is not None else None,
        ):
            errors.append("Tag number already exists")
        if self.references_changed(values, current, "assigned_worker") and not await uow.user_accounts.is_active(
            values["assigned_worker"], roles=CATTLE_CARER_ROLES
        ):
            errors.append("Assigned worker does not exist")
        return values, errors
